"""
Weather conversion utilities.

Pure helpers that turn National Weather Service forecast values into the
units and categories stored on a WeatherSnapshot.
"""

import math
from typing import Optional, Tuple

MPH_TO_MS = 0.44704

# Checked in order; the first category whose keyword appears wins.
# "Chance Rain And Thunderstorms" is therefore Rain, not Thunderstorm.
CONDITION_KEYWORDS: Tuple[Tuple[str, Tuple[str, ...], str], ...] = (
    ("Clear", ("sunny", "clear"), "01d"),
    ("Clouds", ("cloud",), "03d"),
    ("Rain", ("rain", "shower"), "10d"),
    ("Snow", ("snow",), "13d"),
    ("Thunderstorm", ("thunder",), "11d"),
)
UNKNOWN_CONDITION = "Unknown"
DEFAULT_ICON = "01d"


def fahrenheit_to_celsius(temp_f: float) -> int:
    """
    Convert °F to °C rounded to the nearest integer.

    Halves round toward positive infinity, so -0.5°C becomes 0°C.

    Args:
        temp_f: Temperature in Fahrenheit

    Returns:
        Temperature in whole degrees Celsius
    """
    celsius = (temp_f - 32) * 5 / 9
    return math.floor(celsius + 0.5)


def classify_condition(short_forecast: Optional[str]) -> Tuple[str, str]:
    """
    Map a free-text forecast to a condition category and icon code.

    Args:
        short_forecast: e.g. "Mostly Cloudy", "Chance Rain Showers"

    Returns:
        (category, icon) where category is one of Clear, Clouds, Rain,
        Snow, Thunderstorm or Unknown
    """
    text = (short_forecast or "").lower()
    for category, keywords, icon in CONDITION_KEYWORDS:
        if any(keyword in text for keyword in keywords):
            return category, icon
    return UNKNOWN_CONDITION, DEFAULT_ICON


def parse_wind_speed(wind_speed: Optional[str]) -> Optional[float]:
    """
    Convert an NWS wind string to metres per second.

    NWS reports values like "10 mph" or "5 to 10 mph"; the first number is used.

    Args:
        wind_speed: Wind speed text from a forecast period

    Returns:
        Wind speed in m/s, or None if missing or unparseable
    """
    if not wind_speed:
        return None
    first = str(wind_speed).strip().split(" ")[0]
    try:
        mph = float(first)
    except ValueError:
        return None
    return mph * MPH_TO_MS
