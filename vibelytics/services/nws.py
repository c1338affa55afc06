"""
National Weather Service forecast client.

Resolves coordinates to an NWS grid point, fetches the forecast for that
grid and turns its first period into a ForecastReading. All failures are
reported as UpstreamUnavailable.

API reference: https://www.weather.gov/documentation/services-web-api
"""

import asyncio
from dataclasses import asdict, dataclass
from typing import Any, Dict, Optional

import aiohttp

from vibelytics.config import settings
from vibelytics.core.exceptions import UpstreamUnavailable
from vibelytics.utils.logging_config import get_logger
from vibelytics.utils.weather import classify_condition, fahrenheit_to_celsius, parse_wind_speed

logger = get_logger(__name__)


@dataclass
class ForecastReading:
    """Current conditions extracted from an NWS forecast, in metric units."""

    city: str
    country: str
    temperature: int
    feels_like: Optional[float]
    description: str
    main: str
    icon: str
    humidity: Optional[float]
    wind_speed: Optional[float]

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class NWSClient:
    """
    Thin async client for api.weather.gov.

    A new aiohttp session is opened per lookup; every request is bounded by
    ``HTTP_TIMEOUT_SECONDS``.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        user_agent: Optional[str] = None,
        timeout: Optional[float] = None,
    ):
        self.base_url = (base_url or settings.NWS_BASE_URL).rstrip("/")
        self.user_agent = user_agent or settings.NWS_USER_AGENT
        self.timeout = aiohttp.ClientTimeout(total=timeout or settings.HTTP_TIMEOUT_SECONDS)

    @property
    def headers(self) -> Dict[str, str]:
        # NWS rejects requests without a User-Agent identifying the caller.
        return {"User-Agent": self.user_agent, "Accept": "application/geo+json"}

    async def get_current_reading(self, latitude: float, longitude: float) -> ForecastReading:
        """
        Fetch current conditions for a coordinate pair.

        Args:
            latitude: Decimal degrees
            longitude: Decimal degrees

        Returns:
            ForecastReading built from the first forecast period

        Raises:
            UpstreamUnavailable: On HTTP errors, timeouts or malformed payloads
        """
        async with aiohttp.ClientSession(timeout=self.timeout, headers=self.headers) as session:
            points_url = f"{self.base_url}/points/{round(latitude, 4)},{round(longitude, 4)}"
            points = await self._get_json(session, points_url)

            properties = points.get("properties") if isinstance(points, dict) else None
            if not isinstance(properties, dict):
                raise UpstreamUnavailable(
                    "Invalid response from NWS points endpoint",
                    detail="missing 'properties'",
                )
            grid_id = properties.get("gridId")
            grid_x = properties.get("gridX")
            grid_y = properties.get("gridY")
            if grid_id is None or grid_x is None or grid_y is None:
                raise UpstreamUnavailable(
                    "Invalid response from NWS points endpoint",
                    detail="missing grid reference",
                )
            city = self.parse_city(properties.get("relativeLocation"))

            forecast_url = f"{self.base_url}/gridpoints/{grid_id}/{grid_x},{grid_y}/forecast"
            forecast = await self._get_json(session, forecast_url)

        forecast_properties = forecast.get("properties") if isinstance(forecast, dict) else None
        periods = forecast_properties.get("periods") if isinstance(forecast_properties, dict) else None
        if not isinstance(periods, list) or not periods:
            raise UpstreamUnavailable(
                "Invalid forecast data from NWS API",
                detail="missing forecast periods",
            )

        return self.parse_period(periods[0], city=city)

    @staticmethod
    def parse_city(relative_location: Any) -> str:
        """City name from a points ``relativeLocation`` feature, else "Unknown"."""
        if not isinstance(relative_location, dict):
            return "Unknown"
        location_properties = relative_location.get("properties")
        if not isinstance(location_properties, dict):
            return "Unknown"
        city = location_properties.get("city")
        return city if isinstance(city, str) and city else "Unknown"

    @staticmethod
    def parse_period(period: Dict[str, Any], city: str = "Unknown") -> ForecastReading:
        """
        Convert one NWS forecast period into a ForecastReading.

        Raises:
            UpstreamUnavailable: If the period has no numeric temperature
        """
        temp_f = period.get("temperature") if isinstance(period, dict) else None
        if isinstance(temp_f, bool) or not isinstance(temp_f, (int, float)):
            raise UpstreamUnavailable(
                "Invalid forecast data from NWS API",
                detail="forecast period has no numeric temperature",
            )

        temperature = fahrenheit_to_celsius(temp_f)
        short_forecast = _text(period.get("shortForecast"))
        detailed_forecast = _text(period.get("detailedForecast"))
        main, icon = classify_condition(short_forecast)

        return ForecastReading(
            city=city,
            country="US",  # NWS only covers the United States
            temperature=temperature,
            feels_like=temperature,  # not published by the forecast endpoint
            description=detailed_forecast or short_forecast or "Unknown",
            main=main,
            icon=icon,
            humidity=None,
            wind_speed=parse_wind_speed(period.get("windSpeed")),
        )

    async def _get_json(self, session: aiohttp.ClientSession, url: str) -> Any:
        try:
            async with session.get(url) as resp:
                try:
                    data = await resp.json(content_type=None)
                except (aiohttp.ContentTypeError, ValueError):
                    data = None

                if resp.status >= 400:
                    body = data if isinstance(data, dict) else {}
                    message = (
                        _text(body.get("detail"))
                        or _text(body.get("title"))
                        or "Error fetching weather data from NWS"
                    )
                    logger.warning(f"NWS returned {resp.status} for {url}: {message}")
                    raise UpstreamUnavailable(
                        message,
                        status_code=resp.status,
                        detail={"status": resp.status, "data": data},
                    )
                if data is None:
                    raise UpstreamUnavailable(
                        "Invalid response from NWS API",
                        detail=f"non-JSON body from {url}",
                    )
                return data
        except asyncio.TimeoutError as exc:
            logger.warning(f"NWS request timed out: {url}")
            raise UpstreamUnavailable("Weather provider timed out", detail=url) from exc
        except aiohttp.ClientError as exc:
            logger.warning(f"NWS request failed: {url}: {exc}")
            raise UpstreamUnavailable("Weather provider unreachable", detail=str(exc)) from exc


def _text(value: Any) -> str:
    return value.strip() if isinstance(value, str) else ""


def get_weather_provider() -> NWSClient:
    """Dependency returning the weather provider used by the weather routes."""
    return NWSClient()
