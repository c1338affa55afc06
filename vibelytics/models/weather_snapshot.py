"""
Weather snapshot database model.

Each row is one reading fetched from the National Weather Service for a user.
Rows are never overwritten; the newest row inside the freshness window is
served instead of calling the provider again.
"""

from sqlalchemy import Column, DateTime, Float, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import relationship

from vibelytics.models.base import BaseModel


class WeatherSnapshot(BaseModel):
    """
    Cached weather reading for a user.
    """

    __tablename__ = "weather_snapshots"

    user_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    city = Column(String(100), nullable=False)
    country = Column(String(8), nullable=False)

    temperature = Column(Float, nullable=False, comment="Air temperature in °C")
    feels_like = Column(Float, nullable=True, comment="Apparent temperature in °C")
    description = Column(Text, nullable=False)
    main = Column(String(32), nullable=False, comment="Condition category, e.g. Clear, Clouds, Rain")
    icon = Column(String(8), nullable=True, comment="OpenWeatherMap style icon code")
    humidity = Column(Float, nullable=True, comment="Relative humidity in %")
    wind_speed = Column(Float, nullable=True, comment="Wind speed in m/s")

    date = Column(DateTime(timezone=True), nullable=False, comment="Observation time (UTC)")

    user = relationship("User", back_populates="weather_snapshots")

    __table_args__ = (
        Index("idx_weather_user_date", "user_id", "date"),
        Index("idx_weather_user_city_date", "user_id", "city", "date"),
    )

    def __repr__(self):
        return f"<WeatherSnapshot(id={self.id}, user_id={self.user_id}, city={self.city}, date={self.date})>"
