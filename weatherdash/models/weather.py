"""Weather payloads normalised from OpenWeatherMap responses."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any
from urllib.parse import urlencode


@dataclass
class Location:
    name: str
    country: str
    latitude: float
    longitude: float
    state: str | None = None

    @classmethod
    def from_payload(cls, item: dict[str, Any]) -> "Location":
        return cls(
            name=item["name"],
            country=item.get("country", ""),
            latitude=float(item["lat"]),
            longitude=float(item["lon"]),
            state=item.get("state"),
        )

    @property
    def label(self) -> str:
        return f"{self.name}, {self.country}"

    @property
    def subtitle(self) -> str:
        return f"{self.state or ''} {self.country}".strip()

    @property
    def weather_path(self) -> str:
        return "/weather?" + urlencode({"lat": self.latitude, "lon": self.longitude})


@dataclass
class CurrentWeather:
    description: str
    icon_id: str
    temperature: float
    feels_like: float
    pressure: int
    humidity: int
    visibility_meters: int
    sunrise_unix_utc: int
    sunset_unix_utc: int
    timezone_offset_seconds: int
    observed_at_unix: int

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> "CurrentWeather":
        condition = payload["weather"][0]
        main = payload["main"]
        return cls(
            description=condition["description"],
            icon_id=condition["icon"],
            temperature=main["temp"],
            feels_like=main["feels_like"],
            pressure=main["pressure"],
            humidity=main["humidity"],
            visibility_meters=payload["visibility"],
            sunrise_unix_utc=payload["sys"]["sunrise"],
            sunset_unix_utc=payload["sys"]["sunset"],
            timezone_offset_seconds=payload["timezone"],
            observed_at_unix=payload["dt"],
        )


@dataclass
class HourlyForecastEntry:
    timestamp_unix: int
    temperature: float
    icon_id: str
    description: str
    wind_direction_degrees: float
    wind_speed_mps: float

    @classmethod
    def from_payload(cls, item: dict[str, Any]) -> "HourlyForecastEntry":
        condition = item["weather"][0]
        return cls(
            timestamp_unix=item["dt"],
            temperature=item["main"]["temp"],
            icon_id=condition["icon"],
            description=condition["description"],
            wind_direction_degrees=item["wind"]["deg"],
            wind_speed_mps=item["wind"]["speed"],
        )


@dataclass
class DailyForecastEntry:
    date_text: str
    max_temperature: float
    icon_id: str
    description: str

    @classmethod
    def from_payload(cls, item: dict[str, Any]) -> "DailyForecastEntry":
        condition = item["weather"][0]
        return cls(
            date_text=item["dt_txt"],
            max_temperature=item["main"]["temp_max"],
            icon_id=condition["icon"],
            description=condition["description"],
        )


@dataclass
class AirQuality:
    aqi_index: int
    no2: float
    o3: float
    so2: float
    pm2_5: float

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> "AirQuality":
        sample = payload["list"][0]
        components = sample["components"]
        return cls(
            aqi_index=int(sample["main"]["aqi"]),
            no2=components["no2"],
            o3=components["o3"],
            so2=components["so2"],
            pm2_5=components["pm2_5"],
        )


@dataclass
class WeatherReport:
    """Everything one dashboard view shows, filled in as each fetch lands."""

    latitude: float
    longitude: float
    current: CurrentWeather | None = None
    location_label: str | None = None
    hourly: list[HourlyForecastEntry] = field(default_factory=list)
    daily: list[DailyForecastEntry] = field(default_factory=list)
    forecast_timezone_offset: int = 0
    air_quality: AirQuality | None = None

    @property
    def complete(self) -> bool:
        return self.current is not None and self.air_quality is not None


__all__ = [
    "AirQuality",
    "CurrentWeather",
    "DailyForecastEntry",
    "HourlyForecastEntry",
    "Location",
    "WeatherReport",
]
