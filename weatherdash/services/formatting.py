"""Display helpers for timestamps, units and air-quality text."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from pathlib import Path

from weatherdash.core.config import settings

WEEKDAY_NAMES = ["Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday"]

MONTH_NAMES = ["Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"]

AQI_TEXT: dict[int, dict[str, str]] = {
    1: {
        "level": "Good",
        "message": "Air quality is considered satisfactory, and air pollution poses little or no risk",
    },
    2: {
        "level": "Fair",
        "message": (
            "Air quality is acceptable; however, for some pollutants there may be a moderate health "
            "concern for a very small number of people who are unusually sensitive to air pollution."
        ),
    },
    3: {
        "level": "Moderate",
        "message": (
            "Members of sensitive groups may experience health effects. "
            "The general public is not likely to be affected."
        ),
    },
    4: {
        "level": "Poor",
        "message": (
            "Everyone may begin to experience health effects; members of sensitive groups "
            "may experience more serious health effects"
        ),
    },
    5: {
        "level": "Very Poor",
        "message": (
            "Health warnings of emergency conditions. "
            "The entire population is more likely to be affected."
        ),
    },
}

BROKEN_CLOUDS = "broken clouds"

# Artwork shipped with the package; anything else comes from the provider CDN
ICON_DIR = Path(__file__).resolve().parent.parent / "static" / "images" / "weather_icons"


def _shifted(unix: int, tz_offset: int) -> datetime:
    # Offset applied to the instant, then read as UTC wall time
    return datetime.fromtimestamp(unix, tz=timezone.utc) + timedelta(seconds=tz_offset)


def _weekday_name(moment: datetime) -> str:
    # datetime.weekday() counts from Monday
    return WEEKDAY_NAMES[(moment.weekday() + 1) % 7]


def _twelve_hour(hour: int) -> tuple[int, str]:
    return hour % 12 or 12, "PM" if hour >= 12 else "AM"


def get_date(unix: int, tz_offset: int) -> str:
    """Return e.g. ``"Sunday 5, Jan"`` for the local date at ``unix``."""
    moment = _shifted(unix, tz_offset)
    return f"{_weekday_name(moment)} {moment.day}, {MONTH_NAMES[moment.month - 1]}"


def get_time(unix: int, tz_offset: int) -> str:
    moment = _shifted(unix, tz_offset)
    hour, period = _twelve_hour(moment.hour)
    return f"{hour}:{moment.minute:02d} {period}"


def get_hours(unix: int, tz_offset: int) -> str:
    hour, period = _twelve_hour(_shifted(unix, tz_offset).hour)
    return f"{hour} {period}"


def mps_to_kmh(mps: float) -> float:
    return mps * 3600 / 1000


def meters_to_km(meters: float) -> str:
    return f"{meters / 1000:g}"


def to_precision(value: float, digits: int = 3) -> str:
    """Format ``value`` with ``digits`` significant digits, keeping trailing zeros."""
    text = f"{value:#.{digits}g}"
    mantissa, sep, exponent = text.partition("e")
    return mantissa.rstrip(".") + sep + exponent


def weather_icon(description: str, icon: str, override: str | None = None) -> str:
    """Icon id to display; "broken clouds" always gets the override artwork."""
    if description != BROKEN_CLOUDS:
        return icon
    return settings.broken_clouds_icon if override is None else override


def icon_url(icon: str) -> str:
    if (ICON_DIR / f"{icon}.svg").is_file():
        return f"/static/images/weather_icons/{icon}.svg"
    return f"{settings.openweather_icon_base.rstrip('/')}/{icon}@2x.png"


def daily_label(date_text: str) -> tuple[str, str]:
    """Split a forecast ``dt_txt`` into ``("5 Jan", "Friday")``."""
    moment = datetime.strptime(date_text, "%Y-%m-%d %H:%M:%S")
    return f"{moment.day} {MONTH_NAMES[moment.month - 1]}", _weekday_name(moment)


def aqi_text(index: int) -> dict[str, str]:
    return AQI_TEXT.get(index, {"level": "Unknown", "message": "Air quality index unavailable"})


__all__ = [
    "AQI_TEXT",
    "MONTH_NAMES",
    "WEEKDAY_NAMES",
    "aqi_text",
    "daily_label",
    "icon_url",
    "get_date",
    "get_hours",
    "get_time",
    "meters_to_km",
    "mps_to_kmh",
    "to_precision",
    "weather_icon",
]
