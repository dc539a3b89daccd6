"""Application settings loaded from environment variables."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    app_name: str = "Weatherdash"
    app_version: str = "0.1.0"
    api_prefix: str = "/api"
    service_name: str = "weatherdash"
    log_level: str = "INFO"
    # OpenWeatherMap
    openweather_api_key: str = ""
    openweather_base: str = "https://api.openweathermap.org"
    openweather_units: str = "metric"
    openweather_geo_limit: int = 5
    weather_api_timeout: float = 10.0
    # Dashboard behaviour
    search_debounce_ms: int = 500
    hourly_forecast_limit: int = 8
    daily_forecast_offset: int = 7
    daily_forecast_step: int = 8
    broken_clouds_icon: str = "04.0d"
    openweather_icon_base: str = "https://openweathermap.org/img/wn"
    # Fallback when the browser refuses geolocation (London)
    default_latitude: float = 51.5073219
    default_longitude: float = -0.1276474
    max_views: int = 256
    view_cookie_name: str = "view_id"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @property
    def search_debounce_seconds(self) -> float:
        return max(0, self.search_debounce_ms) / 1000.0


settings = Settings()

__all__ = ["settings", "Settings"]
