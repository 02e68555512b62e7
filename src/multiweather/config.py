# process-wide settings, read once at start-up and passed down to constructors

from __future__ import annotations
from typing import Any, Literal, Optional, Tuple
from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from .geocode import GoogleGeocoder
from .providers import Forecast, OpenWeatherMap, WeatherProvider, WeatherUnderground


class ConfigError(ValueError):
    pass


class Settings(BaseSettings):
    """Settings loaded from environment variables and `.env`."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        frozen=True,
        populate_by_name=True,
    )

    openweathermap_api_key: Optional[str] = Field(
        default=None, alias="OPENWEATHERMAP_API_KEY", repr=False
    )
    wunderground_api_key: Optional[str] = Field(
        default=None, alias="WUNDERGROUND_API_KEY", repr=False
    )
    forecast_api_key: Optional[str] = Field(default=None, alias="FORECAST_API_KEY", repr=False)
    forecast_require_coords: bool = Field(default=True, alias="FORECAST_REQUIRE_COORDS")
    geocode_api_key: Optional[str] = Field(default=None, alias="GEOCODE_API_KEY", repr=False)

    deadline: float = Field(default=2.0, gt=0, alias="MULTIWEATHER_DEADLINE")
    http_timeout: float = Field(default=5.0, gt=0, alias="MULTIWEATHER_HTTP_TIMEOUT")
    timeout_is_error: bool = Field(default=False, alias="MULTIWEATHER_TIMEOUT_IS_ERROR")

    host: str = Field(default="0.0.0.0", alias="MULTIWEATHER_HOST")
    port: int = Field(default=8080, gt=0, le=65535, alias="MULTIWEATHER_PORT")
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO", alias="MULTIWEATHER_LOG_LEVEL"
    )

    @field_validator(
        "openweathermap_api_key",
        "wunderground_api_key",
        "forecast_api_key",
        "geocode_api_key",
        mode="before",
    )
    @classmethod
    def empty_string_to_none(cls, value: Any) -> Any:
        """Treat an exported-but-empty key as unset."""
        if isinstance(value, str) and value.strip() == "":
            return None
        return value

    @field_validator("log_level", mode="before")
    @classmethod
    def upper_log_level(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip().upper()
        return value


def load_settings(env_file: Optional[str] = ".env") -> Settings:
    """Load and validate settings, raising ConfigError on failure."""
    try:
        return Settings(_env_file=env_file)
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration: {exc}") from exc
    except OSError as exc:
        raise ConfigError(f"Failed reading environment/.env: {exc}") from exc


def build_providers(settings: Settings) -> Tuple[WeatherProvider, ...]:
    # openweathermap answers without a key, the others are enabled by theirs
    timeout = settings.http_timeout
    providers: list = [OpenWeatherMap(api_key=settings.openweathermap_api_key, timeout=timeout)]
    if settings.wunderground_api_key:
        providers.append(WeatherUnderground(api_key=settings.wunderground_api_key, timeout=timeout))
    if settings.forecast_api_key:
        geocoder = GoogleGeocoder(api_key=settings.geocode_api_key, timeout=timeout)
        providers.append(
            Forecast(
                api_key=settings.forecast_api_key,
                geocoder=geocoder,
                requires_coords=settings.forecast_require_coords,
                timeout=timeout,
            )
        )
    return tuple(providers)
