# concrete weather sources; each one owns its unit conversion so callers only ever see celsius

from __future__ import annotations
import logging
from typing import Optional, Protocol
from .client import JSONClient, ProviderError, extract_float
from .geocode import GoogleGeocoder
from .models import fahrenheit_to_celsius, kelvin_to_celsius

log = logging.getLogger(__name__)


class WeatherProvider(Protocol):
    name: str

    def temperature(self, city: str) -> float:
        """Return the current temperature for ``city`` in Celsius."""
        ...


class OpenWeatherMap(JSONClient):
    # reports kelvin
    name = "openWeatherMap"
    BASE_URL = "http://api.openweathermap.org"

    def __init__(self, api_key: Optional[str] = None, base_url: str = BASE_URL, **kwargs):
        super().__init__(base_url, **kwargs)
        self.api_key = api_key

    def temperature(self, city: str) -> float:
        params = {"q": city}
        if self.api_key:
            params["appid"] = self.api_key
        data = self.get_json("/data/2.5/weather", params=params)

        celsius = kelvin_to_celsius(extract_float(data, "main", "temp", source=self.name))
        log.info("%s: %s: %.2f", self.name, city, celsius)
        return celsius


class WeatherUnderground(JSONClient):
    # already celsius
    name = "weatherUnderground"
    BASE_URL = "http://api.wunderground.com"

    def __init__(self, api_key: str, base_url: str = BASE_URL, **kwargs):
        super().__init__(base_url, **kwargs)
        self.api_key = api_key

    def temperature(self, city: str) -> float:
        data = self.get_json(f"/api/{self.api_key}/conditions/q/{city}.json")

        celsius = extract_float(data, "current_observation", "temp_c", source=self.name)
        log.info("%s: %s: %.2f", self.name, city, celsius)
        return celsius


class Forecast(JSONClient):
    # forecast.io takes coordinates only and reports fahrenheit
    name = "forecast"
    BASE_URL = "https://api.forecast.io"

    def __init__(
        self,
        api_key: str,
        geocoder: Optional[GoogleGeocoder] = None,
        requires_coords: bool = True,
        base_url: str = BASE_URL,
        **kwargs,
    ):
        super().__init__(base_url, **kwargs)
        self.api_key = api_key
        self.requires_coords = requires_coords
        self.geocoder = geocoder or GoogleGeocoder(timeout=self.timeout)

    def temperature(self, city: str) -> float:
        if not self.requires_coords:
            raise ProviderError(f"{self.name}: lookup by name is not supported, enable coordinates")
        coords = self.geocoder.resolve(city)
        data = self.get_json(f"/forecast/{self.api_key}/{coords.lat:.7f},{coords.lng:.7f}")

        celsius = fahrenheit_to_celsius(
            extract_float(data, "currently", "temperature", source=self.name)
        )
        log.info("%s: %s: %.2f", self.name, city, celsius)
        return celsius
