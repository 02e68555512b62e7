# city name -> coordinates, for providers that only accept lat/lng

from __future__ import annotations
import logging
from typing import Optional
from .client import JSONClient, NoLocationMatch, extract, extract_float
from .models import Coordinates

log = logging.getLogger(__name__)


class GoogleGeocoder(JSONClient):
    name = "geocode"
    BASE_URL = "https://maps.googleapis.com"

    def __init__(self, api_key: Optional[str] = None, base_url: str = BASE_URL, **kwargs):
        super().__init__(base_url, **kwargs)
        self.api_key = api_key

    def resolve(self, city: str) -> Coordinates:
        params = {"address": city}
        if self.api_key:
            params["key"] = self.api_key
        data = self.get_json("/maps/api/geocode/json", params=params)

        results = extract(data, "results", source=self.name)
        if not results:
            raise NoLocationMatch(f"{self.name}: no location found for {city!r}")

        lat = extract_float(results[0], "geometry", "location", "lat", source=self.name)
        lng = extract_float(results[0], "geometry", "location", "lng", source=self.name)
        log.info("Coords of %s located: %f, %f", city, lat, lng)
        return Coordinates(lat=lat, lng=lng)
