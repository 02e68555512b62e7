# value objects and unit helpers shared by providers, the aggregator and the http layer

from dataclasses import dataclass
from typing import List

COMPLETED = "completed"
TIMEOUT = "timeout"


@dataclass(frozen=True)
class Coordinates:
    # first match returned by the geocoder
    lat: float
    lng: float


@dataclass(frozen=True)
class Aggregation:
    # outcome of one fan-out, built per request and thrown away after the response
    city: str
    temp: float
    status: str
    responded: int
    expected: int

    @property
    def degraded(self) -> bool:
        return self.status == TIMEOUT


def kelvin_to_celsius(kelvin: float) -> float:
    return kelvin - 273.15


def fahrenheit_to_celsius(fahrenheit: float) -> float:
    return (fahrenheit - 32) / 1.8


def mean(values: List[float]) -> float:
    # simple average that returns NaN on empty input to avoid zero division
    return sum(values) / len(values) if values else float("nan")
