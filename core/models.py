"""
core/models.py -- Domain dataclasses for the weather retrieval pipeline.

Coordinate and WeatherSnapshot are produced by core/fetcher.py and consumed
by core/pipeline.py. Neither is persisted.

The RetrievalOutcome variants are what retrieve_weather() hands back to the
transport layer. They carry data only; api/ decides the status codes.
"""

from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True)
class Coordinate:
    latitude: float
    longitude: float

    def as_query(self) -> str:
        """Render as the "lat,lon" string weather services accept as a location."""
        return f"{self.latitude},{self.longitude}"


@dataclass(frozen=True)
class WeatherSnapshot:
    temperature: float  # Celsius
    feels_like: float  # Celsius
    condition: str
    last_updated: str  # as reported by the weather service, local time


# ---------------------------------------------------------------------------
# Retrieval outcomes
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Success:
    weather: WeatherSnapshot


@dataclass(frozen=True)
class Unauthorized:
    message: str = "Unauthorized access."


@dataclass(frozen=True)
class GeolocationQueryFailed:
    message: str = "Could not fetch user location."


@dataclass(frozen=True)
class WeatherQueryFailed:
    message: str = "Could not fetch weather information."


RetrievalOutcome = Union[Success, Unauthorized, GeolocationQueryFailed, WeatherQueryFailed]
