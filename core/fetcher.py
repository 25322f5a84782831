"""
fetcher.py -- External data fetching: IP geolocation and current weather.

Both calls return None on any failure (network error, non-2xx status,
unparseable body) and log a warning. The pipeline turns None into a distinct
outcome per stage, so callers never see requests exceptions.

No retries and no caching here. One failed call fails the request.
"""

import logging
from typing import Any, Optional

import requests

from core.models import Coordinate, WeatherSnapshot

logger = logging.getLogger("weathergate.fetcher")

GEOLOCATION_API = "https://ipapi.co"
WEATHER_API = "https://api.weatherapi.com/v1/current.json"


class WeatherClient:
    """HTTP client for the geolocation and weather services.

    Hosts are injectable so tests and staging deployments can point the client
    at fakes. One requests.Session is shared by both calls for connection
    pooling; max_redirects=3 replaces the requests default of 30.

    Usage:
        client = WeatherClient(api_key="...")
        coordinate = client.resolve_coordinates("176.12.12.12")
        weather = client.fetch_weather(coordinate) if coordinate else None
    """

    def __init__(
        self,
        api_key: str,
        geolocation_url: str = GEOLOCATION_API,
        weather_url: str = WEATHER_API,
        timeout: float = 10.0,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.api_key = api_key
        self.geolocation_url = geolocation_url.rstrip("/")
        self.weather_url = weather_url
        self.timeout = timeout
        if session is None:
            session = requests.Session()
            session.max_redirects = 3
        self._session = session

    def resolve_coordinates(self, location_key: str) -> Optional[Coordinate]:
        """Look up the coordinates of an IP address.

        The geolocation service answers GET /{ip}/latlong/ with a plain-text
        "latitude,longitude" body. Addresses it cannot place (private ranges,
        loopback) come back as "Undefined,Undefined" with a 200, which fails
        float parsing and is reported as a failure like any other.
        """
        url = f"{self.geolocation_url}/{location_key}/latlong/"
        try:
            resp = self._session.get(url, timeout=self.timeout)
            resp.raise_for_status()
            latitude, longitude = resp.text.strip().split(",", 1)
            return Coordinate(latitude=float(latitude), longitude=float(longitude))
        except requests.RequestException as e:
            logger.warning("Geolocation fetch failed for %s: %s", location_key, e)
        except ValueError:
            logger.warning("Geolocation response for %s could not be parsed", location_key)
        return None

    def fetch_weather(self, coordinate: Coordinate) -> Optional[WeatherSnapshot]:
        """Fetch current conditions for a coordinate."""
        params = {"q": coordinate.as_query(), "key": self.api_key}
        try:
            resp = self._session.get(self.weather_url, params=params, timeout=self.timeout)
            resp.raise_for_status()
            return _parse_weather(resp.json())
        except requests.RequestException as e:
            logger.warning("Weather fetch failed for %s: %s", coordinate.as_query(), e)
        except (KeyError, TypeError, ValueError):
            logger.warning("Weather response for %s could not be parsed", coordinate.as_query())
        return None

    def close(self) -> None:
        self._session.close()


def _parse_weather(body: dict[str, Any]) -> WeatherSnapshot:
    current = body["current"]
    return WeatherSnapshot(
        temperature=float(current["temp_c"]),
        feels_like=float(current["feelslike_c"]),
        condition=str(current["condition"]["text"]),
        last_updated=str(current["last_updated"]),
    )
