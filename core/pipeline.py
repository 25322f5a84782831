"""
core/pipeline.py -- Authorized weather retrieval.

Token check, then geolocation, then weather. Each stage's output is the next
stage's input and a failed stage ends the request with its own outcome, so
clients can tell "your location could not be resolved" apart from "the
weather service is unavailable".

No side effects beyond the two HTTP calls. Designed to be called from the
REST route (api/routes/v1/weather.py) and directly from tests.
"""

from __future__ import annotations

import ipaddress
import logging
import random
from typing import TYPE_CHECKING, Optional

from core.models import (
    GeolocationQueryFailed,
    RetrievalOutcome,
    Success,
    Unauthorized,
    WeatherQueryFailed,
)

if TYPE_CHECKING:
    from auth.tokens import TokenIssuer
    from core.fetcher import WeatherClient

logger = logging.getLogger("weathergate.pipeline")

# Public block used in place of loopback callers when substitution is on.
_SUBSTITUTE_NETWORK = ipaddress.IPv4Network("78.160.0.0/11")


def location_key(client_host: str, substitute_loopback: bool = False) -> str:
    """Return the string the geolocation service is queried with.

    Normally the caller's address literal. With substitute_loopback, a
    loopback caller is replaced by a random address from _SUBSTITUTE_NETWORK
    so local runs still get a real location. Hosts that are not IP literals
    are passed through unchanged.
    """
    if not substitute_loopback:
        return client_host
    try:
        address = ipaddress.ip_address(client_host)
    except ValueError:
        return client_host
    if not address.is_loopback:
        return client_host
    offset = random.randrange(_SUBSTITUTE_NETWORK.num_addresses)  # noqa: S311 -- not security sensitive
    return str(_SUBSTITUTE_NETWORK.network_address + offset)


def retrieve_weather(
    token: str,
    client_host: Optional[str],
    *,
    issuer: TokenIssuer,
    client: WeatherClient,
    substitute_loopback: bool = False,
) -> RetrievalOutcome:
    """Return current weather at the caller's location, or the failing stage.

    The token is verified before anything else; an invalid one makes no
    external calls. The weather call is skipped whenever geolocation fails.
    """
    if not issuer.verify(token):
        logger.info("Weather request rejected: invalid or expired token")
        return Unauthorized()

    if not client_host:
        logger.warning("Weather request has no client address")
        return GeolocationQueryFailed("Could not fetch user IP.")

    coordinate = client.resolve_coordinates(location_key(client_host, substitute_loopback))
    if coordinate is None:
        return GeolocationQueryFailed()

    weather = client.fetch_weather(coordinate)
    if weather is None:
        return WeatherQueryFailed()

    return Success(weather)
