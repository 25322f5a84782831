"""
api/routes/v1/weather.py -- Authorized weather endpoint.

Routes:
  GET /api/v1/weather   -- current weather at the caller's IP location

Requires "Authorization: Bearer <token>" from POST /api/v1/login. The
handler is a plain def: the pipeline makes two blocking HTTP calls, and
FastAPI runs sync handlers in its threadpool so the event loop stays free.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from api.models import ErrorResponse, WeatherResponse
from api.responses import error_response
from auth.dependencies import get_bearer_token
from core.models import GeolocationQueryFailed, Success, Unauthorized, WeatherQueryFailed
from core.pipeline import retrieve_weather

router = APIRouter()

# Both upstream failures are 502 but keep distinct codes so clients can tell
# "location unknown" from "weather service down".
_WEATHER_ERRORS = {
    Unauthorized: (401, "unauthorized"),
    GeolocationQueryFailed: (502, "geolocation_query_failed"),
    WeatherQueryFailed: (502, "weather_query_failed"),
}


@router.get(
    "/weather",
    response_model=WeatherResponse,
    responses={401: {"model": ErrorResponse}, 502: {"model": ErrorResponse}},
)
def weather(request: Request, token: str = Depends(get_bearer_token)) -> JSONResponse:
    """Return weather information for the caller, located by IP address."""
    state = request.app.state
    outcome = retrieve_weather(
        token,
        request.client.host if request.client else None,
        issuer=state.issuer,
        client=state.weather_client,
        substitute_loopback=state.settings.substitute_loopback_address,
    )
    if isinstance(outcome, Success):
        return JSONResponse(status_code=200, content=WeatherResponse.from_snapshot(outcome.weather).model_dump())
    status_code, code = _WEATHER_ERRORS[type(outcome)]
    resp = error_response(status_code, code, outcome.message)
    if isinstance(outcome, Unauthorized):
        resp.headers["WWW-Authenticate"] = "Bearer"
    return resp
