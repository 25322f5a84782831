"""
API request and response models for WeatherGate REST endpoints.

These Pydantic v2 models define the HTTP transport contract for the API layer.
They are intentionally separate from the dataclasses in auth/models.py and
core/models.py, which own the internal domain representation. Route handlers
map between the two.

Request models only cap field sizes. Credential rules (lengths, character
sets, email syntax) live in auth/credentials.py so violations come back as
InvalidCredentials with a readable reason rather than a generic 422.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from core.models import WeatherSnapshot

# ---------------------------------------------------------------------------
# Request models
# ---------------------------------------------------------------------------


class RegisterRequest(BaseModel):
    """Request body for POST /api/v1/register."""

    username: str = Field(max_length=255, description="Unique username, 6-24 letters, digits, '.' or '_'.")
    email: str = Field(max_length=320, description="Unique email address.")
    password: str = Field(max_length=255, description="Password, 8-32 characters.")


class LoginRequest(BaseModel):
    """Request body for POST /api/v1/login."""

    identifier: str = Field(max_length=320, description="Username or email.")
    password: str = Field(max_length=255)


# ---------------------------------------------------------------------------
# Response models
# ---------------------------------------------------------------------------


class RegisterResponse(BaseModel):
    user_id: int


class LoginResponse(BaseModel):
    token: str
    token_type: str = "bearer"  # noqa: S105 # nosec B105 -- OAuth token type, not a password
    expires_in: int


class WeatherResponse(BaseModel):
    """Current weather at the caller's location."""

    model_config = ConfigDict(frozen=True)

    temperature: float
    feels_like: float
    condition: str
    last_updated: str

    @classmethod
    def from_snapshot(cls, snapshot: WeatherSnapshot) -> "WeatherResponse":
        return cls(
            temperature=snapshot.temperature,
            feels_like=snapshot.feels_like,
            condition=snapshot.condition,
            last_updated=snapshot.last_updated,
        )


class ErrorDetail(BaseModel):
    """Machine-readable code plus a message safe to show the user."""

    code: str
    message: str
    detail: Optional[str] = None


class ErrorResponse(BaseModel):
    """Envelope for every non-2xx response."""

    error: ErrorDetail


class HealthResponse(BaseModel):
    status: str = "healthy"
    version: str
    components: dict[str, str] = Field(default_factory=dict)
