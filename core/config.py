"""
core/config.py -- Centralized application configuration via pydantic-settings.

All environment variable reads for WeatherGate happen here. No module should
call os.getenv() or os.environ.get() directly -- import get_settings() instead.

Design patterns used:
  Singleton via lru_cache: get_settings() instantiates Settings once at first
      call and returns the cached instance on every subsequent call. Every
      field is derived from the environment, so the instance is immutable in
      practice and identical no matter which caller builds it first.

  BaseSettings (pydantic-settings): Reads values from environment variables
      and an optional .env file automatically. Field names map to env var names
      (e.g. jwt_secret -> JWT_SECRET). Type coercion and validation are built in.

Security notes:
  JWT_SECRET is required. There is no generated fallback: a process without a
  signing secret must not start, because every token it issued would become
  unverifiable on restart. Secrets shorter than 32 chars are rejected because
  HS256 signing relies on key entropy.

Layer rule: core/ is the kernel. This module may not import from api/ or auth/.
"""

from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables and .env file.

    Everything except jwt_secret has a default so a minimal deployment only
    needs JWT_SECRET (and WEATHER_API_KEY for real weather lookups).
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ------------------------------------------------------------------
    # Server
    # ------------------------------------------------------------------

    host: str = "0.0.0.0"
    port: int = 3000
    cors_origins: list[str] = ["http://localhost:3000"]

    # ------------------------------------------------------------------
    # Auth
    # ------------------------------------------------------------------

    jwt_secret: str
    # 24 hours. Tokens are never revoked early, so this is the only bound
    # on how long a leaked token stays usable.
    token_expire_seconds: int = 24 * 60 * 60
    hash_workers: int = 4

    # ------------------------------------------------------------------
    # Storage
    # ------------------------------------------------------------------

    database_url: str = "sqlite:///weathergate.db"

    # ------------------------------------------------------------------
    # External services
    # ------------------------------------------------------------------

    weather_api_key: str = ""
    geolocation_api_url: str = "https://ipapi.co"
    weather_api_url: str = "https://api.weatherapi.com/v1/current.json"
    http_timeout: float = 10.0
    # Local callers are always 127.0.0.1 / ::1, which the geolocation API
    # cannot place. Test and demo deployments turn this on to send a random
    # public address instead.
    substitute_loopback_address: bool = False

    # ------------------------------------------------------------------
    # Validators
    # ------------------------------------------------------------------

    @field_validator("jwt_secret")
    @classmethod
    def validate_jwt_secret(cls, value: str) -> str:
        if len(value) < 32:
            raise ValueError("JWT_SECRET must be at least 32 characters.")
        return value

    @field_validator("hash_workers")
    @classmethod
    def validate_hash_workers(cls, value: int) -> int:
        if value < 1:
            raise ValueError("HASH_WORKERS must be at least 1.")
        return value


@lru_cache
def get_settings() -> Settings:
    """Return the application Settings singleton.

    Raises pydantic.ValidationError when JWT_SECRET is missing or too short.
    That error is meant to abort startup; nothing catches it.

    In tests: call get_settings.cache_clear() between test cases if you need
    to inject different environment variables.
    """
    return Settings()
