#!/usr/bin/env python3
"""
WeatherGate -- account registration, login and authorized weather lookup.

Usage:
  python main.py
  python main.py --port 8000
  python main.py --host 127.0.0.1 --reload

Environment variables (see core/config.py for the full list):
  JWT_SECRET        Required. Token signing secret, at least 32 characters.
  WEATHER_API_KEY   Key for the weather service.
  DATABASE_URL      SQLAlchemy URL. Defaults to sqlite:///weathergate.db
"""

import argparse

import uvicorn

from core.config import get_settings


def main() -> None:
    # Load settings before uvicorn starts so a missing JWT_SECRET fails here,
    # with the validation message, instead of inside a worker import.
    settings = get_settings()

    parser = argparse.ArgumentParser(
        description="WeatherGate API server.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--host", default=settings.host, help=f"Bind address (default: {settings.host})")
    parser.add_argument("--port", type=int, default=settings.port, help=f"Bind port (default: {settings.port})")
    parser.add_argument("--reload", action="store_true", help="Restart on code changes (development only)")
    args = parser.parse_args()

    uvicorn.run("asgi:app", host=args.host, port=args.port, reload=args.reload)


if __name__ == "__main__":
    main()
