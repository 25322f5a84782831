"""
auth/models.py -- Outcome dataclasses for the registration and login flows.

Pattern: Data class (pure data container, zero logic). Stores and services
do the work; api/ maps each outcome variant to a status code.

Layer rule: no imports from api/ or core/.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union


# ---------------------------------------------------------------------------
# Registration outcomes
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Registered:
    account_id: int


@dataclass(frozen=True)
class InvalidCredentials:
    message: str


@dataclass(frozen=True)
class AlreadyRegistered:
    message: str = "A user with given credentials already exists."


@dataclass(frozen=True)
class RegistrationFailed:
    message: str = "Registration failed. Try again."


RegistrationOutcome = Union[Registered, InvalidCredentials, AlreadyRegistered, RegistrationFailed]


# ---------------------------------------------------------------------------
# Authentication outcomes
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class LoggedIn:
    token: str
    expires_in: int  # seconds


@dataclass(frozen=True)
class WrongCredentials:
    # Same message for unknown identifier and wrong password.
    message: str = "Username/email or password is wrong."


@dataclass(frozen=True)
class CouldNotCreateToken:
    message: str = "Login failed."


@dataclass(frozen=True)
class LoginFailed:
    message: str = "Login is temporarily unavailable. Try again."


AuthenticationOutcome = Union[LoggedIn, WrongCredentials, CouldNotCreateToken, LoginFailed]
