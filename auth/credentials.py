"""
auth/credentials.py -- Registration input rules.

Credentials is a Pydantic v2 model so the same rules are enforced wherever
raw input enters the system. Validation happens before any hashing or
storage work; a violation costs nothing but this check.

The API request model (api/models.py) deliberately does not repeat these
rules: a bad username must reach AccountService.register() and come back as
InvalidCredentials, not as a generic 422.
"""

from __future__ import annotations

from email_validator import EmailNotValidError, validate_email
from pydantic import BaseModel, ConfigDict, EmailStr, ValidationError, field_validator

USERNAME_MIN, USERNAME_MAX = 6, 24
PASSWORD_MIN, PASSWORD_MAX = 8, 32
USERNAME_SYMBOLS = "._"
PASSWORD_SYMBOLS = "~!@$%^&*()_-+={[}]|:',.?/"


class Credentials(BaseModel):
    """Validated registration input. email is normalized by email-validator."""

    model_config = ConfigDict(frozen=True)

    username: str
    email: EmailStr
    password: str

    @field_validator("username")
    @classmethod
    def check_username(cls, value: str) -> str:
        if not USERNAME_MIN <= len(value) <= USERNAME_MAX:
            raise ValueError(f"Username needs to be at least {USERNAME_MIN} and at most {USERNAME_MAX} characters")
        if any(not c.isalnum() and c not in USERNAME_SYMBOLS for c in value):
            raise ValueError("Username can only contain letters, numbers, dots and underscores")
        return value

    @field_validator("password")
    @classmethod
    def check_password(cls, value: str) -> str:
        if not PASSWORD_MIN <= len(value) <= PASSWORD_MAX:
            raise ValueError(f"Password needs to be at least {PASSWORD_MIN} and at most {PASSWORD_MAX} characters")
        if any(not c.isalnum() and c not in PASSWORD_SYMBOLS for c in value):
            raise ValueError(f"Password can only contain letters, numbers and symbols {PASSWORD_SYMBOLS}")
        return value


def parse_credentials(username: str, email: str, password: str) -> Credentials | str:
    """Return validated Credentials, or a human-readable reason for the first violation.

    Pydantic messages for field_validator errors read "Value error, <msg>";
    the prefix is stripped. The password value is never echoed back.
    """
    try:
        return Credentials(username=username, email=email, password=password)
    except ValidationError as exc:
        error = exc.errors()[0]
        field = error["loc"][0] if error["loc"] else "credentials"
        message = error["msg"].removeprefix("Value error, ")
        if field == "email":
            return f"Email is not valid: {message}"
        return message


def normalize_identifier(identifier: str) -> str:
    """Map a login identifier onto the form registration stored.

    Registration keeps the email as email-validator normalized it (domain
    lowercased, Unicode NFC), so an email-shaped identifier goes through the
    same normalization before lookup. Usernames cannot contain "@" and pass
    through untouched, as does anything email-validator rejects.
    """
    if "@" not in identifier:
        return identifier
    try:
        return validate_email(identifier, check_deliverability=False).normalized
    except EmailNotValidError:
        return identifier
