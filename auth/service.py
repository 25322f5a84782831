"""
auth/service.py -- Registration and login flows.

AccountService ties together credential validation, the hashing pool, the
account store and the token issuer. Each method returns one outcome variant
from auth/models.py and never raises for expected failures.

Timing equalization:
  authenticate() ALWAYS verifies a password, even when the identifier is
  unknown or the lookup failed -- verify_password() falls back to
  PLACEHOLDER_HASH. Do NOT return early before the verify call; that
  re-introduces account enumeration via response time.

Concurrency:
  Store calls are blocking SQLAlchemy calls and run via asyncio.to_thread.
  Hashing runs on the CredentialHasher pool, separate from request threads.
"""

from __future__ import annotations

import asyncio
import logging

from auth.credentials import normalize_identifier, parse_credentials
from auth.models import (
    AlreadyRegistered,
    AuthenticationOutcome,
    CouldNotCreateToken,
    InvalidCredentials,
    LoggedIn,
    LoginFailed,
    Registered,
    RegistrationFailed,
    RegistrationOutcome,
    WrongCredentials,
)
from auth.passwords import CredentialHasher
from auth.store import AccountConflictError, AccountStore, StorageError
from auth.tokens import TokenError, TokenIssuer

logger = logging.getLogger("weathergate.auth")

# Account id used when the identifier matched nothing. Only reachable if the
# placeholder hash ever verified, which it cannot.
_NO_ACCOUNT_ID = 0


class AccountService:
    """Register and authenticate accounts.

    Usage:
        service = AccountService(store, hasher, issuer)
        outcome = await service.register("jane_doe", "jane@example.com", "Secur3!pass")
        outcome = await service.authenticate("jane@example.com", "Secur3!pass")
    """

    def __init__(self, store: AccountStore, hasher: CredentialHasher, issuer: TokenIssuer) -> None:
        self.store = store
        self.hasher = hasher
        self.issuer = issuer

    async def register(self, username: str, email: str, password: str) -> RegistrationOutcome:
        """Validate, hash and persist a new account.

        Validation failures return before any hashing or storage work. The
        insert is a single statement, so a failed registration leaves no row.
        """
        credentials = parse_credentials(username, email, password)
        if isinstance(credentials, str):
            return InvalidCredentials(f"Invalid credentials: {credentials}")

        password_hash = await self.hasher.hash(credentials.password)
        try:
            account_id = await asyncio.to_thread(
                self.store.insert_account,
                credentials.username,
                credentials.email,
                password_hash,
            )
        except AccountConflictError:
            return AlreadyRegistered()
        except StorageError:
            return RegistrationFailed()

        logger.info("Registered account %d", account_id)
        return Registered(account_id)

    async def authenticate(self, identifier: str, password: str) -> AuthenticationOutcome:
        """Check a username-or-email plus password and issue a session token.

        Unknown identifier and wrong password both return WrongCredentials
        after the same Argon2 work. An email identifier is normalized the way
        registration normalized it, so either spelling of the domain matches.
        """
        lookup_failed = False
        try:
            found = await asyncio.to_thread(self.store.find_account_by_identifier, normalize_identifier(identifier))
        except StorageError:
            found = None
            lookup_failed = True

        account_id, password_hash = found if found is not None else (_NO_ACCOUNT_ID, None)

        # Runs unconditionally [timing equalization].
        password_match = await self.hasher.verify(password, password_hash)

        if lookup_failed:
            return LoginFailed()
        if not password_match:
            return WrongCredentials()

        try:
            token = self.issuer.issue(account_id)
        except TokenError:
            return CouldNotCreateToken()
        return LoggedIn(token=token, expires_in=self.issuer.expire_seconds)
