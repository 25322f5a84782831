"""
auth/tokens.py -- Stateless session tokens (JWT).

Security design decisions:
  JWT: python-jose with HS256. Tokens carry the account id and an expiry
       (24 hours by default). Any verifier holding the secret can check them;
       there is no server-side session record and no revocation.

  Verification is authorization-by-possession: signature and expiry are
       checked, claim contents are not. verify() answers only True/False --
       the route layer turns False into a 401 without saying why.

  Secret: passed in by the caller, normally Settings.jwt_secret. The issuer
       is built once in the application lifespan and never mutated, so every
       request sees the same key without locking.

Layer rule: no imports from api/ or core/.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone

from jose import jwt
from jose.exceptions import JOSEError

logger = logging.getLogger("weathergate.auth")

_ALGORITHM = "HS256"
DEFAULT_EXPIRE_SECONDS = 24 * 60 * 60


class TokenError(Exception):
    """Raised when a token cannot be signed."""


class TokenIssuer:
    """Issues and verifies signed bearer tokens for authenticated accounts.

    Usage:
        issuer = TokenIssuer(settings.jwt_secret)
        token = issuer.issue(account_id)
        assert issuer.verify(token)
    """

    def __init__(self, secret: str, expire_seconds: int = DEFAULT_EXPIRE_SECONDS) -> None:
        if not secret:
            raise ValueError("Token signing secret must not be empty.")
        self._secret = secret
        self.expire_seconds = expire_seconds

    def issue(self, account_id: int) -> str:
        """Encode a signed JWT for account_id that expires expire_seconds from now.

        Raises TokenError if signing fails.
        """
        expire = datetime.now(timezone.utc) + timedelta(seconds=self.expire_seconds)
        payload = {
            "sub": str(account_id),
            "user_id": account_id,
            "exp": expire,
        }
        try:
            return jwt.encode(payload, self._secret, algorithm=_ALGORITHM)
        except JOSEError as exc:
            logger.error("Could not sign token for account %s: %s", account_id, exc)
            raise TokenError("Token signing failed.") from exc

    def verify(self, token: str) -> bool:
        """Return True if the token was signed with our secret and has not expired.

        Never raises. Malformed input, a bad signature and an expired token
        all return False.
        """
        if not token:
            return False
        try:
            jwt.decode(token, self._secret, algorithms=[_ALGORITHM])
        except JOSEError:
            return False
        return True
