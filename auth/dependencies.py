"""
auth/dependencies.py -- FastAPI Depends() helper for bearer tokens.

get_bearer_token() only extracts the token. Whether it is valid is decided
by TokenIssuer.verify() inside the retrieval pipeline, which answers a plain
yes/no; a missing header simply yields "" and fails verification there.

Layer rule: no imports from api/ or core/.
  auth/dependencies.py may import from fastapi because this module is part of
  the FastAPI dependency injection system.
"""

from __future__ import annotations

from fastapi import Request

_BEARER_PREFIX = "Bearer "


def get_bearer_token(request: Request) -> str:
    """Return the token from an "Authorization: Bearer <token>" header, or "".

    Never raises. The scheme name is matched case-insensitively per RFC 6750.

    Use as a FastAPI dependency:
        @router.get("/protected")
        def route(token: str = Depends(get_bearer_token)): ...
    """
    auth_header = request.headers.get("Authorization", "")
    if auth_header[: len(_BEARER_PREFIX)].lower() != _BEARER_PREFIX.lower():
        return ""
    return auth_header[len(_BEARER_PREFIX) :].strip()
