"""
api/responses.py -- JSON response helpers shared by the v1 routers.

Every failure response uses the ErrorResponse envelope so API clients can
parse errors uniformly:  {"error": {"code": ..., "message": ...}}
"""

from __future__ import annotations

from fastapi.responses import JSONResponse

from api.models import ErrorDetail, ErrorResponse


def error_response(status_code: int, code: str, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(error=ErrorDetail(code=code, message=message)).model_dump(exclude_none=True),
    )


def no_store(response: JSONResponse) -> JSONResponse:
    """Forbid caches from keeping the response. Used on anything carrying a token."""
    response.headers["Cache-Control"] = "no-store"
    return response
