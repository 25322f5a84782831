"""
api/routes/v1/auth.py -- Registration and login REST endpoints.

Routes:
  POST /api/v1/register   -- create an account; 201 with the new user id
  POST /api/v1/login      -- username-or-email + password; 200 with a bearer token

Both routes are public. All decisions live in AccountService; this module only
maps outcome variants to status codes and JSON bodies.

Security:
  Login returns one generic WrongCredentials error for unknown identifier and
  wrong password, so the response never reveals whether an account exists.
  Cache-Control: no-store on login responses.
"""

from __future__ import annotations

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from api.models import ErrorResponse, LoginRequest, LoginResponse, RegisterRequest, RegisterResponse
from api.responses import error_response, no_store
from auth.models import (
    AlreadyRegistered,
    CouldNotCreateToken,
    InvalidCredentials,
    LoggedIn,
    LoginFailed,
    Registered,
    RegistrationFailed,
    WrongCredentials,
)
from auth.service import AccountService

router = APIRouter()

# outcome type -> (status code, error code)
_REGISTER_ERRORS = {
    InvalidCredentials: (400, "invalid_credentials"),
    AlreadyRegistered: (409, "already_registered"),
    RegistrationFailed: (500, "registration_failed"),
}

_LOGIN_ERRORS = {
    WrongCredentials: (404, "wrong_credentials"),
    CouldNotCreateToken: (500, "could_not_create_token"),
    LoginFailed: (503, "login_failed"),
}


@router.post(
    "/register",
    response_model=RegisterResponse,
    status_code=201,
    responses={400: {"model": ErrorResponse}, 409: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def register(request: Request, body: RegisterRequest) -> JSONResponse:
    """Register a user. The password is hashed with Argon2id before it is stored."""
    service: AccountService = request.app.state.accounts
    outcome = await service.register(body.username, body.email, body.password)
    if isinstance(outcome, Registered):
        return JSONResponse(status_code=201, content=RegisterResponse(user_id=outcome.account_id).model_dump())
    status_code, code = _REGISTER_ERRORS[type(outcome)]
    return error_response(status_code, code, outcome.message)


@router.post(
    "/login",
    response_model=LoginResponse,
    responses={404: {"model": ErrorResponse}, 500: {"model": ErrorResponse}, 503: {"model": ErrorResponse}},
)
async def login(request: Request, body: LoginRequest) -> JSONResponse:
    """Log in with a username or email and receive a bearer token valid for 24 hours.

    If no account matches, the password is still checked against a
    placeholder hash so the response takes as long as a wrong password.
    """
    service: AccountService = request.app.state.accounts
    outcome = await service.authenticate(body.identifier, body.password)
    if isinstance(outcome, LoggedIn):
        resp = JSONResponse(
            status_code=200,
            content=LoginResponse(token=outcome.token, expires_in=outcome.expires_in).model_dump(),
        )
        return no_store(resp)
    status_code, code = _LOGIN_ERRORS[type(outcome)]
    return no_store(error_response(status_code, code, outcome.message))
