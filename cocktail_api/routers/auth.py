"""
Authentication Router

Endpoints:
- POST /auth/register - Create an account (no token is issued)
- POST /auth/login - Exchange username/password for a 7-day bearer token

Both endpoints share a strict per-client limit (10 attempts per 15 minutes
by default) to slow down credential stuffing.
"""

import logging

from fastapi import APIRouter, Request, status

from cocktail_api.config import get_settings
from cocktail_api.dependencies import DbSession
from cocktail_api.schemas.user import (
    LoginRequest,
    LoginResponse,
    MessageResponse,
    RegisterRequest,
    UserSummary,
)
from cocktail_api.services import auth as auth_service
from cocktail_api.services.rate_limiter import limiter
from cocktail_api.services.security import token_lifetime_seconds

logger = logging.getLogger(__name__)
settings = get_settings()

router = APIRouter(
    prefix="/auth",
    tags=["Authentication"],
    responses={
        401: {"description": "Invalid credentials"},
        409: {"description": "Email or username already exists"},
        422: {"description": "Invalid data"},
        429: {"description": "Too many attempts"},
    },
)


@router.post(
    "/register",
    response_model=MessageResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register a new user",
    description="""
    Create a new account.

    - Username: 3-30 characters, unique ignoring case
    - Email: valid address, unique, stored lowercased
    - Password: 8-128 characters
    """,
)
@limiter.limit(settings.rate_limit_auth)
def register(
    request: Request,
    payload: RegisterRequest,
    db: DbSession,
) -> MessageResponse:
    auth_service.register(db, payload.username, payload.email, payload.password)
    return MessageResponse(message="Registration successful.")


@router.post(
    "/login",
    response_model=LoginResponse,
    summary="Log in",
    description=(
        "Authenticate with username (case-insensitive) and password. "
        "Unknown usernames and wrong passwords get the same 401 response."
    ),
)
@limiter.limit(settings.rate_limit_auth)
def login(
    request: Request,
    payload: LoginRequest,
    db: DbSession,
) -> LoginResponse:
    result = auth_service.login(db, payload.username, payload.password)
    return LoginResponse(
        token=result.token,
        expires_in=token_lifetime_seconds(),
        user=UserSummary.model_validate(result.user),
    )
