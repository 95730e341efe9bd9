"""
FastAPI Dependencies Module

Reusable pieces injected into route handlers with Depends().

- DbSession: one SQLAlchemy session per request
- CurrentUserId: the verified caller id from "Authorization: Bearer <token>"
- CurrentUser: the caller's User row
- SelfUserId: the {user_id} path parameter, only if it is the caller
- ImageStorageDep: where uploaded pictures go (overridden in tests)
"""

from typing import Annotated

from fastapi import Depends
from fastapi.security import APIKeyHeader
from sqlalchemy.orm import Session

from cocktail_api.database import get_db
from cocktail_api.exceptions import AuthError, ForbiddenError
from cocktail_api.models import User
from cocktail_api.services import auth
from cocktail_api.services.uploads import ImageStorage, get_image_storage
from cocktail_api.utils.ids import ensure_valid_id

DbSession = Annotated[Session, Depends(get_db)]

# The raw header is handed to auth.verify(), which owns the parsing rules.
# Declared as a security scheme so Swagger UI shows the Authorize button.
authorization_header = APIKeyHeader(
    name="Authorization",
    scheme_name="Bearer",
    description='Send "Bearer <token>" as returned by /auth/login',
    auto_error=False,
)


def get_current_user_id(
    authorization: str | None = Depends(authorization_header),
) -> str:
    """
    Verify the bearer token and return the caller's user id.

    Raises:
        AuthError: 401 if the header is missing or the token is invalid
    """
    return auth.verify(authorization)


CurrentUserId = Annotated[str, Depends(get_current_user_id)]


def get_current_user(user_id: CurrentUserId, db: DbSession) -> User:
    """
    Load the caller's user row.

    A valid token for an account that no longer exists is treated as an
    invalid token.
    """
    user = db.get(User, user_id)
    if user is None:
        raise AuthError(auth.INVALID_TOKEN)
    return user


CurrentUser = Annotated[User, Depends(get_current_user)]


def get_self_user_id(user_id: str, current_user_id: CurrentUserId) -> str:
    """
    Resolve the {user_id} path parameter for owner-only routes.

    Raises:
        AuthError: Not authenticated (checked first)
        ValidationError: Malformed user id
        ForbiddenError: The caller is not the target user
    """
    user_id = ensure_valid_id(user_id, "user_id")
    if user_id != current_user_id:
        raise ForbiddenError("You can only access your own account.")
    return user_id


SelfUserId = Annotated[str, Depends(get_self_user_id)]

ImageStorageDep = Annotated[ImageStorage, Depends(get_image_storage)]
