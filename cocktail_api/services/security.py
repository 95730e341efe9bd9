"""
Security Service

Handles password hashing and bearer token operations.

Security Features:
==================
1. Password hashing with bcrypt (passlib), cost factor from settings
2. Signed, time-limited JWT bearer tokens carrying only the user id
3. Constant-time password verification

Usage:
    from cocktail_api.services.security import hash_password, verify_password

    hashed = hash_password("password1")
    is_valid = verify_password("password1", hashed)
"""

import logging
from datetime import UTC, datetime, timedelta

from jose import JWTError, jwt
from passlib.context import CryptContext

from cocktail_api.config import get_settings

logger = logging.getLogger(__name__)
settings = get_settings()

# -------------------------------------------------------------------------
# Password Hashing Configuration
# -------------------------------------------------------------------------
# - schemes: bcrypt only
# - deprecated: "auto" means old hashes are automatically upgraded
# - bcrypt__rounds: cost factor (12 in production, lowered in tests)
pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=settings.bcrypt_rounds,
)


def hash_password(password: str) -> str:
    """
    Hash a plain text password using bcrypt.

    Example:
        >>> hashed = hash_password("password1")
        >>> hashed.startswith("$2b$")
        True
    """
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """
    Verify a plain password against a stored bcrypt hash.

    Returns False instead of raising when the stored hash is unusable.
    """
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except ValueError:
        logger.warning("Stored password hash could not be parsed")
        return False


# -------------------------------------------------------------------------
# Bearer Token Configuration
# -------------------------------------------------------------------------


def create_access_token(
    subject: str,
    expires_delta: timedelta | None = None,
) -> str:
    """
    Create a signed bearer token for a user id.

    The payload only holds the subject and the standard issue/expiry
    timestamps. No roles or scopes are encoded.

    Args:
        subject: User id
        expires_delta: Optional custom lifetime (default: settings, 7 days)

    Returns:
        Encoded JWT string
    """
    issued_at = datetime.now(UTC)
    lifetime = expires_delta or timedelta(days=settings.access_token_expire_days)

    payload = {
        "sub": str(subject),
        "iat": issued_at,
        "exp": issued_at + lifetime,
    }

    return jwt.encode(
        payload,
        settings.secret_key,
        algorithm=settings.jwt_algorithm,
    )


def decode_token(token: str) -> dict | None:
    """
    Decode and validate a bearer token.

    Returns:
        Decoded payload if the signature and expiry are valid, None otherwise
    """
    try:
        return jwt.decode(
            token,
            settings.secret_key,
            algorithms=[settings.jwt_algorithm],
        )
    except JWTError as e:
        logger.warning(f"JWT decode error: {e}")
        return None


def token_lifetime_seconds() -> int:
    return settings.access_token_expire_days * 24 * 60 * 60
