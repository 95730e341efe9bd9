"""
Authentication Service

Registration, login and bearer-token verification.

Security:
=========
- Passwords are hashed with bcrypt before storage and never logged
- Login failures use one message for "unknown user" and "wrong password",
  and an unknown user still costs one bcrypt verification, so responses
  do not reveal which usernames exist
- Registration does say whether the email or the username collided; that
  is a usability choice for the sign-up form
- Tokens carry only the user id (sub) plus iat/exp
"""

import logging
from dataclasses import dataclass

from email_validator import EmailNotValidError, validate_email
from sqlalchemy import or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from cocktail_api.exceptions import AuthError, ConflictError, FieldError, ValidationError
from cocktail_api.models.user import User
from cocktail_api.services.security import (
    create_access_token,
    decode_token,
    hash_password,
    pwd_context,
    verify_password,
)
from cocktail_api.utils.ids import is_valid_id

logger = logging.getLogger(__name__)

USERNAME_MIN_LENGTH = 3
USERNAME_MAX_LENGTH = 30
PASSWORD_MIN_LENGTH = 8
PASSWORD_MAX_LENGTH = 128
EMAIL_MAX_LENGTH = 254

INVALID_CREDENTIALS = "Invalid credentials."
MISSING_TOKEN = "Access denied. No token provided."
INVALID_TOKEN = "Invalid token."


@dataclass(frozen=True)
class LoginResult:
    """A freshly issued token and the user it was issued for."""

    token: str
    user: User


def normalize_email(email: str) -> str:
    return email.strip().lower() if isinstance(email, str) else ""


def normalize_username(username: str) -> str:
    return username.strip() if isinstance(username, str) else ""


def _validate_registration(username: str, email: str, password: str) -> None:
    errors: list[FieldError] = []

    if not USERNAME_MIN_LENGTH <= len(username) <= USERNAME_MAX_LENGTH:
        errors.append(FieldError(
            "username",
            f"Username must be {USERNAME_MIN_LENGTH}-{USERNAME_MAX_LENGTH} characters long.",
        ))

    if not email or len(email) > EMAIL_MAX_LENGTH:
        errors.append(FieldError("email", "Invalid email"))
    else:
        try:
            validate_email(email, check_deliverability=False)
        except EmailNotValidError:
            errors.append(FieldError("email", "Invalid email"))

    if not isinstance(password, str) or not (
        PASSWORD_MIN_LENGTH <= len(password) <= PASSWORD_MAX_LENGTH
    ):
        errors.append(FieldError(
            "password",
            f"Password must be {PASSWORD_MIN_LENGTH}-{PASSWORD_MAX_LENGTH} characters long.",
        ))

    if errors:
        raise ValidationError(errors)


def register(db: Session, username: str, email: str, password: str) -> User:
    """
    Register a new user.

    1. Normalizes username (trim) and email (trim + lowercase)
    2. Validates lengths and email shape
    3. Checks email and case-insensitive username in a single query
    4. Hashes the password and inserts the user; a unique-constraint
       violation from a concurrent registration becomes a ConflictError

    Returns:
        The created user (no token is issued at registration)

    Raises:
        ValidationError: Invalid username, email or password
        ConflictError: Email or username already in use
    """
    username = normalize_username(username)
    email = normalize_email(email)
    _validate_registration(username, email, password)

    username_lower = username.lower()
    stmt = select(User).where(
        or_(User.email == email, User.username_lower == username_lower)
    )
    existing = db.execute(stmt).scalars().all()

    if any(user.email == email for user in existing):
        raise ConflictError("Email is already registered.")
    if any(user.username_lower == username_lower for user in existing):
        raise ConflictError("Username is already taken.")

    user = User(
        username=username,
        email=email,
        hashed_password=hash_password(password),
    )
    db.add(user)

    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        logger.warning(f"Registration raced on a unique key for username '{username}'")
        raise ConflictError("Email or username is already registered.")

    db.refresh(user)
    logger.info(f"New user registered: {user.username} ({user.id})")
    return user


def login(db: Session, username: str, password: str) -> LoginResult:
    """
    Authenticate by username (case-insensitive) and password.

    Returns:
        LoginResult with a signed 7-day bearer token and the user

    Raises:
        AuthError: Unknown user or wrong password (same message for both)
    """
    username_lower = normalize_username(username).lower()
    password = password if isinstance(password, str) else ""

    stmt = select(User).where(User.username_lower == username_lower)
    user = db.execute(stmt).scalar_one_or_none()

    if user is None:
        # Spend the same hashing time as a real check
        pwd_context.dummy_verify()
        logger.warning("Login failed: unknown username")
        raise AuthError(INVALID_CREDENTIALS)

    if not verify_password(password, user.hashed_password):
        logger.warning(f"Login failed: incorrect password for user {user.id}")
        raise AuthError(INVALID_CREDENTIALS)

    logger.info(f"User logged in: {user.id}")
    return LoginResult(token=create_access_token(user.id), user=user)


def verify(authorization: str | None) -> str:
    """
    Verify an Authorization header value and return the caller's user id.

    Accepts exactly "Bearer <token>" (scheme is case-insensitive).

    Raises:
        AuthError: Header missing or malformed, wrong scheme, bad signature,
            expired token, or missing/invalid subject
    """
    if not authorization:
        raise AuthError(MISSING_TOKEN)

    parts = authorization.split()
    if len(parts) != 2 or parts[0].lower() != "bearer":
        raise AuthError(MISSING_TOKEN)

    payload = decode_token(parts[1])
    if payload is None:
        raise AuthError(INVALID_TOKEN)

    subject = payload.get("sub")
    if not is_valid_id(subject):
        raise AuthError(INVALID_TOKEN)

    return subject
