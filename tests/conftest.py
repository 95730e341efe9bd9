"""
pytest Fixtures for Cocktails API Tests

Shared fixtures used across all test files.

Database:
=========
Each test gets its own in-memory SQLite database (StaticPool keeps the
single connection alive). The services commit and roll back on their own,
so wrapping the test in an outer transaction would not isolate anything;
a fresh database per test does.

The app and the test share one Session, so objects created by fixtures
are visible to requests and vice versa.
"""

# =============================================================================
# TEST ENVIRONMENT SETUP
# =============================================================================
# IMPORTANT: Set environment variables BEFORE importing the app
import os
import tempfile

os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["SECRET_KEY"] = "test-secret-key-for-unit-tests-at-least-32-characters-long"
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["UPLOAD_DIR"] = tempfile.mkdtemp(prefix="cocktail-uploads-")
os.environ["PUBLIC_BASE_URL"] = "http://testserver"

from collections.abc import Callable, Generator
from io import BytesIO
from pathlib import Path

import pytest
from fastapi.testclient import TestClient
from PIL import Image
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from cocktail_api.database import Base, get_db
from cocktail_api.main import app
from cocktail_api.models import Cocktail, User
from cocktail_api.services import catalog
from cocktail_api.services.security import create_access_token, hash_password
from cocktail_api.services.uploads import ImageStorage, get_image_storage

DEFAULT_PASSWORD = "password1"


def encode_image(image_format: str) -> bytes:
    buffer = BytesIO()
    Image.new("RGB", (4, 4), (200, 40, 60)).save(buffer, image_format)
    return buffer.getvalue()


# Tiny real images, encoded by Pillow
PNG_BYTES = encode_image("PNG")
JPEG_BYTES = encode_image("JPEG")
WEBP_BYTES = encode_image("WEBP")


# =============================================================================
# DATABASE FIXTURES
# =============================================================================
@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)

    yield engine

    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db_session(engine) -> Generator[Session, None, None]:
    TestSessionLocal = sessionmaker(
        autocommit=False,
        autoflush=False,
        bind=engine,
    )
    session = TestSessionLocal()

    yield session

    session.close()


@pytest.fixture
def file_engine(tmp_path: Path):
    """
    File-backed SQLite engine for race tests: every Session gets its own
    connection, so a competing write can be committed mid-operation.
    """
    engine = create_engine(
        f"sqlite:///{tmp_path / 'race.db'}",
        connect_args={"check_same_thread": False},
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def image_storage(tmp_path: Path) -> ImageStorage:
    """Image storage in a per-test directory."""
    return ImageStorage(
        directory=tmp_path / "uploads",
        base_url="http://testserver",
        max_bytes=2 * 1024 * 1024,
    )


@pytest.fixture
def client(
    db_session: Session,
    image_storage: ImageStorage,
) -> Generator[TestClient, None, None]:
    """
    Test client wired to the test database and image storage.

    raise_server_exceptions is off so that unexpected errors are turned
    into responses by the app's own handlers, like in production.
    """

    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_image_storage] = lambda: image_storage

    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client

    app.dependency_overrides.clear()


# =============================================================================
# SAMPLE DATA FIXTURES
# =============================================================================
@pytest.fixture
def make_user(db_session: Session) -> Callable[..., User]:
    """Factory that inserts a user with the default password."""

    def _make_user(username: str, email: str | None = None, password: str = DEFAULT_PASSWORD) -> User:
        user = User(
            username=username,
            email=email or f"{username.lower()}@example.com",
            hashed_password=hash_password(password),
        )
        db_session.add(user)
        db_session.commit()
        db_session.refresh(user)
        return user

    return _make_user


@pytest.fixture
def alice(make_user) -> User:
    return make_user("alice")


@pytest.fixture
def bob(make_user) -> User:
    return make_user("bob")


@pytest.fixture
def mojito(db_session: Session) -> Cocktail:
    return catalog.create_cocktail(
        db_session,
        name="Mojito",
        instructions="Muddle mint with sugar and lime, add rum, top with soda.",
        alcoholic=True,
        ingredients=["white rum", "lime", "mint", "sugar", "soda water"],
    )


@pytest.fixture
def virgin_colada(db_session: Session) -> Cocktail:
    return catalog.create_cocktail(
        db_session,
        name="Virgin Colada",
        instructions="Blend pineapple juice and coconut cream with ice.",
        alcoholic=False,
        ingredients=["pineapple juice", "coconut cream"],
    )


# =============================================================================
# HELPERS
# =============================================================================
def auth_header(user: User) -> dict[str, str]:
    """Authorization header carrying a valid token for the user."""
    return {"Authorization": f"Bearer {create_access_token(user.id)}"}


@pytest.fixture
def alice_headers(alice: User) -> dict[str, str]:
    return auth_header(alice)


@pytest.fixture
def bob_headers(bob: User) -> dict[str, str]:
    return auth_header(bob)
