"""
Snapgram Backend — Test Configuration (conftest.py)
=====================================================

What:  Shared pytest fixtures for the suite.
How:   Every test gets its own SQLite (aiosqlite) database file with the
       schema created from the ORM metadata, its own image storage directory
       and a fresh app from create_app(). Nothing is shared between tests.

Fixture Hierarchy (function-scoped unless marked):
    ├── (session)         import-time storage root removed at teardown
    ├── db_engine:        async engine on tmp_path/test.db, schema created
    ├── session_factory:  swapped into app.database so get_db_session uses it
    ├── db_session:       a session for service-level tests
    ├── temp_storage:     storage root for FileService
    ├── client:           HTTPX AsyncClient bound to a fresh app
    ├── register_user:    factory that registers a user → (token, user json)
    ├── png_bytes:        a real PNG produced by Pillow
    └── upload_post:      factory that uploads an image → post json
"""

import io
import os
import shutil
import tempfile

# Settings are read at import time, so the environment must be in place
# before anything under app/ is imported. Tests swap in their own engine and
# storage root; these only keep the import-time singletons off real paths.
_STORAGE_ROOT = tempfile.mkdtemp(prefix="snapgram_test_")
os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["STORAGE_ROOT"] = _STORAGE_ROOT
os.environ["JWT_SECRET_KEY"] = "test-secret-key-that-is-long-enough-for-hs256"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["RATE_LIMIT_REQUESTS"] = "100000"
os.environ["LOG_LEVEL"] = "WARNING"

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from PIL import Image  # noqa: E402
from sqlalchemy.ext.asyncio import (  # noqa: E402
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

import app.database  # noqa: E402
import app.models  # noqa: E402,F401
from app.database import Base  # noqa: E402
from app.main import create_app  # noqa: E402
from app.services.file_service import file_service  # noqa: E402


def make_image(fmt: str = "PNG", size=(8, 8), color=(200, 40, 90)) -> bytes:
    buffer = io.BytesIO()
    Image.new("RGB", size, color).save(buffer, format=fmt)
    return buffer.getvalue()


@pytest.fixture(scope="session", autouse=True)
def _remove_import_storage_root():
    yield
    shutil.rmtree(_STORAGE_ROOT, ignore_errors=True)


# ══════════════════════════════════════════════════════════════════════════
# Database
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def db_engine(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(db_engine, monkeypatch):
    """
    Points get_db_session at the per-test database.

    get_db_session looks the factory up on the module at call time, so
    patching the module attribute is enough.
    """
    factory = async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)
    monkeypatch.setattr(app.database, "async_session_factory", factory)
    return factory


@pytest_asyncio.fixture
async def db_session(session_factory):
    """A session for service-level tests that bypass HTTP."""
    async with session_factory() as session:
        yield session


# ══════════════════════════════════════════════════════════════════════════
# Storage & HTTP
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def temp_storage(tmp_path, monkeypatch):
    storage_dir = tmp_path / "uploads"
    storage_dir.mkdir()
    monkeypatch.setattr(file_service, "storage_root", storage_dir.resolve())
    return storage_dir.resolve()


@pytest_asyncio.fixture
async def client(session_factory, temp_storage):
    """
    Async HTTP client for endpoint tests.

    ASGITransport does not run the lifespan, so startup logging and engine
    disposal stay out of the tests.
    """
    application = create_app()
    transport = ASGITransport(app=application)
    async with AsyncClient(transport=transport, base_url="http://test") as http:
        yield http


@pytest.fixture
def register_user(client):
    """
    Usage:
        token, user = await register_user("alice")
    """

    async def _register(username: str, password: str = "secret123", email: str = None):
        response = await client.post(
            "/api/auth/register",
            json={
                "username": username,
                "email": email or f"{username}@example.com",
                "password": password,
            },
        )
        assert response.status_code == 201, response.text
        body = response.json()
        return body["token"], body["user"]

    return _register


@pytest.fixture
def png_bytes():
    return make_image("PNG")


@pytest.fixture
def upload_post(client, png_bytes):
    """
    Usage:
        post = await upload_post(token, caption="sunset")
    """

    async def _upload(token: str, caption: str = "", content: bytes = None, filename: str = "photo.png"):
        response = await client.post(
            "/api/posts/upload",
            headers={"Authorization": f"Bearer {token}"},
            files={"image": (filename, content or png_bytes, "image/png")},
            data={"caption": caption},
        )
        assert response.status_code == 201, response.text
        return response.json()

    return _upload
