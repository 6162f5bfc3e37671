"""
Foodbabes Backend: Test Configuration (conftest.py)
=====================================================

What:  Shared pytest fixtures for the whole suite.
How:   Every test gets its own SQLite file and storage directory under
       tmp_path; the app is wired by hand because ASGITransport does not
       run the lifespan.

Fixture Hierarchy (all function-scoped):
    test_settings ─┬─ database ─── db_session
                   ├─ image_storage
                   └─ app ──────── test_client
    mock_db_session, make_image, make_png_header, png_bytes, jpeg_bytes
"""

import io
import os
import struct
import tempfile
import zlib
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from PIL import Image

# ══════════════════════════════════════════════════════════════════════════
# Environment Setup
# ══════════════════════════════════════════════════════════════════════════

# Must run before foodbabes is imported: the module-level settings and app
# read these
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///./test.db"
os.environ["STORAGE_ROOT"] = tempfile.mkdtemp(prefix="foodbabes_test_")
os.environ["IMAGE_STORAGE_BACKEND"] = "local"
os.environ["LOG_LEVEL"] = "WARNING"

from foodbabes.config import Settings  # noqa: E402
from foodbabes.database import Database  # noqa: E402
from foodbabes.main import create_app  # noqa: E402
from foodbabes.services.image_storage import create_image_storage  # noqa: E402


# ══════════════════════════════════════════════════════════════════════════
# Settings, Store and Storage
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def test_settings(tmp_path) -> Settings:
    return Settings(
        _env_file=None,
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'test.db'}",
        storage_root=str(tmp_path / "storage"),
        public_base_url="http://test",
        image_storage_backend="local",
        log_level="WARNING",
        # Keeps token generation fast; length is asserted separately
        access_token_bytes=32,
    )


@pytest_asyncio.fixture
async def database(test_settings):
    db = Database.from_settings(test_settings)
    db.connect()
    await db.create_all()
    yield db
    await db.dispose()


@pytest_asyncio.fixture
async def db_session(database):
    async with database.session() as session:
        yield session


@pytest.fixture
def image_storage(test_settings):
    return create_image_storage(test_settings)


@pytest.fixture
def mock_db_session():
    """
    A MagicMock standing in for AsyncSession.

    Usage:
        mock_db_session.commit.side_effect = SQLAlchemyError("boom")
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.commit = AsyncMock()
    session.refresh = AsyncMock()
    session.rollback = AsyncMock()
    session.get = AsyncMock(return_value=None)
    session.add = MagicMock()
    return session


# ══════════════════════════════════════════════════════════════════════════
# Images
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def make_image():
    """Factory for real encoded image bytes: make_image(w, h, "PNG")."""

    def _make(width: int = 64, height: int = 48, fmt: str = "PNG") -> bytes:
        image = Image.new("RGB", (width, height), color=(200, 80, 40))
        buffer = io.BytesIO()
        image.save(buffer, format=fmt)
        return buffer.getvalue()

    return _make


@pytest.fixture
def make_png_header():
    """
    Factory for a tiny PNG that only declares its size: make_png_header(w, h).

    A 1-bit grayscale header with an empty IDAT chunk. Pillow reads the
    dimensions at open time without decoding any pixels.
    """

    def _chunk(kind: bytes, data: bytes) -> bytes:
        crc = zlib.crc32(kind + data) & 0xFFFFFFFF
        return struct.pack(">I", len(data)) + kind + data + struct.pack(">I", crc)

    def _make(width: int, height: int) -> bytes:
        header = struct.pack(">IIBBBBB", width, height, 1, 0, 0, 0, 0)
        return (
            b"\x89PNG\r\n\x1a\n"
            + _chunk(b"IHDR", header)
            + _chunk(b"IDAT", zlib.compress(b""))
            + _chunk(b"IEND", b"")
        )

    return _make


@pytest.fixture
def png_bytes(make_image) -> bytes:
    return make_image(64, 48, "PNG")


@pytest.fixture
def jpeg_bytes(make_image) -> bytes:
    return make_image(64, 48, "JPEG")


# ══════════════════════════════════════════════════════════════════════════
# Application and HTTP Client
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def app(test_settings, database, image_storage):
    application = create_app(test_settings)
    application.state.database = database
    application.state.image_storage = image_storage
    return application


@pytest_asyncio.fixture
async def test_client(app):
    """
    HTTPX AsyncClient routed straight into the app.

    raise_app_exceptions=False: the catch-all handler's 500 response is
    returned instead of the exception being re-raised into the test.
    """
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
