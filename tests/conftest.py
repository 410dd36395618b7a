# ruff: noqa: E402
# IMPORTANT:
# 1) Neutralize deployment environment variables first, then import app modules.
# 2) Every test gets its own posts file and uploads directory under tmp_path.
# 3) anyio_backend must be session-scoped to avoid ScopeMismatch.

from collections.abc import AsyncGenerator
import os
from pathlib import Path

from asgi_lifespan import LifespanManager
from dotenv import load_dotenv
from httpx import ASGITransport, AsyncClient
import pytest


def _setup_test_environment() -> None:
    """Load optional .env.test, then keep deployment variables from leaking into the settings under test."""
    load_dotenv(".env.test", override=False)
    for name in ("STORAGE_BACKEND", "DATABASE_URL", "S3_BUCKET", "JWT_SECRET", "SECRET_KEY", "CORS_ALLOW_ORIGINS"):
        os.environ.pop(name, None)
    os.environ.setdefault("DB_CHECK_ON_START", "false")
    os.environ.setdefault("LOG_LEVEL", "WARNING")


_setup_test_environment()

from app import create_app
from core.config import Settings
from core.config_models import AdminConfig, DatabaseConfig, SecurityConfig, StorageConfig
from core.jwt import encode_access_token
from db.database import create_db_engine, create_schema
from storage.database_storage import DatabasePostStorage
from storage.file_storage import JsonFilePostStorage
from tests.factories.posts import ADMIN_PASSWORD_HASH, ADMIN_USERNAME, TEST_SECRET, InMemoryImageStore


# --- Pytest Fixtures ---


@pytest.fixture(scope="session")
def anyio_backend() -> str:
    """Align anyio_backend scope with anyio plugin expectations."""
    return "asyncio"


@pytest.fixture
def security_config() -> SecurityConfig:
    return SecurityConfig(secret_key=TEST_SECRET, access_token_expire_minutes=60)


@pytest.fixture
def admin_config() -> AdminConfig:
    return AdminConfig(username=ADMIN_USERNAME, password_hash=ADMIN_PASSWORD_HASH)


@pytest.fixture
def settings(tmp_path, security_config: SecurityConfig, admin_config: AdminConfig) -> Settings:
    """File-backend settings rooted in tmp_path."""
    return Settings(
        environment="development",
        admin=admin_config,
        security=security_config,
        storage=StorageConfig(
            backend="file",
            posts_file=str(tmp_path / "posts.json"),
            uploads_dir=str(tmp_path / "uploads"),
        ),
    )


@pytest.fixture
def posts_file(settings: Settings) -> Path:
    return Path(settings.storage.posts_file)


@pytest.fixture
def file_storage(posts_file) -> JsonFilePostStorage:
    return JsonFilePostStorage(posts_file)


@pytest.fixture
def image_store() -> InMemoryImageStore:
    return InMemoryImageStore()


@pytest.fixture
async def database_storage(tmp_path) -> AsyncGenerator[DatabasePostStorage]:
    """Database backend over a throwaway SQLite file."""
    engine = create_db_engine(DatabaseConfig(url=f"sqlite+aiosqlite:///{tmp_path / 'blog.db'}"))
    await create_schema(engine)
    storage = DatabasePostStorage(engine, check_on_start=True)
    await storage.startup()
    try:
        yield storage
    finally:
        await storage.shutdown()


@pytest.fixture
def app(settings: Settings):
    """FastAPI application instance for tests, created by factory with local image storage."""
    return create_app(settings)


@pytest.fixture
async def client(app) -> AsyncGenerator[AsyncClient]:
    """
    Async HTTP client with app lifespan management for integration tests.
    """
    async with LifespanManager(app):
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver") as ac:
            yield ac


@pytest.fixture
def auth_headers(security_config: SecurityConfig) -> dict[str, str]:
    token = encode_access_token(ADMIN_USERNAME, security_config)
    return {"Authorization": f"Bearer {token}"}
