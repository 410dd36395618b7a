from functools import lru_cache
import os

from dotenv import load_dotenv
from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .config_models import (
    AdminConfig,
    DatabaseConfig,
    LoggingConfig,
    ObjectStorageConfig,
    SecurityConfig,
    ServerConfig,
    StorageConfig,
)

DEV_SECRET_KEY = "dev-secret-key-not-for-production-use"


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


def _to_async_dsn(url: str) -> str:
    if "+asyncpg" in url or "+aiosqlite" in url:
        return url
    if url.startswith("postgresql+psycopg2://"):
        return url.replace("postgresql+psycopg2://", "postgresql+asyncpg://", 1)
    if url.startswith("postgresql://"):
        return url.replace("postgresql://", "postgresql+asyncpg://", 1)
    if url.startswith("postgres://"):
        return url.replace("postgres://", "postgresql+asyncpg://", 1)
    return url


class Settings(BaseSettings):
    """Application settings assembled from environment variables and defaults.

    Nested sections left as ``None`` are filled from the environment in the
    validator; passing them explicitly (as the tests do) skips the lookup.
    """

    # Environment
    environment: str = Field(default="development", pattern="^(development|staging|production)$")
    debug: bool = Field(default=False)

    # API
    api_title: str = Field(default="Slugpress API")
    api_version: str = Field(default="1.0.0")
    api_description: str = Field(default="Blog post backend with a single admin account")

    server: ServerConfig = Field(default_factory=ServerConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    admin: AdminConfig | None = None
    security: SecurityConfig | None = None
    storage: StorageConfig | None = None
    database: DatabaseConfig | None = None
    object_storage: ObjectStorageConfig | None = None

    # Comma separated; empty disables CORS
    cors_allow_origins: str = Field(default="", description="Origins allowed by CORS")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @model_validator(mode="after")
    def _assemble_subconfigs(self):
        """Assemble nested configurations from environment variables."""
        if self.admin is None:
            self.admin = AdminConfig(
                username=os.getenv("ADMIN_USERNAME") or None,
                # ADMIN_PASSWORD is the historical name and also holds a hash
                password_hash=os.getenv("ADMIN_PASSWORD_HASH") or os.getenv("ADMIN_PASSWORD") or None,
            )

        if self.security is None:
            secret_key = os.getenv("JWT_SECRET") or os.getenv("SECRET_KEY")
            if not secret_key:
                if self.environment == "production":
                    raise ValueError("JWT_SECRET environment variable is required in production")
                secret_key = DEV_SECRET_KEY
            self.security = SecurityConfig(
                secret_key=secret_key,
                algorithm=os.getenv("JWT_ALGORITHM", "HS256"),
                access_token_expire_minutes=int(os.getenv("JWT_EXPIRE_MINUTES", "60")),
            )

        if self.storage is None:
            self.storage = StorageConfig(
                backend=os.getenv("STORAGE_BACKEND", "file").strip().lower(),
                posts_file=os.getenv("POSTS_FILE", "posts.json"),
                uploads_dir=os.getenv("UPLOADS_DIR", "uploads"),
                public_base_url=os.getenv("PUBLIC_BASE_URL", "").rstrip("/"),
            )

        if self.storage.backend == "database":
            if self.database is None:
                database_url = os.getenv("DATABASE_URL")
                if not database_url:
                    raise ValueError("DATABASE_URL environment variable is required for the database backend")
                self.database = DatabaseConfig(
                    url=_to_async_dsn(database_url),
                    echo=self.environment == "development" and self.debug,
                    pool_size=int(os.getenv("DB_POOL_SIZE", "10")),
                    max_overflow=int(os.getenv("DB_MAX_OVERFLOW", "20")),
                    pool_timeout=int(os.getenv("DB_POOL_TIMEOUT", "30")),
                )
            if self.object_storage is None:
                bucket = os.getenv("S3_BUCKET")
                if not bucket:
                    raise ValueError("S3_BUCKET environment variable is required for the database backend")
                self.object_storage = ObjectStorageConfig(
                    bucket=bucket,
                    endpoint_url=os.getenv("S3_ENDPOINT_URL") or None,
                    region=os.getenv("S3_REGION") or None,
                    access_key_id=os.getenv("S3_ACCESS_KEY_ID") or None,
                    secret_access_key=os.getenv("S3_SECRET_ACCESS_KEY") or None,
                    public_url=(os.getenv("S3_PUBLIC_URL") or "").rstrip("/") or None,
                    prefix=os.getenv("S3_PREFIX", "uploads").strip("/"),
                )

        # Adjust logging for environment
        log_level = os.getenv("LOG_LEVEL")
        if log_level:
            self.logging.level = log_level.upper()
        elif self.environment == "production":
            self.logging.level = "WARNING"
        elif self.environment == "development":
            self.logging.level = "DEBUG"

        # Server env overrides
        if os.getenv("HOST"):
            self.server.host = os.environ["HOST"]
        if os.getenv("PORT"):
            self.server.port = int(os.environ["PORT"])
        self.server.check_db_on_start = _env_flag("DB_CHECK_ON_START", "true")

        return self

    @property
    def cors_origins(self) -> list[str]:
        return [origin.strip() for origin in self.cors_allow_origins.split(",") if origin.strip()]


@lru_cache
def get_settings() -> "Settings":
    """Return cached settings instance."""
    # Nested sections read os.environ, so .env values have to land there first
    load_dotenv(".env", override=False)
    return Settings()
