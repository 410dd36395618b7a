from typing import Literal

from pydantic import BaseModel, Field, field_validator


class AdminConfig(BaseModel):
    """The single admin identity allowed to log in."""

    username: str | None = Field(default=None, description="Admin username")
    password_hash: str | None = Field(default=None, description="bcrypt hash of the admin password")

    @property
    def configured(self) -> bool:
        return bool(self.username and self.password_hash)


class SecurityConfig(BaseModel):
    """Signing configuration for bearer tokens."""

    secret_key: str = Field(..., min_length=1, description="JWT signing secret")
    algorithm: str = Field(default="HS256", description="JWT algorithm")
    access_token_expire_minutes: int = Field(default=60, ge=1, le=1440)

    @field_validator("algorithm")
    @classmethod
    def validate_algorithm(cls, value: str) -> str:
        if not value.upper().startswith("HS"):
            raise ValueError("Only HMAC algorithms are supported for a shared secret")
        return value.upper()


class StorageConfig(BaseModel):
    """Where posts and uploaded images live."""

    backend: Literal["file", "database"] = Field(default="file")
    posts_file: str = Field(default="posts.json", description="JSON array file used by the file backend")
    uploads_dir: str = Field(default="uploads", description="Directory for locally stored images")
    public_base_url: str = Field(default="", description="Prefix for URLs of locally stored images")


class DatabaseConfig(BaseModel):
    """Database connection and engine configuration."""

    url: str = Field(..., description="Database connection URL")
    echo: bool = Field(default=False, description="Enable SQL query logging")
    pool_size: int = Field(default=10, ge=1, le=100)
    max_overflow: int = Field(default=20, ge=0, le=100)
    pool_timeout: int = Field(default=30, ge=1, le=300)
    pool_pre_ping: bool = Field(default=True)


class ObjectStorageConfig(BaseModel):
    """S3-compatible bucket used for images in database mode."""

    bucket: str = Field(..., min_length=1)
    endpoint_url: str | None = Field(default=None)
    region: str | None = Field(default=None)
    access_key_id: str | None = Field(default=None)
    secret_access_key: str | None = Field(default=None)
    public_url: str | None = Field(default=None, description="Public base URL of the bucket")
    prefix: str = Field(default="uploads")


class ServerConfig(BaseModel):
    """Server runtime configuration."""

    host: str = Field(default="0.0.0.0", description="Server host")
    port: int = Field(default=8000, ge=1, le=65535, description="Server port")
    reload: bool = Field(default=False, description="Enable auto-reload in development")
    check_db_on_start: bool = Field(default=True, description="Run DB connection check on startup")


class LoggingConfig(BaseModel):
    """Application logging configuration."""

    level: str = Field(default="INFO", pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$")
    format: str = Field(default="%(asctime)s - %(name)s - %(levelname)s - %(message)s")
