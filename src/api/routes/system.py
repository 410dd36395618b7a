from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

from fastapi import APIRouter

from core.deps import PostStorageDep, SettingsDep
from schemas.responses import HealthCheckResponse

router = APIRouter(tags=["System"])


@router.get("/health", tags=["Health"], response_model=HealthCheckResponse)
async def health(settings: SettingsDep, storage: PostStorageDep) -> HealthCheckResponse:
    ok = await storage.healthcheck()
    assert settings.storage is not None
    return HealthCheckResponse(
        success=ok,
        status="ok" if ok else "degraded",
        version=settings.api_version,
        storage={"backend": settings.storage.backend, "healthy": ok},
    )


@router.get("/", tags=["Root"])
async def root(settings: SettingsDep) -> dict[str, Any]:
    return {
        "success": True,
        "message": f"Welcome to {settings.api_title}",
        "version": settings.api_version,
        "docs": "/docs" if settings.environment != "production" else None,
        "health": "/health",
        "timestamp": datetime.now(UTC).isoformat(),
    }
