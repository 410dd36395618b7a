from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles
from starlette.middleware.cors import CORSMiddleware

from api.handlers.exceptions import register_exception_handlers
from api.middleware.request_id import register_request_id_middleware
from api.routes import router as api_router
from api.routes.system import router as system_router
from core.config import Settings, get_settings
from core.logging import setup_logging
from storage import build_image_store, build_post_storage
from storage.base import PostStorage
from storage.images import ImageStore, LocalImageStore

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    settings: Settings = app.state.settings
    storage: PostStorage = app.state.post_storage
    logger.info("Starting up %s (%s storage)", settings.api_title, settings.storage.backend if settings.storage else "?")

    try:
        await storage.startup()
        logger.info("Application startup completed")
    except Exception as e:  # pragma: no cover - startup failures should be visible in logs
        logger.error(f"Application startup failed: {e}")
        raise

    yield

    logger.info("Shutting down %s", settings.api_title)
    try:
        await storage.shutdown()
        logger.info("Application shutdown completed")
    except Exception as e:  # pragma: no cover
        logger.error(f"Error during shutdown: {e}")


def _mount_local_uploads(app: FastAPI, images: LocalImageStore) -> None:
    images.ensure_directory()
    static = StaticFiles(directory=images.directory)
    app.mount("/uploads", static, name="uploads")
    app.mount("/api/uploads", static, name="api-uploads")


def create_app(
    settings: Settings | None = None,
    *,
    post_storage: PostStorage | None = None,
    image_store: ImageStore | None = None,
) -> FastAPI:
    settings = settings or get_settings()
    setup_logging(settings.logging)

    app = FastAPI(
        title=settings.api_title,
        version=settings.api_version,
        description=settings.api_description,
        debug=settings.debug,
        lifespan=lifespan,
        docs_url="/docs" if settings.environment != "production" else None,
        redoc_url="/redoc" if settings.environment != "production" else None,
        openapi_url="/openapi.json" if settings.environment != "production" else None,
    )

    app.state.settings = settings
    app.state.post_storage = post_storage or build_post_storage(settings)
    app.state.image_store = image_store or build_image_store(settings)

    # Routers
    app.include_router(api_router)
    app.include_router(system_router)

    # Images written to local disk are served back as static files
    if isinstance(app.state.image_store, LocalImageStore):
        _mount_local_uploads(app, app.state.image_store)

    # CORS (CORS_ALLOW_ORIGINS, comma separated)
    if settings.cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.cors_origins,
            allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
            allow_headers=["*"],
            allow_credentials=False,
            max_age=3600,
        )

    register_request_id_middleware(app)
    register_exception_handlers(app)

    return app
