from __future__ import annotations

from fastapi import APIRouter

from api.routes.auth import router as auth_router
from api.routes.posts import router as posts_router
from api.routes.uploads import router as uploads_router

# Aggregate all domain routers under the /api prefix
router = APIRouter(prefix="/api")
router.include_router(auth_router)
router.include_router(posts_router)
router.include_router(uploads_router)
