from __future__ import annotations

from collections.abc import Awaitable, Callable
import logging
import time
from typing import TYPE_CHECKING
import uuid

from fastapi import Request
from fastapi.responses import Response

if TYPE_CHECKING:  # pragma: no cover
    from fastapi import FastAPI

logger = logging.getLogger("slugpress.requests")


def register_request_id_middleware(app: FastAPI) -> None:
    """Tag each request with an id, echo it as X-Request-Id and log the outcome."""

    @app.middleware("http")
    async def add_request_id(request: Request, call_next: Callable[[Request], Awaitable[Response]]) -> Response:  # noqa: D401
        req_id = request.headers.get("x-request-id") or uuid.uuid4().hex
        request.state.request_id = req_id
        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000
        logger.debug("[%s] %s %s -> %s (%.1f ms)", req_id, request.method, request.url.path, response.status_code, elapsed_ms)
        response.headers.setdefault("X-Request-Id", req_id)
        return response
