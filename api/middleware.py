"""
Request logging middleware.

Every response carries ``X-Request-ID`` (echoed from the request when the
client sent one) and ``X-Process-Time``.  One access line per request records
who made it: the user id resolved by ``get_current_user``, or ``-`` for
anonymous calls.
"""

from __future__ import annotations

import logging
import time
import uuid

from fastapi import FastAPI, Request

logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"


def _user_label(request: Request) -> str:
    user = getattr(request.state, "user", None)
    return str(user.id) if user is not None else "-"


def register_middleware(app: FastAPI) -> None:
    """Attach the access-log middleware to *app*."""

    @app.middleware("http")
    async def access_log(request: Request, call_next):
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
        request.state.request_id = request_id
        request.state.user = None

        start = time.perf_counter()
        response = await call_next(request)
        elapsed = time.perf_counter() - start

        response.headers[REQUEST_ID_HEADER] = request_id
        response.headers["X-Process-Time"] = f"{elapsed:.4f}"

        level = logging.WARNING if response.status_code >= 500 else logging.INFO
        logger.log(
            level,
            "[%s] user=%s %s %s %d %.1fms",
            request_id,
            _user_label(request),
            request.method,
            request.url.path,
            response.status_code,
            elapsed * 1000,
        )
        return response
