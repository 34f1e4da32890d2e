"""
To-do REST API — application entry point.
"""

from __future__ import annotations

import logging
import sys
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.errors import register_exception_handlers
from api.middleware import register_middleware
from api.todos import router as todos_router
from api.users import router as users_router
from auth.sessions import purge_expired_sessions
from config.settings import config
from database.session import async_session_factory, engine, init_models

logging.basicConfig(
    level=logging.DEBUG if config.debug else logging.INFO,
    format="%(asctime)s  %(levelname)-8s  %(name)s — %(message)s",
    stream=sys.stdout,
)
for _noisy in ("sqlalchemy.engine", "aiosqlite", "asyncio", "httpx", "httpcore"):
    logging.getLogger(_noisy).setLevel(logging.WARNING)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Creating tables…")
    await init_models()

    async with async_session_factory() as session:
        purged = await purge_expired_sessions(session)
        await session.commit()
    if purged:
        logger.info("Purged %d expired sessions from previous run", purged)

    logger.info("Application ready to accept requests.")
    yield
    await engine.dispose()


def create_app() -> FastAPI:
    app = FastAPI(
        title="To-Do API",
        version="1.0.0",
        description="Per-user to-do lists behind cookie sessions.",
        lifespan=lifespan,
    )

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_middleware(app)
    register_exception_handlers(app)

    # Routes
    app.include_router(users_router, prefix="/api/v1/users")
    app.include_router(todos_router, prefix="/api/v1/todos")

    @app.get("/health", tags=["health"])
    async def health():
        return {"status": "ok"}

    return app


app = create_app()

if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host=config.host,
        port=config.port,
        reload=config.debug,
        log_level="debug" if config.debug else "info",
    )
