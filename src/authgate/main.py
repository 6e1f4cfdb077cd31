"""FastAPI application factory.

Learn: App factory pattern — create_app() returns a configured FastAPI
instance. Lifespan manages startup/shutdown (the database engine).
Middleware, CORS, error handlers and routers are all registered here.
"""

from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from authgate import __version__
from authgate.api import api_router
from authgate.config import settings
from authgate.errors import register_error_handlers
from authgate.middleware.request_id import RequestIdMiddleware

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown lifecycle.

    Learn: Anything before `yield` runs at startup, after `yield` runs
    at shutdown.
    """
    logger.info(
        "authgate.starting",
        version=__version__,
        environment=settings.environment,
        user_store=settings.user_store,
        port=settings.port,
    )

    yield

    logger.info("authgate.shutdown")

    if settings.user_store == "sql":
        from authgate.db.engine import engine
        await engine.dispose()


def create_app() -> FastAPI:
    """Build and return the FastAPI application."""
    app = FastAPI(
        title="authgate",
        description="Registration, login and bearer-token protected routes",
        version=__version__,
        lifespan=lifespan,
    )

    # ── Middleware stack ──────────────────────────────────────
    # Note: Starlette middleware executes in reverse order of registration.
    # Request flow: RequestId → CORS → handler

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestIdMiddleware)

    register_error_handlers(app)

    app.include_router(api_router)

    return app


# Default app instance (used by uvicorn: authgate.main:app)
app = create_app()
