"""FastAPI application entry point.

biz - health-check and connectivity-test service for Redis and MySQL.
"""

from contextlib import asynccontextmanager
from collections.abc import AsyncGenerator
import asyncio
import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from biz.routes import api_router
from biz.schemas import ErrorResponse
from biz.services.probes import BackendNotInitializedError, BackendOperationError
from biz.settings import Settings, get_settings
from biz.stores import Backends
from biz.stores.database import close_database, open_database
from biz.stores.redis import close_redis, open_redis

logger = logging.getLogger("uvicorn.error")


def _error_response(status_code: int, code: str, message: str) -> JSONResponse:
    body = ErrorResponse(error=message, code=code)
    return JSONResponse(status_code=status_code, content=body.model_dump())


async def init_backends(settings: Settings) -> Backends:
    """Open both backend handles.

    A failure leaves that handle unset; it never aborts startup.
    """
    backends = Backends(enabled=settings.backends_enabled)
    if not settings.backends_enabled:
        logger.info("Backends disabled (BACKENDS_ENABLED=false); skipping Redis and MySQL")
        return backends

    try:
        backends.redis = await asyncio.wait_for(open_redis(settings), settings.connect_timeout)
    except Exception:
        logger.exception("Redis init failed")

    try:
        backends.database = await asyncio.wait_for(open_database(settings), settings.connect_timeout)
    except Exception:
        logger.exception("MySQL init failed")

    return backends


async def close_backends(backends: Backends) -> None:
    """Close whatever was opened and unset both handles."""
    await close_redis(backends.redis)
    await close_database(backends.database)
    backends.redis = None
    backends.database = None


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager.

    Handles startup and shutdown events.
    """
    app.state.backends = await init_backends(app.state.settings)

    yield

    await close_backends(app.state.backends)


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure FastAPI application."""
    settings = settings or get_settings()

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="Health-check and connectivity-test endpoints for Redis and MySQL",
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
    )
    app.state.settings = settings
    # Replaced on startup; handlers see unset handles until then.
    app.state.backends = Backends(enabled=settings.backends_enabled)

    @app.exception_handler(BackendNotInitializedError)
    async def not_initialized_handler(request: Request, exc: BackendNotInitializedError) -> JSONResponse:
        return _error_response(503, f"{exc.backend.upper()}_NOT_INITIALIZED", str(exc))

    @app.exception_handler(BackendOperationError)
    async def operation_error_handler(request: Request, exc: BackendOperationError) -> JSONResponse:
        return _error_response(500, f"{exc.backend.upper()}_OPERATION_FAILED", str(exc))

    # Exception handler for structured error format
    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """Global exception handler returning structured error format."""
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return _error_response(
            500,
            "INTERNAL_ERROR",
            str(exc) if settings.debug else "Internal server error",
        )

    app.include_router(api_router)

    return app


# Application instance
app = create_app()


def run() -> None:
    """Console entry point: serve the app with uvicorn."""
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "biz.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )


if __name__ == "__main__":
    run()
