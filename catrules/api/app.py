"""FastAPI application entry point."""

from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from prometheus_client import make_asgi_app

from catrules.api.routes import content, executions, rules, scheduler
from catrules.core.config import get_settings
from catrules.core.errors import NotFoundError, PersistenceError
from catrules.core.logging import get_logger, setup_logging
from catrules.storage.redis_client import close_redis_pool, init_redis_pool

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan manager."""
    settings = get_settings()

    setup_logging()
    logger.info("Starting application", app_name=settings.app_name, version=settings.app_version)

    await init_redis_pool()
    logger.info("Redis connection pool initialized")

    yield

    logger.info("Shutting down application")
    await close_redis_pool()
    logger.info("Redis connection pool closed")


def _error(status_code: int, message: str, data: object = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"code": status_code, "message": message, "data": data},
    )


def create_app() -> FastAPI:
    """Create and configure FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="Rule-based automatic content categorization",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(rules.router, prefix="/api/v1")
    app.include_router(rules.category_router, prefix="/api/v1")
    app.include_router(executions.router, prefix="/api/v1")
    app.include_router(content.router, prefix="/api/v1")
    app.include_router(scheduler.router, prefix="/api/v1")

    app.mount("/metrics", make_asgi_app())

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
        detail = exc.detail
        return _error(
            exc.status_code,
            detail if isinstance(detail, str) else "HTTP error",
            None if isinstance(detail, str) else detail,
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request,
        exc: RequestValidationError,
    ) -> JSONResponse:
        return _error(422, "Validation error", jsonable_errors(exc))

    @app.exception_handler(NotFoundError)
    async def not_found_handler(request: Request, exc: NotFoundError) -> JSONResponse:
        return _error(404, str(exc))

    @app.exception_handler(PersistenceError)
    async def persistence_handler(request: Request, exc: PersistenceError) -> JSONResponse:
        logger.error("Storage unavailable", path=request.url.path, error=str(exc))
        return _error(503, str(exc))

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.error(
            "Unhandled exception",
            exc_info=exc,
            path=request.url.path,
            method=request.method,
        )
        return _error(500, "Internal server error", str(exc) if settings.debug else None)

    @app.get("/health")
    async def health_check() -> dict:
        """Health check endpoint."""
        return {"status": "ok", "version": settings.app_version}

    return app


def jsonable_errors(exc: RequestValidationError) -> list[dict]:
    """Validation errors without non-serializable context objects."""
    errors = []
    for error in exc.errors():
        error = dict(error)
        ctx = error.get("ctx")
        if ctx:
            error["ctx"] = {key: str(value) for key, value in ctx.items()}
        errors.append(error)
    return errors


# Application instance for uvicorn
app = create_app()
