"""FastAPI application factory."""

import logging
from contextlib import asynccontextmanager
from collections.abc import AsyncIterator
from pathlib import Path

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from cuadrante.config import get_settings
from cuadrante.application.services import UserService
from cuadrante.domain.exceptions import StorageError
from cuadrante.infrastructure.database import Base, engine
from cuadrante.infrastructure.database.bootstrap import prepare_database
from cuadrante.infrastructure.database.session import async_session_factory
from cuadrante.infrastructure.database.repositories import SQLAlchemyUserRepository
from cuadrante.infrastructure.database.unit_of_work import SQLAlchemyUnitOfWork
from cuadrante.infrastructure.dependencies import get_sync_bus
from cuadrante.infrastructure.logging.log_config import setup_logging
from cuadrante.presentation.api.router import router as api_router

logger = logging.getLogger(__name__)


async def _seed_default_admin() -> None:
    """Ensure at least one admin can log in on a fresh install."""
    settings = get_settings()
    try:
        async with async_session_factory() as session:
            service = UserService(
                SQLAlchemyUserRepository(session),
                get_sync_bus(),
                SQLAlchemyUnitOfWork(session),
            )
            created = await service.ensure_default_admin(
                settings.default_admin_name, settings.default_admin_identifier
            )
            if created is None:
                logger.debug("Users already present; default admin not seeded")
    except Exception as exc:
        logger.warning("Could not seed default admin user: %s", exc)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Create tables and seed the admin on startup; close the sync bus on exit."""
    settings = get_settings()
    setup_logging()

    await prepare_database(settings.database_url)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    await _seed_default_admin()
    Path(settings.upload_dir).mkdir(parents=True, exist_ok=True)

    logger.info("%s %s started (%s)", settings.app_title, settings.app_version, settings.app_env)

    yield

    await get_sync_bus().shutdown()
    await engine.dispose()


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"detail": message})


def _register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        """Report malformed or missing fields as 400 rather than 422."""
        errors = exc.errors()
        logger.info("Validation failed for %s: %s", request.url.path, errors)
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"detail": "Validation failed", "errors": _jsonable_errors(errors)},
        )

    @app.exception_handler(IntegrityError)
    async def integrity_exception_handler(request: Request, exc: IntegrityError):
        logger.warning("Integrity error on %s: %s", request.url.path, exc.orig)
        return _error(status.HTTP_400_BAD_REQUEST, "Conflicts with an existing record")

    @app.exception_handler(SQLAlchemyError)
    async def sqlalchemy_exception_handler(request: Request, exc: SQLAlchemyError):
        logger.exception("Database error on %s", request.url.path)
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Storage unavailable")

    @app.exception_handler(StorageError)
    async def storage_exception_handler(request: Request, exc: StorageError):
        if isinstance(exc.cause, IntegrityError):
            logger.warning("Integrity error on %s: %s", request.url.path, exc.cause.orig)
            return _error(status.HTTP_400_BAD_REQUEST, "Conflicts with an existing record")
        logger.error("Storage failure on %s: %s", request.url.path, exc)
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Storage unavailable")


def _jsonable_errors(errors) -> list[dict]:
    """Keep only the JSON-safe parts of pydantic error dicts."""
    return [
        {"loc": list(e.get("loc", ())), "msg": e.get("msg", ""), "type": e.get("type", "")}
        for e in errors
    ]


def create_app() -> FastAPI:
    """Factory function that builds and configures the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title=settings.app_title,
        version=settings.app_version,
        lifespan=lifespan,
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    _register_exception_handlers(app)

    # Mount API routes
    app.include_router(api_router)

    # Uploaded images are addressed by URL from calendar entries
    app.mount(
        settings.uploads_url_prefix,
        StaticFiles(directory=settings.upload_dir, check_dir=False),
        name="uploads",
    )

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "cuadrante.main:app",
        host="0.0.0.0",
        port=3000,
        reload=True,
    )
