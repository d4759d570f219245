"""FastAPI application factory for the registry service."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .. import __version__
from ..persistence import InMemoryLedger, Ledger, LedgerError, SqliteLedger
from ..registry.errors import RegistryError
from ..registry.router import SupplyRegistry
from .config import LedgerBackend, RegistryConfig
from .middleware import CorrelationIdMiddleware
from .models import HealthResponse
from .router import build_router

logger = logging.getLogger(__name__)


def create_ledger(config: RegistryConfig) -> Ledger:
    """Build the ledger backend selected by ``config``."""
    if config.ledger_backend is LedgerBackend.SQLITE:
        return SqliteLedger(config.db_path)
    return InMemoryLedger()


@asynccontextmanager
async def _lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Lifespan context manager for startup/shutdown."""
    config: RegistryConfig = app.state.config
    registry: SupplyRegistry = app.state.registry

    logger.info(
        f"Starting registry service (ledger={config.ledger_backend.value}, "
        f"ownership={config.track_ownership})"
    )
    if config.auto_initialize and not registry.index.is_initialized():
        registry.initialize()

    yield

    logger.info("Shutting down registry service...")
    close = getattr(app.state.ledger, "close", None)
    if callable(close):
        close()


async def _registry_error_handler(request: Request, exc: RegistryError) -> JSONResponse:
    if exc.http_status >= 500:
        logger.error(f"{exc.kind}: {exc.message}")
    else:
        logger.info(f"{exc.kind}: {exc.message}")
    return JSONResponse(status_code=exc.http_status, content=exc.to_dict())


async def _ledger_error_handler(request: Request, exc: LedgerError) -> JSONResponse:
    logger.error(f"Ledger failure: {exc}")
    return JSONResponse(
        status_code=503,
        content={"error": "LedgerUnavailable", "message": str(exc), "key": exc.key, "operation": None},
    )


def create_registry_app(
    config: RegistryConfig,
    *,
    ledger: Ledger | None = None,
) -> FastAPI:
    """Create and configure the registry FastAPI application.

    Args:
        config: RegistryConfig instance
        ledger: Ledger to use instead of the one ``config`` selects

    Returns:
        Configured FastAPI application
    """
    app = FastAPI(
        title="Bluechain Supply Registry",
        description="SupplyItem records over a key-value ledger",
        version=__version__,
        lifespan=_lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(CorrelationIdMiddleware)

    app.add_exception_handler(RegistryError, _registry_error_handler)
    app.add_exception_handler(LedgerError, _ledger_error_handler)

    if ledger is None:
        ledger = create_ledger(config)

    registry = SupplyRegistry(
        ledger,
        schema=config.schema,
        index_key=config.index_key,
        strict_initialize=config.strict_initialize,
    )
    app.include_router(build_router(registry))

    app.state.config = config
    app.state.ledger = ledger
    app.state.registry = registry

    @app.get("/healthz", response_model=HealthResponse)
    def healthz() -> HealthResponse:
        """Health check with ledger and index verification."""
        checks: dict[str, dict] = {}
        all_healthy = True

        try:
            keys = list(ledger.keys())
            checks["ledger"] = {
                "status": "healthy",
                "backend": config.ledger_backend.value,
                "entries": len(keys),
            }
        except LedgerError as e:
            checks["ledger"] = {"status": "unhealthy", "error": str(e)}
            all_healthy = False

        try:
            ids = registry.index.load_index()
            checks["index"] = {"status": "healthy", "records": len(ids)}
        except RegistryError as e:
            checks["index"] = {"status": "unhealthy", "error": e.kind}
            all_healthy = False

        return HealthResponse(
            status="ok" if all_healthy else "degraded",
            version=__version__,
            checks=checks,
        )

    @app.get("/ready")
    def ready() -> dict:
        """Readiness probe - ready once the index exists."""
        try:
            is_ready = registry.index.is_initialized()
        except RegistryError:
            is_ready = False
        return {"ready": is_ready, "service": "bluechain"}

    return app


def create_app_from_env() -> FastAPI:
    """Create app using environment variable configuration."""
    return create_registry_app(RegistryConfig.from_env())


__all__ = ["create_registry_app", "create_app_from_env", "create_ledger"]
