"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from carbon_ledger.api.ledger import router as ledger_router
from carbon_ledger.api.settings import router as settings_router
from carbon_ledger.app_logging import configure_logging
from carbon_ledger.containers import AppContainer
from carbon_ledger.domain.errors import PersistenceError


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        await app.state.container.ledger_service.load()
        yield

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    app.include_router(ledger_router)
    app.include_router(settings_router)

    @app.exception_handler(PersistenceError)
    async def persistence_error(
        request: Request, exc: PersistenceError
    ) -> JSONResponse:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc)
        return JSONResponse(
            status_code=503,
            content={"detail": str(exc), "operation": exc.operation},
        )

    @app.exception_handler(ValueError)
    async def invalid_value(request: Request, exc: ValueError) -> JSONResponse:
        return JSONResponse(status_code=422, content={"detail": str(exc)})

    @app.get("/health")
    async def health(request: Request) -> dict[str, object]:
        """Simple health check endpoint."""
        ledger_service = request.app.state.container.ledger_service
        return {"status": "ok", "loading": ledger_service.is_loading}

    return app
