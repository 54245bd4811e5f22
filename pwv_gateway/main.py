# pwv_gateway/main.py
from contextlib import asynccontextmanager
from typing import Optional
import sys
import uuid

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
import uvicorn

from pwv_gateway.api.v1.router import api_router
from pwv_gateway.core.config import Settings, VaultConfiguration, bootstrap_config, settings as default_settings
from pwv_gateway.core.constants import VERSION
from pwv_gateway.core.exceptions import ConfigurationError
from pwv_gateway.core.logging import get_logger, setup_logging
from pwv_gateway.executors.base import BaseInvoker
from pwv_gateway.executors.vault_cli import VaultCLIInvoker
from pwv_gateway.middleware.concurrency_limit import ConcurrencyLimitMiddleware
from pwv_gateway.schemas.fetch import HealthResponse
from pwv_gateway.services.fetch_service import FetchService

logger = get_logger(__name__)


def create_app(
    config: VaultConfiguration,
    invoker: Optional[BaseInvoker] = None,
    settings: Optional[Settings] = None,
) -> FastAPI:
    """
    Build the gateway application.

    The configuration is held by the app for its whole lifetime; handlers
    reach it through app.state rather than module globals, so tests can
    build an app around any configuration and invoker.
    """
    settings = settings or default_settings
    if invoker is None:
        invoker = VaultCLIInvoker()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(f"Serving vault CLI gateway on {config.bind_address}:{config.bind_port}")
        yield
        logger.info("Shutting down vault CLI gateway")

    app = FastAPI(
        title="PWV Gateway",
        version=VERSION,
        docs_url=None,
        redoc_url=None,
        lifespan=lifespan,
    )
    app.state.fetch_service = FetchService(config, invoker)

    app.add_middleware(ConcurrencyLimitMiddleware, max_allowed=settings.MAX_CONCURRENT_REQUESTS)

    @app.middleware("http")
    async def request_id_middleware(request: Request, call_next):
        request.state.request_id = request.headers.get("x-request-id") or str(uuid.uuid4())
        response = await call_next(request)
        response.headers["X-Request-ID"] = request.state.request_id
        return response

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """Global exception handler"""
        logger.exception("Unhandled exception while handling request", exc_info=exc)
        return JSONResponse(
            status_code=500,
            content={"result": None, "error": "Internal server error", "stderr": None},
        )

    @app.get("/health", response_model=HealthResponse)
    async def health_check():
        """Health check endpoint"""
        return HealthResponse(status="healthy", version=VERSION)

    app.include_router(api_router)

    return app


def run() -> None:
    """Console entry point: load config.yaml and serve until interrupted"""
    setup_logging(default_settings.LOG_LEVEL)
    logger.info(f"Starting service (version: {VERSION})...")

    try:
        config = bootstrap_config(default_settings.CONFIG_FILE)
    except ConfigurationError as e:
        logger.error(f"While loading configuration an exception occurred: {e}")
        sys.exit(1)

    logger.info("Config loaded", extra={"config": config.to_document()})

    app = create_app(config)
    uvicorn.run(
        app,
        host=config.bind_address,
        port=config.bind_port,
        log_config=None,
    )


if __name__ == "__main__":
    run()
