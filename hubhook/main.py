"""
HubHook - signed webhook receiver.

Main FastAPI application entry point.
Answers the platform's subscription handshake and verifies the
signature of every event delivery.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI

from hubhook import __version__
from hubhook.api.router import api_router
from hubhook.core.config import Settings, load_settings
from hubhook.schemas.webhook import HealthStatus

logger = logging.getLogger(__name__)


def configure_logging(settings: Settings) -> None:
    """Configure root logging once for the process."""
    logging.basicConfig(
        level=logging.DEBUG if settings.debug else logging.INFO,
        format="%(asctime)s - [API] - %(name)s - %(levelname)s - %(message)s",
    )


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan manager.

    Logs the effective configuration on startup and reports
    missing secrets, which is where configuration errors surface.

    Args:
        app: The FastAPI application instance.

    Yields:
        None
    """
    settings: Settings = app.state.settings

    # Startup
    logger.info(f"Starting {settings.app_name}...")
    logger.info(f"Debug mode: {settings.debug}")
    logger.info(f"Listening on port {settings.port}")

    for name in settings.missing_fields():
        logger.error(f"❌ {name} is not configured")

    if settings.reject_invalid_signatures:
        logger.info("Invalid signatures will be rejected with 401")
    else:
        logger.warning("Invalid signatures are logged only, deliveries are still accepted")

    yield

    # Shutdown
    logger.info(f"Shutting down {settings.app_name}...")


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        settings: Settings to run with. Loaded from the environment if omitted.

    Returns:
        FastAPI: The configured application instance.
    """
    if settings is None:
        settings = load_settings()

    configure_logging(settings)

    app = FastAPI(
        title=settings.app_name,
        description="Receives hub-style webhooks and verifies their HMAC signatures.",
        version=__version__,
        lifespan=lifespan,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        openapi_url="/openapi.json" if settings.debug else None,
    )
    app.state.settings = settings

    # Include API routes
    app.include_router(api_router)

    # Health check endpoint
    @app.get("/health", tags=["health"], response_model=HealthStatus)
    async def health_check() -> HealthStatus:
        """Health check endpoint."""
        return HealthStatus(app=settings.app_name)

    return app


def main() -> None:
    """Run the API server with uvicorn."""
    import uvicorn

    settings = load_settings()
    uvicorn.run(
        create_app(settings),
        host=settings.api_host,
        port=settings.port,
    )


if __name__ == "__main__":
    main()
