from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI

from .config import Settings
from .container import Container
from .infrastructure.logging import configure_logging
from .presentation.api.errors import setup_exception_handlers
from .presentation.api.v1 import health, messages
from .presentation.middleware import CorrelationIdMiddleware

VERSION = "0.1.0"


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the FastAPI application around a fresh dependency container."""
    settings = settings or Settings()
    configure_logging(settings.service_name, level=settings.log_level, debug=settings.debug)
    logger = structlog.get_logger()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        container = Container(settings, logger=logger)
        logger.info("Starting application", service=settings.service_name, version=VERSION)
        try:
            await container.start()
        except Exception as e:
            logger.error(
                "Failed to start application",
                error=str(e),
                error_type=type(e).__name__,
                exc_info=True,
            )
            await container.close()
            raise

        app.state.container = container
        yield

        await container.close()
        logger.info("Application shutdown complete")

    app = FastAPI(
        title="HTTP SMS Gateway",
        description="Queue SMS messages for a companion phone to send",
        version=VERSION,
        lifespan=lifespan,
    )
    app.add_middleware(CorrelationIdMiddleware)
    setup_exception_handlers(app)

    app.include_router(health.router)
    app.include_router(messages.router, prefix="/v1")

    @app.get("/")
    def root() -> dict:
        return {
            "service": settings.service_name,
            "version": VERSION,
            "docs": "/docs",
        }

    return app
