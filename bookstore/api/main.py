"""
Bookstore API

FastAPI application entry point.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from dotenv import load_dotenv

# Load environment variables
load_dotenv()

from fastapi import FastAPI, Request
from loguru import logger

from bookstore import __version__
from bookstore.config import Settings
from .schemas import HealthResponse
from .routes import auth, books, categories, orders
from .middleware import LoggingConfig, setup_exception_handlers, setup_logging
from .dependencies import ServiceContainer, get_settings

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)


# =============================================================================
# Application Lifespan
# =============================================================================

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan manager.

    Startup:
    - Create missing tables
    - Start the order expiration sweeper
    Shutdown:
    - Stop the sweeper
    - Dispose of the connection pool
    """
    container: ServiceContainer = app.state.container
    settings = container.settings
    logger.info(f"Starting Bookstore API in {settings.environment} mode")

    try:
        logger.info("Initializing database...")
        await container.database.create_tables()

        if settings.order_sweeper_enabled:
            container.order_sweeper.start()

        logger.info("Bookstore API started successfully")

        yield

    finally:
        logger.info("Shutting down Bookstore API...")
        await container.order_sweeper.stop()
        await container.database.dispose()
        logger.info("Shutdown complete")


# =============================================================================
# Application Factory
# =============================================================================

def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        settings: Application settings. If None, loads from environment.

    Returns:
        Configured FastAPI application.
    """
    if settings is None:
        settings = get_settings()

    app = FastAPI(
        title="Bookstore API",
        description="Online bookstore: catalog, checkout and payment.",
        version=__version__,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        openapi_url="/openapi.json" if settings.debug else None,
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.container = ServiceContainer(settings)

    # ==========================================================================
    # Middleware
    # ==========================================================================

    setup_logging(
        app,
        config=LoggingConfig(
            enabled=True,
            log_request_body=settings.debug,
        ),
        structured=settings.environment != "development",
    )

    setup_exception_handlers(app)

    # ==========================================================================
    # Routers
    # ==========================================================================

    api_prefix = "/api"

    app.include_router(auth.router, prefix=api_prefix)
    app.include_router(categories.router, prefix=api_prefix)
    app.include_router(books.router, prefix=api_prefix)
    app.include_router(orders.router, prefix=api_prefix)

    # ==========================================================================
    # Root Routes
    # ==========================================================================

    @app.get("/health", response_model=HealthResponse, tags=["System"])
    async def health_check(request: Request) -> HealthResponse:
        """Report database reachability and sweeper state."""
        container: ServiceContainer = request.app.state.container
        components = {}
        overall_healthy = True

        try:
            await container.database.ping()
            components["database"] = "healthy"
        except Exception as e:
            logger.error(f"Health check database ping failed: {e}")
            components["database"] = "unhealthy"
            overall_healthy = False

        if not settings.order_sweeper_enabled:
            components["order_sweeper"] = "disabled"
        elif container.order_sweeper.running:
            components["order_sweeper"] = "running"
        else:
            components["order_sweeper"] = "stopped"

        return HealthResponse(
            status="healthy" if overall_healthy else "degraded",
            version=__version__,
            components=components,
        )

    return app


# =============================================================================
# Application Instance
# =============================================================================

app = create_app()


# =============================================================================
# CLI Entry Point
# =============================================================================

def main():
    """Run the application using uvicorn."""
    import uvicorn

    settings = get_settings()

    uvicorn.run(
        "bookstore.api.main:app",
        host=settings.web_host,
        port=settings.web_port,
        reload=settings.debug,
        log_level="debug" if settings.debug else "info",
    )


if __name__ == "__main__":
    main()
