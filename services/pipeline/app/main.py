"""
Main FastAPI application for the pipeline service.

Exposes health, stats, metrics and on-demand day processing, and optionally
runs the coordinator's background loop alongside.
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Response

from services.pipeline.app.api.health import router as health_router
from services.pipeline.app.api.v1.pipeline import router as pipeline_router
from shared.config import get_settings, setup_logging
from shared.config.logging import get_logger
from shared.observability.metrics import get_metrics
from workers.pipeline.config import get_pipeline_settings
from workers.pipeline.coordinator import PipelineCoordinator
from workers.pipeline.worker import build_coordinator, build_stores

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Manage application lifespan.

    Builds the coordinator unless one was injected, starts the background
    loop when configured, and releases everything on shutdown.
    """
    # Startup
    settings = get_settings()
    app.state.settings = settings

    connection = None
    coordinator: PipelineCoordinator | None = getattr(app.state, "coordinator", None)
    owns_coordinator = coordinator is None
    if owns_coordinator:
        pipeline_settings = get_pipeline_settings()
        source, store, connection = await build_stores(pipeline_settings)
        coordinator = build_coordinator(pipeline_settings, source, store)
        app.state.coordinator = coordinator

    if settings.start_background_loop:
        coordinator.start()
    logger.info(
        "pipeline_service_started",
        service=settings.service_name,
        background_loop=settings.start_background_loop,
    )

    yield

    # Shutdown
    await coordinator.stop()
    if owns_coordinator:
        await coordinator.client.close()
        app.state.coordinator = None
    if connection is not None:
        await connection.close()
    logger.info("pipeline_service_stopped", service=settings.service_name)


def create_app(coordinator: PipelineCoordinator | None = None) -> FastAPI:
    """
    Create and configure FastAPI application.

    Args:
        coordinator: Pre-built coordinator (built at startup if not provided)

    Returns:
        Configured FastAPI application instance
    """
    settings = get_settings()

    app = FastAPI(
        title="Ambient Pipeline Service",
        description="Extracts calendar events and tasks from daily message threads",
        version=settings.service_version,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        lifespan=lifespan,
    )
    app.state.coordinator = coordinator

    # Register routers
    app.include_router(health_router, tags=["health"])
    app.include_router(pipeline_router, tags=["pipeline"])

    # Metrics endpoint
    @app.get("/metrics")
    async def metrics() -> Response:
        """Prometheus metrics endpoint."""
        return Response(content=get_metrics(), media_type="text/plain")

    return app


# Create application instance
app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    setup_logging(
        log_level=settings.log_level,
        json_logs=settings.json_logs,
        service_name=settings.service_name,
    )
    uvicorn.run(
        "services.pipeline.app.main:app",
        host=settings.service_host,
        port=settings.service_port,
        reload=settings.debug,
        log_level=settings.log_level.lower(),
    )
