"""
Extraction pipeline worker.

Background process that wires the model access layer, the stores and the
coordinator together and runs the coordinator's loop until stopped.
"""

import asyncio

from shared.config.logging import get_logger, setup_logging
from shared.database import DatabaseConnection, DatabaseSettings, get_database_settings, init_database
from shared.database.repositories import SQLExtractionStore, SQLRawItemSource
from shared.filtering import SmartFilter, get_filter_settings
from shared.llm import LLMClient
from shared.persistence import (
    ExtractionStore,
    InMemoryExtractionStore,
    InMemoryRawItemSource,
    RawItemSource,
)
from workers.pipeline.config import PipelineSettings, get_pipeline_settings
from workers.pipeline.coordinator import PipelineCoordinator

logger = get_logger(__name__)


async def build_stores(
    settings: PipelineSettings,
    database_settings: DatabaseSettings | None = None,
) -> tuple[RawItemSource, ExtractionStore, DatabaseConnection | None]:
    """
    Build the raw-item source and extraction store for the configured backend.

    Args:
        settings: Pipeline settings
        database_settings: Database settings (cached settings if not provided)

    Returns:
        Tuple of (source, store, database connection or None for memory)
    """
    if settings.persistence_backend == "memory":
        return InMemoryRawItemSource(), InMemoryExtractionStore(), None

    database_settings = database_settings or get_database_settings()
    connection = init_database(settings=database_settings)
    if database_settings.create_tables:
        await connection.create_tables()
    return SQLRawItemSource(connection), SQLExtractionStore(connection), connection


def build_coordinator(
    settings: PipelineSettings,
    source: RawItemSource,
    store: ExtractionStore,
    client: LLMClient | None = None,
) -> PipelineCoordinator:
    """
    Build a coordinator with its pre-filter and model client.

    Args:
        settings: Pipeline settings
        source: Raw-item source
        store: Extraction store
        client: LLM client (built from settings if not provided)

    Returns:
        PipelineCoordinator
    """
    filter_settings = get_filter_settings()
    return PipelineCoordinator(
        client=client or LLMClient(),
        source=source,
        store=store,
        settings=settings,
        smart_filter=SmartFilter(filter_settings) if settings.enable_pre_filter else None,
        extraction_version=filter_settings.extraction_version,
    )


class PipelineWorker:
    """Runs the pipeline coordinator's background loop."""

    def __init__(self, settings: PipelineSettings | None = None):
        """
        Initialize worker.

        Args:
            settings: Pipeline settings (uses defaults if not provided)
        """
        self.settings = settings or get_pipeline_settings()
        self.coordinator: PipelineCoordinator | None = None
        self._connection: DatabaseConnection | None = None

    async def start(self) -> None:
        """Build dependencies and start the coordinator loop."""
        logger.info("worker_starting", worker=self.settings.worker_name)

        source, store, self._connection = await build_stores(self.settings)
        self.coordinator = build_coordinator(self.settings, source, store)
        self.coordinator.start()

        logger.info("worker_started", worker=self.settings.worker_name)

    async def stop(self) -> None:
        """Stop the coordinator and release resources."""
        logger.info("worker_stopping", worker=self.settings.worker_name)

        if self.coordinator is not None:
            await self.coordinator.stop()
            await self.coordinator.client.close()
            self.coordinator = None
        if self._connection is not None:
            await self._connection.close()
            self._connection = None

        logger.info("worker_stopped", worker=self.settings.worker_name)

    @property
    def is_running(self) -> bool:
        """Check if the coordinator loop is running."""
        return self.coordinator is not None and self.coordinator.is_running


async def main() -> None:
    """Main entry point for the worker."""
    settings = get_pipeline_settings()
    setup_logging(
        log_level=settings.log_level,
        json_logs=settings.json_logs,
        service_name=settings.worker_name,
    )

    worker = PipelineWorker(settings)

    try:
        await worker.start()

        # Keep worker running
        while worker.is_running:
            await asyncio.sleep(1)

    except KeyboardInterrupt:
        logger.info("shutdown_signal_received")
    finally:
        await worker.stop()


if __name__ == "__main__":
    asyncio.run(main())
