"""
Structured logging for the pipeline worker and service.

Every event carries the process context (app, service). While a day runs,
the coordinator binds the day key and the running stage through structlog
contextvars, so agent and model-layer events need no extra arguments.
"""

import logging
import sys
from collections.abc import Iterator
from contextlib import contextmanager

import structlog
from structlog.types import EventDict, Processor, WrappedLogger

APP_NAME = "ambient"

# Libraries whose per-request logging drowns out pipeline events
NOISY_LOGGERS = ("httpx", "httpcore", "anthropic", "openai")


class ProcessContext:
    """Processor stamping the app and service name on every event."""

    def __init__(self, service_name: str | None = None):
        self.service_name = service_name

    def __call__(self, logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
        event_dict.setdefault("app", APP_NAME)
        if self.service_name:
            event_dict.setdefault("service", self.service_name)
        return event_dict


@contextmanager
def pipeline_context(day: str, stage: str | None = None) -> Iterator[None]:
    """
    Bind the day being processed (and optionally a stage) for the current task.

    Keys are restored to their previous values on exit, including a stage
    rebound inside the block with bind_stage().

    Args:
        day: ISO day key
        stage: Initial stage name
    """
    with structlog.contextvars.bound_contextvars(day=day, stage=stage):
        yield


def bind_stage(stage: str) -> None:
    """Mark the pipeline stage now running in the current task."""
    structlog.contextvars.bind_contextvars(stage=stage)


def _renderer_chain(json_logs: bool) -> list[Processor]:
    if json_logs:
        return [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    return [structlog.processors.ExceptionPrettyPrinter(), structlog.dev.ConsoleRenderer(colors=True)]


def setup_logging(
    log_level: str = "INFO",
    json_logs: bool = True,
    service_name: str | None = None,
) -> None:
    """
    Configure structlog and the stdlib root logger.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_logs: Render JSON lines instead of console output
        service_name: Service name stamped on every event
    """
    level = getattr(logging, log_level.upper(), logging.INFO)
    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=level)
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.TimeStamper(fmt="iso"),
            ProcessContext(service_name),
            *_renderer_chain(json_logs),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """
    Get a structured logger.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Bound structlog logger
    """
    return structlog.get_logger(name)
