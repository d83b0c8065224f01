"""Structured logging configuration.

Outputs either JSON (for log shipping) or console format (for interactive use).
Configuration is read from arguments, then environment variables, then defaults.

Log lines go to stderr unless another stream is given, so command output written to
stdout (tables, ``--json`` payloads) stays machine readable.

Usage:
    from shared.logging import get_logger, setup_logging

    setup_logging(service_name="fleet-dashboard")
    logger = get_logger(__name__)
    logger.info("deployments_fetched", count=12)
"""

import logging
import os
import sys
from typing import Literal, TextIO

import structlog
from structlog.types import Processor


def build_processors(log_format: str, colors: bool = False) -> list[Processor]:
    """Processor chain shared by both renderers, ending in the renderer for ``log_format``."""
    processors: list[Processor] = [
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        # correlation_id, bulk_operation_id, service
        structlog.contextvars.merge_contextvars,
        structlog.processors.format_exc_info,
    ]

    if log_format == "json":
        processors.append(
            structlog.processors.CallsiteParameterAdder(
                {
                    structlog.processors.CallsiteParameter.MODULE,
                    structlog.processors.CallsiteParameter.FUNC_NAME,
                    structlog.processors.CallsiteParameter.LINENO,
                }
            )
        )
        processors.append(structlog.processors.JSONRenderer(sort_keys=False))
    else:
        processors.append(
            structlog.dev.ConsoleRenderer(
                colors=colors,
                exception_formatter=structlog.dev.plain_traceback,
            )
        )
    return processors


def setup_logging(
    service_name: str | None = None,
    log_format: Literal["json", "console"] | None = None,
    log_level: str | None = None,
    stream: TextIO | None = None,
) -> None:
    """Configure structured logging with structlog.

    Args:
        service_name: Name bound to every log line.
                     Falls back to SERVICE_NAME env var or "fleet-dashboard".
        log_format: "json" for shipping, "console" for terminals.
                   Falls back to LOG_FORMAT env var or "console".
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR).
                  Falls back to LOG_LEVEL env var or "INFO".
        stream: Destination for log lines. Defaults to stderr.
    """
    service_name = service_name or os.getenv("SERVICE_NAME", "fleet-dashboard")
    log_format = log_format or os.getenv("LOG_FORMAT", "console")
    log_level = log_level or os.getenv("LOG_LEVEL", "INFO")

    numeric_level = getattr(logging, log_level.upper(), logging.INFO)
    target = stream or sys.stderr

    logging.basicConfig(
        format="%(message)s",
        stream=target,
        level=numeric_level,
        force=True,
    )

    structlog.configure(
        processors=build_processors(log_format, colors=target.isatty()),
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    structlog.contextvars.bind_contextvars(service=service_name)

    structlog.get_logger().debug(
        "logging_initialized",
        service=service_name,
        log_format=log_format,
        log_level=log_level,
    )


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a structlog logger instance.

    Args:
        name: Optional logger name. If not provided, uses the caller's module name.

    Returns:
        Configured structlog logger instance.
    """
    return structlog.get_logger(name)
