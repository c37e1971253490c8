"""
Structured Logging Configuration with structlog
"""

import logging
import sys

import structlog


def configure_logging(log_level: str = "INFO", log_format: str = "json") -> None:
    """
    Configure structlog for JSON structured logging

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_format: Output format ("json" or "console")
    """
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, log_level.upper()),
    )

    shared_processors = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    if log_format == "json":
        processors = shared_processors + [structlog.processors.JSONRenderer()]
    else:
        processors = shared_processors + [structlog.dev.ConsoleRenderer(colors=True)]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """
    Get a structured logger instance

    Args:
        name: Logger name (typically __name__)
    """
    return structlog.get_logger(name)


def log_serialization_failure(
    logger: structlog.stdlib.BoundLogger,
    dialect: str,
    table_name: str,
    row_description: str,
    error_type: str,
    error: str,
) -> None:
    """
    Log a per-record serialization failure

    Args:
        logger: Structlog logger
        dialect: Envelope dialect (debezium-json, canal-json)
        table_name: Target table written into the envelope
        row_description: Descriptive text of the offending row
        error_type: Class name of the underlying error
        error: Underlying error message

    Row and error text are escaped so that unencodable characters in the
    offending row cannot fail the log write itself.
    """
    logger.warning(
        "serialization_failed",
        dialect=dialect,
        table_name=table_name,
        row=_escape_unencodable(row_description),
        error_type=error_type,
        error=_escape_unencodable(error),
    )


def _escape_unencodable(text: str) -> str:
    """Replace characters UTF-8 cannot encode (lone surrogates) with escapes"""
    return text.encode("utf-8", "backslashreplace").decode("utf-8")
