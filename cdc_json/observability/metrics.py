"""
Prometheus Metrics for changelog JSON serialization
"""

from prometheus_client import Counter, start_http_server
import structlog

logger = structlog.get_logger(__name__)

# Counters
records_serialized_total = Counter(
    "cdc_json_records_serialized_total",
    "Total change events serialized by dialect and operation code",
    ["dialect", "op"],
)

serialization_errors_total = Counter(
    "cdc_json_serialization_errors_total",
    "Total rows that failed to serialize by dialect and error type",
    ["dialect", "error_type"],
)


def start_metrics_server(port: int = 9090) -> None:
    """
    Start Prometheus metrics HTTP server

    Args:
        port: HTTP port to expose /metrics endpoint (default 9090)
    """
    start_http_server(port)
    logger.info("Prometheus metrics server started", port=port)


def records_serialized_counter(dialect: str, op: str):
    """Serialized records counter child for one dialect and operation code"""
    return records_serialized_total.labels(dialect=dialect, op=op)


def increment_serialization_errors(dialect: str, error_type: str, count: int = 1) -> None:
    """Increment serialization error counter"""
    serialization_errors_total.labels(dialect=dialect, error_type=error_type).inc(count)
