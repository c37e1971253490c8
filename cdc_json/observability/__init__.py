"""
Logging and metrics for changelog JSON serialization
"""

from cdc_json.config.settings import ObservabilitySettings
from cdc_json.observability import metrics
from cdc_json.observability.logging import configure_logging, get_logger


def configure_observability(settings: ObservabilitySettings) -> None:
    """
    Apply logging and metrics settings for the current process

    Args:
        settings: Observability section of the loaded configuration
    """
    configure_logging(log_level=settings.log_level, log_format=settings.log_format)
    if settings.enable_metrics_server:
        metrics.start_metrics_server(settings.metrics_port)
    get_logger(__name__).info(
        "Observability configured",
        log_level=settings.log_level,
        metrics_server=settings.enable_metrics_server,
    )


__all__ = ["configure_observability", "configure_logging", "get_logger"]
