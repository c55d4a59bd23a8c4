"""Observability module: logging setup and Prometheus metrics.

Example:
    >>> from oracle_dml.observability import configure_logging, metrics
    >>> configure_logging(level="DEBUG", log_format="text")
    >>> metrics.increment_catalog_query(operation="object_exists", status="success")
"""

from oracle_dml.observability.logging import (
    JSONFormatter,
    SensitiveDataFilter,
    TextFormatter,
    configure_logging,
    mask_secrets,
)
from oracle_dml.observability.metrics import MetricsCollector, metrics

__all__ = [
    # Metrics
    "MetricsCollector",
    "metrics",
    # Logging
    "configure_logging",
    "mask_secrets",
    "JSONFormatter",
    "TextFormatter",
    "SensitiveDataFilter",
]
