"""Prometheus metrics for connections and catalog queries."""

from prometheus_client import Counter, Histogram


class MetricsCollector:
    """Singleton holder of the library's Prometheus metrics.

    Example:
        >>> metrics = MetricsCollector()
        >>> metrics.increment_connection(kind="ORACLE", status="success")
    """

    _instance: "MetricsCollector | None" = None

    def __new__(cls) -> "MetricsCollector":
        """Ensure singleton instance."""
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._initialize_metrics()
        return cls._instance

    def _initialize_metrics(self) -> None:
        self.connections: Counter = Counter(
            "oracle_dml_connections_total",
            "Total number of database handles requested",
            labelnames=["kind", "status"],
        )

        self.catalog_queries: Counter = Counter(
            "oracle_dml_catalog_queries_total",
            "Total number of catalog queries executed",
            labelnames=["operation", "status"],
        )

        self.catalog_query_duration: Histogram = Histogram(
            "oracle_dml_catalog_query_duration_seconds",
            "Catalog query execution duration in seconds",
            buckets=(0.01, 0.05, 0.1, 0.5, 1.0, 2.0, 5.0, 10.0),
        )

    def increment_connection(self, kind: str, status: str) -> None:
        """Increment connection counter.

        Args:
            kind: Database kind (ORACLE, CSV, ODBC).
            status: "success" or "error".
        """
        self.connections.labels(kind=kind, status=status).inc()

    def increment_catalog_query(self, operation: str, status: str) -> None:
        """Increment catalog query counter.

        Args:
            operation: Query purpose (object_exists, table_columns, column_comments).
            status: "success" or "error".
        """
        self.catalog_queries.labels(operation=operation, status=status).inc()

    def observe_catalog_query_duration(self, duration: float) -> None:
        self.catalog_query_duration.observe(duration)


# Singleton instance
metrics = MetricsCollector()
