"""Data models module."""

from oracle_dml.models.column import (
    DATE_FORMAT,
    DATE_WIDTH,
    ColumnDefinition,
    OutputShape,
    TableDefinition,
    build_column_definitions,
    join_column_names,
    to_indexed_records,
    to_long_field_records,
    to_name_keyed_map,
    to_rows,
)
from oracle_dml.models.errors import (
    DatabaseConnectionError,
    ErrorCode,
    ErrorDetail,
    OperationError,
    OracleDmlError,
    StatementError,
    UsageError,
)

__all__ = [
    # Column models
    "ColumnDefinition",
    "OutputShape",
    "TableDefinition",
    "DATE_FORMAT",
    "DATE_WIDTH",
    "build_column_definitions",
    "join_column_names",
    "to_rows",
    "to_indexed_records",
    "to_name_keyed_map",
    "to_long_field_records",
    # Error models
    "ErrorCode",
    "ErrorDetail",
    "OracleDmlError",
    "UsageError",
    "OperationError",
    "DatabaseConnectionError",
    "StatementError",
]
