"""Oracle DML common routines.

Helpers shared by Oracle DML tooling: open a database handle, check whether
a schema object exists, and read a table's column definitions in several
layouts.

Example:
    >>> from oracle_dml import get_dbh, get_table_definition, is_object_exist
    >>> dbh = get_dbh("scott/tiger@orcl")
    >>> is_object_exist(dbh, "emp")
    True
    >>> names, defs, comments = get_table_definition(dbh, "emp", shape="AH1")
"""

__version__ = "0.2.0"

from oracle_dml.config.settings import Settings, get_settings
from oracle_dml.db.catalog import CatalogInspector, get_table_definition, is_object_exist
from oracle_dml.db.connector import DatabaseKind, get_dbh
from oracle_dml.models.column import ColumnDefinition, OutputShape, TableDefinition
from oracle_dml.models.errors import (
    DatabaseConnectionError,
    ErrorCode,
    OperationError,
    OracleDmlError,
    StatementError,
    UsageError,
)

__all__ = [
    "__version__",
    # Config
    "Settings",
    "get_settings",
    # Operations
    "get_dbh",
    "is_object_exist",
    "get_table_definition",
    "CatalogInspector",
    "DatabaseKind",
    # Models
    "ColumnDefinition",
    "OutputShape",
    "TableDefinition",
    # Errors
    "OracleDmlError",
    "UsageError",
    "OperationError",
    "DatabaseConnectionError",
    "StatementError",
    "ErrorCode",
]
