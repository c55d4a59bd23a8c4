"""Database connection and catalog lookup utilities.

This package opens database handles for Oracle, CSV directories and ODBC
data sources, and reads object and column metadata from the catalog.
"""

from oracle_dml.db.catalog import CatalogInspector, get_table_definition, is_object_exist
from oracle_dml.db.connector import (
    ConnectionDescriptor,
    Connector,
    DatabaseKind,
    FlatFileConnector,
    OdbcConnector,
    OracleConnector,
    get_connector,
    get_dbh,
)

__all__ = [
    "CatalogInspector",
    "get_table_definition",
    "is_object_exist",
    "ConnectionDescriptor",
    "Connector",
    "DatabaseKind",
    "OracleConnector",
    "FlatFileConnector",
    "OdbcConnector",
    "get_connector",
    "get_dbh",
]
