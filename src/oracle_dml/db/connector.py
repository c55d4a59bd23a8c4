"""Opening database handles.

``get_dbh`` turns a connection descriptor and a database type into an open
DB-API 2.0 connection. The database type selects one of three connectors:

- Oracle (default): ``usr/pwd@db`` opened with python-oracledb.
- CSV: a directory of flat files opened with DuckDB, one view per file.
- ODBC (anything else): ``usr/pwd@DSN[:approle/rolepwd]`` opened with pyodbc,
  activating the application role when one is given.

The caller owns the returned handle and is responsible for closing it.
"""

import logging
import re
from abc import ABC, abstractmethod
from contextlib import closing
from enum import StrEnum
from pathlib import Path
from typing import Any, ClassVar

import duckdb
import oracledb
from pydantic import BaseModel, Field

from oracle_dml.models.errors import DatabaseConnectionError
from oracle_dml.observability.metrics import metrics

logger = logging.getLogger(__name__)

_CREDENTIALS = re.compile(r"(\w+)/(\w+)@(\w+)")
_APPROLE = re.compile(r":(\w+)/(\w+)")


class DatabaseKind(StrEnum):
    """Supported kinds of data source."""

    ORACLE = "ORACLE"
    CSV = "CSV"
    ODBC = "ODBC"

    @classmethod
    def from_db_type(cls, db_type: str | None) -> "DatabaseKind":
        """Resolve a free-form database type such as ``Oracle`` or ``SQL``.

        Empty means Oracle; names containing ``oracle`` or ``csv``
        (case-insensitive) select those kinds; everything else is ODBC.
        """
        if not db_type or re.search("oracle", db_type, re.IGNORECASE):
            return cls.ORACLE
        if re.search("csv", db_type, re.IGNORECASE):
            return cls.CSV
        return cls.ODBC


class ConnectionDescriptor(BaseModel):
    """Parsed ``usr/pwd@db[:approle/rolepwd]`` connection descriptor."""

    raw: str = Field(..., repr=False, description="Descriptor as given")
    user: str | None = Field(None, description="Database user")
    password: str | None = Field(None, repr=False, description="Database password")
    target: str | None = Field(None, description="Database alias, SID or ODBC DSN")
    approle_user: str | None = Field(None, description="Application role name")
    approle_password: str | None = Field(None, repr=False, description="Application role password")

    @classmethod
    def parse(cls, descriptor: str) -> "ConnectionDescriptor":
        """Parse a descriptor.

        A descriptor that does not match leaves the fields empty; the driver
        then reports the failure when the connection is attempted.
        """
        fields: dict[str, Any] = {"raw": descriptor}
        match = _CREDENTIALS.search(descriptor)
        if match:
            fields.update(user=match[1], password=match[2], target=match[3])
        else:
            logger.warning("Connection descriptor is not in usr/pwd@db form")
        approle = _APPROLE.search(descriptor)
        if approle:
            fields.update(approle_user=approle[1], approle_password=approle[2])
        return cls(**fields)

    @property
    def has_approle(self) -> bool:
        return bool(self.approle_user)


class Connector(ABC):
    """Opens a handle for one kind of data source."""

    kind: ClassVar[DatabaseKind]

    @abstractmethod
    def open(self, descriptor: str) -> Any:
        """Open and return a DB-API connection.

        Raises:
            DatabaseConnectionError: If the driver cannot open the connection.
        """

    def _fail(self, message: str, error: Exception, **details: Any) -> DatabaseConnectionError:
        return DatabaseConnectionError(
            message=f"Connection error : {message}: {error}",
            details={"kind": str(self.kind), "error_message": str(error), **details},
        )


class OracleConnector(Connector):
    """Oracle connections through python-oracledb."""

    kind = DatabaseKind.ORACLE

    def open(self, descriptor: str) -> Any:
        parsed = ConnectionDescriptor.parse(descriptor)
        logger.info("Connecting to Oracle %s as %s", parsed.target, parsed.user)
        try:
            return oracledb.connect(
                user=parsed.user, password=parsed.password, dsn=parsed.target
            )
        except oracledb.Error as e:
            raise self._fail(f"could not connect to {parsed.target}", e, target=parsed.target) from e


class FlatFileConnector(Connector):
    """A directory of CSV files served as tables by an in-memory DuckDB."""

    kind = DatabaseKind.CSV

    def __init__(self, pattern: str = "*.csv") -> None:
        self.pattern = pattern

    def open(self, descriptor: str) -> Any:
        directory = Path(descriptor)
        if not directory.is_dir():
            logger.warning("CSV directory - %s does not exist.", descriptor)
        try:
            connection = duckdb.connect()
        except duckdb.Error as e:
            raise self._fail(f"could not open CSV directory {descriptor}", e, path=descriptor) from e

        try:
            for path in self._table_files(directory):
                quoted = str(path).replace("'", "''")
                connection.execute(
                    f'CREATE VIEW "{path.stem}" AS SELECT * FROM read_csv_auto(\'{quoted}\')'
                )
                logger.debug("Registered flat-file table %s from %s", path.stem, path)
        except duckdb.Error as e:
            connection.close()
            raise self._fail(f"could not open CSV directory {descriptor}", e, path=descriptor) from e
        return connection

    def _table_files(self, directory: Path) -> list[Path]:
        if not directory.is_dir():
            return []
        return sorted(p for p in directory.glob(self.pattern) if p.is_file())


def _import_pyodbc() -> Any:
    # pyodbc needs the system ODBC manager at import time; load it on first use.
    import pyodbc

    return pyodbc


class OdbcConnector(Connector):
    """ODBC data sources through pyodbc, with optional application role."""

    kind = DatabaseKind.ODBC

    @staticmethod
    def build_dsn(parsed: ConnectionDescriptor) -> str:
        return f"DSN={parsed.target};uid={parsed.user};pwd={parsed.password};"

    def open(self, descriptor: str) -> Any:
        pyodbc = _import_pyodbc()
        parsed = ConnectionDescriptor.parse(descriptor)
        dsn = self.build_dsn(parsed)
        logger.info("Connecting to ODBC DSN %s as %s", parsed.target, parsed.user)
        try:
            connection = pyodbc.connect(dsn)
        except pyodbc.Error as e:
            raise self._fail(
                f"could not open connection to DSN ({parsed.target})", e, target=parsed.target
            ) from e

        if parsed.has_approle:
            logger.info("Activating application role %s", parsed.approle_user)
            try:
                with closing(connection.cursor()) as cursor:
                    cursor.execute(
                        "EXEC sp_setapprole ?, ?", parsed.approle_user, parsed.approle_password
                    )
            except pyodbc.Error as e:
                connection.close()
                raise self._fail(
                    f"could not activate application role {parsed.approle_user}",
                    e,
                    target=parsed.target,
                ) from e
        return connection


_CONNECTORS: dict[DatabaseKind, type[Connector]] = {
    DatabaseKind.ORACLE: OracleConnector,
    DatabaseKind.CSV: FlatFileConnector,
    DatabaseKind.ODBC: OdbcConnector,
}


def get_connector(kind: DatabaseKind) -> Connector:
    """Return a connector instance for the given kind."""
    return _CONNECTORS[kind]()


def get_dbh(descriptor: str, db_type: str | None = None, connector: Connector | None = None) -> Any:
    """Open a database handle.

    Args:
        descriptor: ``usr/pwd@db`` for Oracle, a directory for CSV,
            ``usr/pwd@DSN[:approle/rolepwd]`` for ODBC.
        db_type: Database type; Oracle when empty.
        connector: Optional connector to use instead of the one picked by
            ``db_type``.

    Returns:
        An open DB-API connection owned by the caller.

    Raises:
        DatabaseConnectionError: If the connection cannot be opened.

    Example:
        >>> dbh = get_dbh("scott/tiger@orcl")
        >>> dbh = get_dbh("usr/pwd@dsn:approle/rolepwd", "SQL")
    """
    connector = connector or get_connector(DatabaseKind.from_db_type(db_type))
    try:
        handle = connector.open(descriptor)
    except DatabaseConnectionError as e:
        logger.error("%s", e.message)
        metrics.increment_connection(kind=str(connector.kind), status="error")
        raise
    metrics.increment_connection(kind=str(connector.kind), status="success")
    return handle
