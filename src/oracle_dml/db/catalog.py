"""Oracle catalog lookups: object existence and table column definitions.

Both lookups build a query against the data dictionary views, run it on a
caller-supplied DB-API handle, and reshape the rows in memory. Names may be
given as ``schema.object``; the schema-qualified form switches to the
``all_*``/``dba_*`` views with an owner filter.
"""

import logging
import re
import time
from collections.abc import Sequence
from typing import Any

from oracle_dml.models.column import (
    OutputShape,
    TableDefinition,
    build_column_definitions,
    join_column_names,
    to_indexed_records,
    to_long_field_records,
    to_name_keyed_map,
    to_rows,
)
from oracle_dml.models.errors import OperationError, StatementError, UsageError
from oracle_dml.observability.metrics import metrics

_logger = logging.getLogger(__name__)

_OBJECT_NAME = re.compile(r"(\w+)\.([\w$]+)")
_TABLE_NAME = re.compile(r"([-\w]+)\.([-\w]+)")


def _literal(value: str) -> str:
    """Quote a value as a SQL string literal."""
    return "'" + value.replace("'", "''") + "'"


def _split_qualified(name: str, pattern: re.Pattern[str]) -> tuple[str, str] | None:
    """Split ``schema.object``; a dot at position 0 does not qualify."""
    if name.find(".") > 0:
        match = pattern.search(name)
        if match:
            return match[1], match[2]
    return None


def _column_filter(columns: str | None) -> str | None:
    """Turn ``a, b`` into ``'A','B'`` for an IN list."""
    if not columns:
        return None
    names = [c.strip().upper() for c in columns.split(",") if c.strip()]
    return ",".join(_literal(n) for n in names) or None


class CatalogInspector:
    """Reads object and column metadata through an open database handle.

    Attributes:
        dbh: DB-API connection owned by the caller.
        logger: Destination for diagnostic messages and SQL text.
    """

    def __init__(self, dbh: Any, logger: logging.Logger | None = None) -> None:
        if dbh is None:
            raise UsageError("could not find database handler.")
        self.dbh = dbh
        self.logger = logger or _logger

    def _fetch_all(self, sql: str, operation: str) -> list[Sequence[Any]]:
        """Execute a catalog query and fetch every row.

        Raises:
            StatementError: If the statement fails to execute or fetch.
        """
        start = time.perf_counter()
        cursor = None
        try:
            cursor = self.dbh.cursor()
            cursor.execute(sql)
            rows = list(cursor.fetchall())
        except Exception as e:
            metrics.increment_catalog_query(operation=operation, status="error")
            raise StatementError(
                message=f"Stmt error: {e!s}",
                details={
                    "operation": operation,
                    "error_type": type(e).__name__,
                    "error_message": str(e),
                    "sql": sql[:200],
                },
            ) from e
        finally:
            if cursor is not None:
                cursor.close()
            metrics.observe_catalog_query_duration(time.perf_counter() - start)

        metrics.increment_catalog_query(operation=operation, status="success")
        return rows

    def object_exists(self, name: str, object_type: str | None = "TABLE") -> bool:
        """Check whether a schema object exists.

        Args:
            name: Object name, optionally ``schema.object``.
            object_type: Catalog object type; ``TABLE`` when empty.

        Returns:
            bool: True if the catalog lists the object.

        Raises:
            UsageError: If no object name is given.
            StatementError: If the catalog query fails.

        Example:
            >>> CatalogInspector(dbh).object_exists("hr.emp")
            True
        """
        if not name:
            raise UsageError("no table or object name is specified.")
        object_type = (object_type or "TABLE").upper()

        qualified = _split_qualified(name, _OBJECT_NAME)
        if qualified:
            schema, obj = qualified
            sql = (
                "SELECT object_name FROM all_objects"
                f" WHERE object_type = {_literal(object_type)}"
                f"   AND object_name = {_literal(obj.upper())}"
                f"   AND owner = {_literal(schema.upper())}"
            )
        else:
            sql = (
                "SELECT object_name FROM user_objects"
                f" WHERE object_type = {_literal(object_type)}"
                f"   AND object_name = {_literal(name.upper())}"
            )
        self.logger.debug("%s", sql)

        return len(self._fetch_all(sql, operation="object_exists")) > 0

    def _columns_query(self, table: str, in_list: str | None) -> str:
        qualified = _split_qualified(table, _TABLE_NAME)
        if qualified:
            schema, tab = qualified
            sql = (
                "SELECT column_name, data_type, data_length, data_scale, data_precision,\n"
                "       nullable, column_id, character_set_name\n"
                "  FROM dba_tab_columns\n"
                f" WHERE owner = {_literal(schema)} AND table_name = {_literal(tab)}\n"
            )
            if in_list:
                sql += f"   AND column_name IN ({in_list})\n"
            return sql + " ORDER BY table_name, column_id"

        sql = (
            "SELECT cname, coltype, width, scale, precision, nulls, colno, character_set_name\n"
            "  FROM col\n"
            f" WHERE tname = {_literal(table)}\n"
        )
        if in_list:
            sql += f"   AND cname IN ({in_list})\n"
        return sql + " ORDER BY tname, colno"

    def _comments_query(self, table: str) -> str:
        qualified = _split_qualified(table, _TABLE_NAME)
        if qualified:
            schema, tab = qualified
            return (
                "SELECT column_name, comments\n"
                "  FROM all_col_comments\n"
                f" WHERE owner = {_literal(schema)} AND table_name = {_literal(tab)}"
            )
        return (
            "SELECT column_name, comments\n"
            "  FROM user_col_comments\n"
            f" WHERE table_name = {_literal(table)}"
        )

    def get_column_comments(self, table: str) -> dict[str, str | None]:
        """Map lower-cased column names of an upper-cased table to their comments."""
        sql = self._comments_query(table)
        self.logger.debug("%s", sql)
        rows = self._fetch_all(sql, operation="column_comments")
        return {str(row[0]).lower(): row[1] for row in rows}

    def get_table_definition(
        self,
        table: str,
        columns: str | None = None,
        shape: str | OutputShape | None = OutputShape.ARRAY,
    ) -> TableDefinition:
        """Read column definitions of a table.

        Args:
            table: Table name, optionally ``schema.table``.
            columns: Comma-separated column names to restrict to; all when empty.
            shape: ``AR|ARRAY``, ``AH1|ARRAY_HASH1``, ``HH|HASH`` or
                ``AH2|ARRAY_HASH2``. Anything else gives ``ARRAY_HASH2``.

        Returns:
            TableDefinition: ``(column_names, definitions, comments)`` where
            ``column_names`` lists the columns in fetch order separated by
            commas and ``definitions`` is laid out according to ``shape``.

        Raises:
            UsageError: If no table name is given.
            StatementError: If a catalog query fails.
            OperationError: If the catalog rows cannot be reshaped, such as a
                row with no column number.

        Example:
            >>> names, defs, comments = CatalogInspector(dbh).get_table_definition(
            ...     "emp", shape="hash"
            ... )
            >>> defs["hiredate"]["dft"]
            'YYYYMMDD.HH24MISS'
        """
        if not table:
            raise UsageError("no table or object name is specified.")
        table = table.upper()
        output = OutputShape.resolve(shape)
        self.logger.info("  - reading table %s definition...", table)

        sql = self._columns_query(table, _column_filter(columns))
        self.logger.debug("%s", sql)
        rows = self._fetch_all(sql, operation="table_columns")

        column_names = join_column_names(rows)
        self.logger.debug("    %s", column_names.replace(",", ", "))

        comments = self.get_column_comments(table)

        try:
            definitions = self._reshape(rows, comments, output)
        except (TypeError, ValueError) as e:
            # pydantic.ValidationError is a ValueError
            raise OperationError(
                message=f"Unexpected catalog row for {table}: {e}",
                details={
                    "operation": "reshape",
                    "table": table,
                    "shape": str(output),
                    "error_type": type(e).__name__,
                    "error_message": str(e),
                },
            ) from e

        return TableDefinition(column_names, definitions, comments)

    @staticmethod
    def _reshape(
        rows: list[Sequence[Any]], comments: dict[str, str | None], output: OutputShape
    ) -> Any:
        if output is OutputShape.ARRAY:
            return to_rows(rows)
        if output is OutputShape.ARRAY_HASH1:
            return to_indexed_records(build_column_definitions(rows, comments))
        if output is OutputShape.HASH:
            return to_name_keyed_map(build_column_definitions(rows, comments))
        return to_long_field_records(rows)


def is_object_exist(
    dbh: Any,
    name: str,
    object_type: str | None = "TABLE",
    logger: logging.Logger | None = None,
) -> bool:
    """Check whether an object exists; see ``CatalogInspector.object_exists``."""
    return CatalogInspector(dbh, logger=logger).object_exists(name, object_type)


def get_table_definition(
    dbh: Any,
    table: str,
    columns: str | None = None,
    shape: str | OutputShape | None = OutputShape.ARRAY,
    logger: logging.Logger | None = None,
) -> TableDefinition:
    """Read a table definition; see ``CatalogInspector.get_table_definition``."""
    return CatalogInspector(dbh, logger=logger).get_table_definition(table, columns, shape)
