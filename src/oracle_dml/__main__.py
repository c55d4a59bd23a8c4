"""Command line entry point.

Examples:
    Check that a table exists:
    >>> oracle-dml --conn scott/tiger@orcl exists emp

    Describe a table as a name-keyed map:
    >>> oracle-dml --conn scott/tiger@orcl describe hr.emp --shape hash

    Use the connection from the environment:
    >>> ORACLE_DML_DB_CONN_STRING=scott/tiger@orcl python -m oracle_dml describe emp
"""

import argparse
import json
import sys
from collections.abc import Sequence

from oracle_dml.config.settings import get_settings
from oracle_dml.db.catalog import CatalogInspector
from oracle_dml.db.connector import DatabaseKind, FlatFileConnector, get_connector, get_dbh
from oracle_dml.models.column import OutputShape
from oracle_dml.models.errors import OracleDmlError
from oracle_dml.observability.logging import configure_logging


def build_parser() -> argparse.ArgumentParser:
    settings = get_settings()
    parser = argparse.ArgumentParser(
        prog="oracle-dml", description="Look up Oracle objects and table definitions."
    )
    parser.add_argument(
        "--conn",
        default=settings.database.conn_string.get_secret_value(),
        help="Connection descriptor usr/pwd@db[:approle/rolepwd] or CSV directory",
    )
    parser.add_argument("--db-type", default=settings.database.db_type, help="Oracle, CSV, ODBC")
    parser.add_argument("--log-level", default=settings.observability.log_level)
    parser.add_argument(
        "--log-format", default=settings.observability.log_format, choices=["json", "text"]
    )

    commands = parser.add_subparsers(dest="command", required=True)

    exists = commands.add_parser("exists", help="Check whether an object exists")
    exists.add_argument("name", help="Object name, optionally schema.object")
    exists.add_argument("--type", default="TABLE", dest="object_type", help="Object type")

    describe = commands.add_parser("describe", help="Print a table definition as JSON")
    describe.add_argument("table", help="Table name, optionally schema.table")
    describe.add_argument("--columns", default=None, help="Comma-separated column names")
    describe.add_argument(
        "--shape",
        default=OutputShape.ARRAY.value,
        help="AR|ARRAY, AH1|ARRAY_HASH1, HH|HASH or AH2|ARRAY_HASH2",
    )
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run the command line tool and return its exit code."""
    args = build_parser().parse_args(argv)
    configure_logging(level=args.log_level, log_format=args.log_format)

    kind = DatabaseKind.from_db_type(args.db_type)
    connector = (
        FlatFileConnector(get_settings().database.flat_file_pattern)
        if kind is DatabaseKind.CSV
        else get_connector(kind)
    )

    try:
        dbh = get_dbh(args.conn, args.db_type, connector=connector)
        try:
            inspector = CatalogInspector(dbh)
            if args.command == "exists":
                found = inspector.object_exists(args.name, args.object_type)
                print("true" if found else "false")
                return 0 if found else 1

            result = inspector.get_table_definition(args.table, args.columns, args.shape)
            print(json.dumps(result._asdict(), indent=2, default=str))
            return 0
        finally:
            dbh.close()
    except OracleDmlError as e:
        print(json.dumps(e.to_error_detail().to_dict(), default=str), file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())
