"""Unit tests for catalog lookups.

Covers query construction for plain and schema-qualified names, the
existence check, the table definition reader for every output shape, and
error handling.
"""

import logging
from typing import Any

import pytest

from oracle_dml.db.catalog import CatalogInspector, get_table_definition, is_object_exist
from oracle_dml.models.column import OutputShape
from oracle_dml.models.errors import OperationError, StatementError, UsageError
from tests.conftest import FakeConnection


class TestInputChecks:
    """Required arguments fail before any query runs."""

    def test_missing_handle(self) -> None:
        with pytest.raises(UsageError, match="database handler"):
            CatalogInspector(None)

    def test_missing_handle_in_functions(self) -> None:
        with pytest.raises(UsageError):
            is_object_exist(None, "emp")
        with pytest.raises(UsageError):
            get_table_definition(None, "emp")

    @pytest.mark.parametrize("name", ["", None])
    def test_missing_object_name(self, name: str | None) -> None:
        dbh = FakeConnection()
        with pytest.raises(UsageError, match="no table or object name"):
            is_object_exist(dbh, name)  # type: ignore[arg-type]
        assert dbh.executed == []

    def test_missing_table_name(self) -> None:
        dbh = FakeConnection()
        with pytest.raises(UsageError):
            get_table_definition(dbh, "")
        assert dbh.executed == []


class TestObjectExists:
    """Tests for the existence check."""

    def test_existing_table(self) -> None:
        dbh = FakeConnection(results=[[("EMP",)]])
        assert is_object_exist(dbh, "emp") is True

        sql = dbh.executed[0]
        assert "FROM user_objects" in sql
        assert "object_type = 'TABLE'" in sql
        assert "object_name = 'EMP'" in sql
        assert "owner" not in sql

    def test_missing_object_is_false(self) -> None:
        dbh = FakeConnection(results=[[]])
        assert is_object_exist(dbh, "no_such_table") is False

    def test_schema_qualified_name(self) -> None:
        dbh = FakeConnection(results=[[("EMP",)]])
        assert is_object_exist(dbh, "hr.emp") is True

        sql = dbh.executed[0]
        assert "FROM all_objects" in sql
        assert "object_name = 'EMP'" in sql
        assert "owner = 'HR'" in sql

    def test_object_type_is_upper_cased(self) -> None:
        dbh = FakeConnection(results=[[]])
        is_object_exist(dbh, "emp_trg", "trigger")
        assert "object_type = 'TRIGGER'" in dbh.executed[0]

    @pytest.mark.parametrize("object_type", ["", None])
    def test_empty_object_type_means_table(self, object_type: str | None) -> None:
        dbh = FakeConnection(results=[[]])
        is_object_exist(dbh, "emp", object_type)
        assert "object_type = 'TABLE'" in dbh.executed[0]

    def test_leading_dot_is_not_a_schema(self) -> None:
        dbh = FakeConnection(results=[[]])
        is_object_exist(dbh, ".emp")

        sql = dbh.executed[0]
        assert "FROM user_objects" in sql
        assert "object_name = '.EMP'" in sql

    def test_dollar_sign_in_object_name(self) -> None:
        dbh = FakeConnection(results=[[("V$SESSION",)]])
        assert is_object_exist(dbh, "sys.v$session", "view") is True
        assert "object_name = 'V$SESSION'" in dbh.executed[0]

    def test_quotes_are_escaped(self) -> None:
        dbh = FakeConnection(results=[[]])
        is_object_exist(dbh, "o'brien")
        assert "object_name = 'O''BRIEN'" in dbh.executed[0]

    def test_cursor_is_closed(self) -> None:
        dbh = FakeConnection(results=[[]])
        is_object_exist(dbh, "emp")
        assert all(cursor.closed for cursor in dbh.cursors)

    def test_driver_error_is_wrapped(self) -> None:
        dbh = FakeConnection(error=RuntimeError("ORA-00942: table or view does not exist"))

        with pytest.raises(StatementError, match="ORA-00942") as exc_info:
            is_object_exist(dbh, "emp")

        assert isinstance(exc_info.value.__cause__, RuntimeError)
        assert "user_objects" in exc_info.value.details["sql"]
        assert exc_info.value.details["operation"] == "object_exists"

    def test_sql_sent_to_logger(self, caplog: pytest.LogCaptureFixture) -> None:
        dbh = FakeConnection(results=[[]])
        with caplog.at_level(logging.DEBUG, logger="oracle_dml.db.catalog"):
            is_object_exist(dbh, "emp")
        assert any("user_objects" in message for message in caplog.messages)

    def test_custom_logger(self, caplog: pytest.LogCaptureFixture) -> None:
        dbh = FakeConnection(results=[[]])
        sink = logging.getLogger("tests.sink")
        with caplog.at_level(logging.DEBUG, logger="tests.sink"):
            is_object_exist(dbh, "emp", logger=sink)
        assert any(record.name == "tests.sink" for record in caplog.records)


class TestTableDefinition:
    """Tests for reading table definitions."""

    @pytest.fixture
    def dbh(
        self, emp_rows: list[tuple[Any, ...]], emp_comments: list[tuple[str, str | None]]
    ) -> FakeConnection:
        return FakeConnection(results=[emp_rows, emp_comments])

    def test_default_shape_is_raw_rows(
        self, dbh: FakeConnection, emp_rows: list[tuple[Any, ...]]
    ) -> None:
        names, definitions, comments = get_table_definition(dbh, "emp")

        assert names == "EMPNO,ENAME,HIREDATE,SAL"
        assert definitions == emp_rows
        assert comments == {
            "empno": "Employee number",
            "hiredate": "Date hired",
            "sal": None,
        }

    def test_current_schema_queries(self, dbh: FakeConnection) -> None:
        get_table_definition(dbh, "emp")

        columns_sql, comments_sql = dbh.executed
        assert "FROM col" in columns_sql
        assert "tname = 'EMP'" in columns_sql
        assert columns_sql.rstrip().endswith("ORDER BY tname, colno")
        assert "cname IN" not in columns_sql
        assert "FROM user_col_comments" in comments_sql
        assert "table_name = 'EMP'" in comments_sql

    def test_schema_qualified_queries(self, dbh: FakeConnection) -> None:
        get_table_definition(dbh, "hr.emp")

        columns_sql, comments_sql = dbh.executed
        assert "FROM dba_tab_columns" in columns_sql
        assert "owner = 'HR' AND table_name = 'EMP'" in columns_sql
        assert columns_sql.rstrip().endswith("ORDER BY table_name, column_id")
        assert "FROM all_col_comments" in comments_sql
        assert "owner = 'HR' AND table_name = 'EMP'" in comments_sql

    def test_column_filter(self, dbh: FakeConnection) -> None:
        get_table_definition(dbh, "emp", "empno, hiredate,sal")
        assert "AND cname IN ('EMPNO','HIREDATE','SAL')" in dbh.executed[0]

    def test_column_filter_on_qualified_table(self, dbh: FakeConnection) -> None:
        get_table_definition(dbh, "hr.emp", "empno")
        assert "AND column_name IN ('EMPNO')" in dbh.executed[0]

    def test_indexed_records(self, dbh: FakeConnection) -> None:
        names, records, _ = get_table_definition(dbh, "emp", shape="AH1")

        assert names == "EMPNO,ENAME,HIREDATE,SAL"
        assert records[0] == {
            "seq": 0,
            "col": "EMPNO",
            "typ": "NUMBER",
            "wid": 4,
            "max": 4,
            "min": 0,
            "dec": 0,
            "req": "NOT NULL",
            "dft": "",
            "dsp": "Employee number",
        }
        assert records[1]["wid"] == 10
        assert records[1]["dec"] == ""
        assert records[2]["wid"] == 17
        assert records[2]["max"] == 17
        assert records[2]["dft"] == "YYYYMMDD.HH24MISS"
        assert records[2]["dsp"] == "Date hired"
        assert records[3]["wid"] == 7
        assert records[3]["dec"] == 2
        assert records[3]["dsp"] == ""

    def test_name_keyed_map(self, emp_rows: list[tuple[Any, ...]]) -> None:
        indexed_dbh = FakeConnection(results=[emp_rows, []])
        keyed_dbh = FakeConnection(results=[emp_rows, []])

        _, indexed, _ = get_table_definition(indexed_dbh, "emp", shape=OutputShape.ARRAY_HASH1)
        _, keyed, _ = get_table_definition(keyed_dbh, "emp", shape="hash")

        assert list(keyed) == ["empno", "ename", "hiredate", "sal"]
        for record in indexed:
            assert keyed[record["col"].lower()] == record

    def test_long_field_records(self, dbh: FakeConnection) -> None:
        _, records, _ = get_table_definition(dbh, "emp", shape="ah2")

        assert [r["cname"] for r in records] == ["empno", "ename", "hiredate", "sal"]
        assert records[2]["width"] == 7
        assert records[2]["colno"] == 3

    def test_unknown_shape_falls_back(self, dbh: FakeConnection) -> None:
        _, records, _ = get_table_definition(dbh, "emp", shape="XML")
        assert records[0]["cname"] == "empno"

    def test_name_list_keeps_fetch_order(self) -> None:
        rows = [
            ("HIREDATE", "DATE", 7, None, None, None, 2, None),
            ("EMPNO", "NUMBER", 22, 0, 4, "N", 1, None),
        ]
        dbh = FakeConnection(results=[rows, [("HIREDATE", "Date hired")]])

        names, records, comments = get_table_definition(dbh, "emp", shape="AH1")

        assert names == "HIREDATE,EMPNO"
        assert records[0]["col"] == "EMPNO"
        assert records[0]["wid"] == 4
        assert records[0]["req"] == "NOT NULL"
        assert records[1]["col"] == "HIREDATE"
        assert records[1]["wid"] == 17
        assert records[1]["dft"] == "YYYYMMDD.HH24MISS"
        assert records[1]["dsp"] == "Date hired"
        assert comments == {"hiredate": "Date hired"}

    def test_empty_table(self) -> None:
        dbh = FakeConnection(results=[[], []])
        names, records, comments = get_table_definition(dbh, "nothing", shape="AH1")

        assert names == ""
        assert records == []
        assert comments == {}

    def test_columns_query_error(self) -> None:
        dbh = FakeConnection(error=RuntimeError("ORA-00904: invalid identifier"))

        with pytest.raises(StatementError, match="ORA-00904") as exc_info:
            get_table_definition(dbh, "emp")

        assert exc_info.value.details["operation"] == "table_columns"
        assert len(dbh.executed) == 1

    def test_comments_query_error(self, emp_rows: list[tuple[Any, ...]]) -> None:
        dbh = FakeConnection(
            results=[emp_rows],
            error=RuntimeError("ORA-00942: table or view does not exist"),
            fail_on=1,
        )

        with pytest.raises(StatementError, match="ORA-00942") as exc_info:
            get_table_definition(dbh, "emp", shape="AH1")

        assert exc_info.value.details["operation"] == "column_comments"
        assert "user_col_comments" in exc_info.value.details["sql"]
        assert len(dbh.cursors) == 2
        assert all(cursor.closed for cursor in dbh.cursors)

    def test_row_without_column_number(self) -> None:
        rows = [("EMPNO", "NUMBER", 22, 0, 4, "N", None, None)]
        dbh = FakeConnection(results=[rows, []])

        with pytest.raises(OperationError, match="EMP") as exc_info:
            get_table_definition(dbh, "emp", shape="AH1")

        assert not isinstance(exc_info.value, StatementError)
        assert exc_info.value.details["operation"] == "reshape"
        assert exc_info.value.details["error_type"] == "TypeError"
        assert isinstance(exc_info.value.__cause__, TypeError)

    def test_progress_logged_at_info(
        self, dbh: FakeConnection, caplog: pytest.LogCaptureFixture
    ) -> None:
        with caplog.at_level(logging.INFO, logger="oracle_dml.db.catalog"):
            get_table_definition(dbh, "emp")
        assert "reading table EMP definition" in caplog.text
