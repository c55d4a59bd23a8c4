"""Pytest configuration and shared fixtures.

This module provides a fake DB-API handle that records the SQL it is given
and answers each query with the next canned result set.
"""

from collections.abc import Sequence
from typing import Any

import pytest

from oracle_dml.config.settings import reset_settings


class FakeCursor:
    """DB-API cursor serving canned result sets."""

    def __init__(self, connection: "FakeConnection") -> None:
        self.connection = connection
        self._rows: list[Sequence[Any]] = []
        self.closed = False

    def execute(self, sql: str, *params: Any) -> "FakeCursor":
        self.connection.executed.append(sql)
        if self.connection.fails(len(self.connection.executed) - 1):
            raise self.connection.error
        self._rows = self.connection.results.pop(0) if self.connection.results else []
        return self

    def fetchall(self) -> list[Sequence[Any]]:
        return list(self._rows)

    def close(self) -> None:
        self.closed = True


class FakeConnection:
    """DB-API connection whose queries return ``results`` in order.

    ``error`` is raised by every execute, or only by the execute numbered
    ``fail_on`` (zero-based) when that is set.
    """

    def __init__(
        self,
        results: list[list[Sequence[Any]]] | None = None,
        error: Exception | None = None,
        fail_on: int | None = None,
    ) -> None:
        self.results = list(results or [])
        self.error = error
        self.fail_on = fail_on
        self.executed: list[str] = []
        self.cursors: list[FakeCursor] = []
        self.closed = False

    def fails(self, index: int) -> bool:
        return self.error is not None and self.fail_on in (None, index)

    def cursor(self) -> FakeCursor:
        cursor = FakeCursor(self)
        self.cursors.append(cursor)
        return cursor

    def close(self) -> None:
        self.closed = True


@pytest.fixture(autouse=True)
def reset_config() -> None:
    """Reset global settings before each test."""
    reset_settings()


@pytest.fixture
def emp_rows() -> list[tuple[Any, ...]]:
    """Catalog rows of the EMP table as returned by the ``col`` view."""
    return [
        ("EMPNO", "NUMBER", 22, 0, 4, "NOT NULL", 1, None),
        ("ENAME", "VARCHAR2", 10, None, None, None, 2, "CHAR_CS"),
        ("HIREDATE", "DATE", 7, None, None, None, 3, None),
        ("SAL", "NUMBER", 22, 2, 7, None, 4, None),
    ]


@pytest.fixture
def emp_comments() -> list[tuple[str, str | None]]:
    """Rows of ``user_col_comments`` for EMP."""
    return [
        ("EMPNO", "Employee number"),
        ("HIREDATE", "Date hired"),
        ("SAL", None),
    ]
