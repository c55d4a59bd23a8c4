"""Column definition models and the output shapes built from them.

A table's catalog rows are turned into one canonical list of
``ColumnDefinition`` records. The four output shapes are pure projections:

- ``ARRAY``: the raw catalog rows.
- ``ARRAY_HASH1``: records with short keys, indexed by column slot.
- ``HASH``: the same short-key records keyed by lower-cased column name.
- ``ARRAY_HASH2``: records with long keys built straight from the raw rows.
"""

import re
from collections.abc import Iterable, Mapping, Sequence
from enum import StrEnum
from typing import Any, NamedTuple

from pydantic import BaseModel, Field

DATE_WIDTH = 17
DATE_FORMAT = "YYYYMMDD.HH24MISS"
NOT_NULL = "NOT NULL"

_DATE_TYPE = re.compile(r"date", re.IGNORECASE)
_NOT_NULL_FLAG = re.compile(r"(not null|N)", re.IGNORECASE)

# Positions of the fields selected by the column catalog query.
NAME, TYPE, LENGTH, SCALE, PRECISION, NULLS, COLNO, CHARSET = range(8)

LONG_FIELD_NAMES = (
    "cname",
    "coltype",
    "width",
    "scale",
    "precision",
    "nulls",
    "colno",
    "character_set_name",
)


class OutputShape(StrEnum):
    """Layout of the column definitions returned by the reader."""

    ARRAY = "ARRAY"
    ARRAY_HASH1 = "ARRAY_HASH1"
    HASH = "HASH"
    ARRAY_HASH2 = "ARRAY_HASH2"

    @classmethod
    def resolve(cls, value: "str | OutputShape | None") -> "OutputShape":
        """Resolve a shape name or alias, case-insensitively.

        ``None`` means ``ARRAY``. Unknown names (the empty string included)
        resolve to ``ARRAY_HASH2``.
        """
        if value is None:
            return cls.ARRAY
        if isinstance(value, cls):
            return value
        return _SHAPE_ALIASES.get(str(value).strip().upper(), cls.ARRAY_HASH2)


_SHAPE_ALIASES = {
    "AR": OutputShape.ARRAY,
    "ARRAY": OutputShape.ARRAY,
    "AH1": OutputShape.ARRAY_HASH1,
    "ARRAY_HASH1": OutputShape.ARRAY_HASH1,
    "HH": OutputShape.HASH,
    "HASH": OutputShape.HASH,
    "AH2": OutputShape.ARRAY_HASH2,
    "ARRAY_HASH2": OutputShape.ARRAY_HASH2,
}


class ColumnDefinition(BaseModel):
    """Canonical definition of one table column."""

    sequence: int = Field(..., description="0-based slot (catalog column number - 1)")
    name: str = Field(..., description="Upper-cased column name")
    data_type: str | None = Field(None, description="Declared data type")
    width: int | None = Field(None, description="Precision for numbers, length otherwise")
    max_width: int | None = Field(None, description="Display width")
    min_width: int = Field(default=0, description="Minimum width")
    scale: int | str | None = Field(default="", description="Decimals, '' when not numeric")
    precision: int | None = Field(None, description="Raw precision field")
    required: str = Field(default="", description="'NOT NULL' or ''")
    date_format: str = Field(default="", description="Date format for date columns")
    comment: str = Field(default="", description="Column comment")
    charset: str | None = Field(None, description="Character set name")

    @classmethod
    def from_row(
        cls, row: Sequence[Any], comments: Mapping[str, str | None]
    ) -> "ColumnDefinition":
        """Build a definition from one column catalog row.

        Args:
            row: Eight fields in catalog query order.
            comments: Lower-cased column name to comment.

        Returns:
            ColumnDefinition: The populated definition.
        """
        key = str(row[NAME]).lower()
        data_type = row[TYPE]

        if row[PRECISION]:
            width, scale = row[PRECISION], row[SCALE]
        else:
            width, scale = row[LENGTH], ""
        max_width = width

        date_format = ""
        if data_type and _DATE_TYPE.search(str(data_type)):
            width = max_width = DATE_WIDTH
            date_format = DATE_FORMAT

        nulls = row[NULLS]
        required = NOT_NULL if nulls and _NOT_NULL_FLAG.match(str(nulls)) else ""

        return cls(
            sequence=int(row[COLNO]) - 1,
            name=key.upper(),
            data_type=data_type,
            width=width,
            max_width=max_width,
            min_width=0,
            scale=scale,
            precision=row[PRECISION],
            required=required,
            date_format=date_format,
            comment=comments.get(key) or "",
            charset=row[CHARSET],
        )

    def to_record(self) -> dict[str, Any]:
        """Render with the short field names used by ARRAY_HASH1 and HASH."""
        return {
            "seq": self.sequence,
            "col": self.name,
            "typ": self.data_type,
            "wid": self.width,
            "max": self.max_width,
            "min": self.min_width,
            "dec": self.scale,
            "req": self.required,
            "dft": self.date_format,
            "dsp": self.comment,
        }


class TableDefinition(NamedTuple):
    """Result of reading a table definition.

    Unpacks as ``(column_names, definitions, comments)``.
    """

    column_names: str
    definitions: Any
    comments: dict[str, str | None]


def build_column_definitions(
    rows: Iterable[Sequence[Any]], comments: Mapping[str, str | None]
) -> list[ColumnDefinition]:
    """Build canonical definitions for every row, keeping fetch order."""
    return [ColumnDefinition.from_row(row, comments) for row in rows]


def join_column_names(rows: Iterable[Sequence[Any]]) -> str:
    """Join the first field of every row with commas, in fetch order."""
    return ",".join(str(row[NAME]) for row in rows)


def to_rows(rows: Iterable[Sequence[Any]]) -> list[tuple[Any, ...]]:
    """ARRAY shape: raw catalog rows as tuples."""
    return [tuple(row) for row in rows]


def to_indexed_records(
    definitions: Iterable[ColumnDefinition],
) -> list[dict[str, Any] | None]:
    """ARRAY_HASH1 shape: short-key records placed at their column slot.

    Slots with no column (a column filter can leave gaps) hold ``None``.
    """
    definitions = list(definitions)
    if not definitions:
        return []
    records: list[dict[str, Any] | None] = [None] * (
        max(d.sequence for d in definitions) + 1
    )
    for definition in definitions:
        records[definition.sequence] = definition.to_record()
    return records


def to_name_keyed_map(
    definitions: Iterable[ColumnDefinition],
) -> dict[str, dict[str, Any]]:
    """HASH shape: short-key records keyed by lower-cased column name."""
    return {d.name.lower(): d.to_record() for d in definitions}


def to_long_field_records(rows: Iterable[Sequence[Any]]) -> list[dict[str, Any]]:
    """ARRAY_HASH2 shape: long-key records from raw rows, in fetch order."""
    records = []
    for row in rows:
        record = dict(zip(LONG_FIELD_NAMES, row))
        record["cname"] = str(row[NAME]).lower()
        records.append(record)
    return records
