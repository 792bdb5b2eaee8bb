"""
Row-oriented data tables.

The engine ingests nodes, links and packages as tables with named columns,
one row per entity. ``DataTable`` is the minimal container for that: ordered
columns, positional rows, and a few helpers used during ingestion.
"""
from __future__ import annotations

from datetime import datetime
from typing import Any, Iterable, Iterator, Optional, Sequence, Union

from socialgraph.errors import InvalidArgumentError


class DataTable:
    def __init__(self, columns: Sequence[str], rows: Iterable[Sequence[Any]] = ()) -> None:
        if len(set(columns)) != len(columns):
            raise InvalidArgumentError(f"Duplicate column names in {list(columns)}")
        self._columns: list[str] = list(columns)
        self._index: dict[str, int] = {name: i for i, name in enumerate(self._columns)}
        self._rows: list[list[Any]] = []
        for row in rows:
            self.add_row(row)

    @classmethod
    def from_records(cls, records: Iterable[dict[str, Any]]) -> DataTable:
        """Build a table from dicts; columns appear in first-seen order."""
        records = list(records)
        columns: list[str] = []
        for record in records:
            for key in record:
                if key not in columns:
                    columns.append(key)
        table = cls(columns)
        for record in records:
            table.add_row(record)
        return table

    @property
    def columns(self) -> list[str]:
        return list(self._columns)

    def has_column(self, name: str) -> bool:
        return name in self._index

    def add_row(self, values: Union[Sequence[Any], dict[str, Any]]) -> int:
        if isinstance(values, dict):
            unknown = set(values) - set(self._index)
            if unknown:
                raise InvalidArgumentError(f"Unknown columns {sorted(unknown)}")
            row = [values.get(name) for name in self._columns]
        else:
            row = list(values)
            if len(row) != len(self._columns):
                raise InvalidArgumentError(
                    f"Row has {len(row)} values, table has {len(self._columns)} columns"
                )
        self._rows.append(row)
        return len(self._rows) - 1

    def __len__(self) -> int:
        return len(self._rows)

    def value(self, row: int, column: str) -> Any:
        return self._rows[row][self._index[column]]

    def row(self, index: int) -> dict[str, Any]:
        return dict(zip(self._columns, self._rows[index]))

    def rows(self) -> Iterator[dict[str, Any]]:
        for index in range(len(self._rows)):
            yield self.row(index)

    def column_values(self, column: str) -> list[Any]:
        if column not in self._index:
            return []
        i = self._index[column]
        return [row[i] for row in self._rows if row[i] is not None]



def as_table(data: Union[DataTable, Iterable[dict[str, Any]], None]) -> Optional[DataTable]:
    """Accept either a ``DataTable`` or a list of row dicts."""
    if data is None or isinstance(data, DataTable):
        return data
    if isinstance(data, (str, bytes, dict)):
        raise InvalidArgumentError(f"Expected a DataTable or a list of rows, got {type(data).__name__}")
    return DataTable.from_records(data)


def timestamp_ms(value: Any) -> Optional[float]:
    """Timestamps are numbers in milliseconds or datetimes."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.timestamp() * 1000.0
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return float(value)
    raise InvalidArgumentError(f"Invalid timestamp {value!r}")


def present(row: dict[str, Any]) -> dict[str, Any]:
    """Drop empty cells; an empty cell means the property is not supplied."""
    return {key: value for key, value in row.items() if value is not None}


def numbers(properties: dict[str, Any], names: Iterable[str]) -> dict[str, float]:
    """Convert the supplied numeric cells among ``names`` to floats."""
    converted = {}
    for name in names:
        if name not in properties:
            continue
        value = properties[name]
        try:
            converted[name] = float(value)
        except (TypeError, ValueError) as e:
            raise InvalidArgumentError(f"Column '{name}' must be numeric, got {value!r}") from e
    return converted
