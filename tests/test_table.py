"""Tests for the DataTable container and its helpers."""

from datetime import datetime, timezone

import pytest

from socialgraph.errors import InvalidArgumentError
from socialgraph.model.table import DataTable, as_table, numbers, present, timestamp_ms


class TestDataTable:
    def test_rows_are_dicts_in_column_order(self):
        table = DataTable(["id", "text"], [[1, "a"], [2, "b"]])
        assert len(table) == 2
        assert list(table.rows()) == [{"id": 1, "text": "a"}, {"id": 2, "text": "b"}]
        assert table.value(1, "text") == "b"

    def test_add_row_from_dict_fills_missing_with_none(self):
        table = DataTable(["id", "text", "x"])
        index = table.add_row({"id": 7, "x": 3})
        assert index == 0
        assert table.row(0) == {"id": 7, "text": None, "x": 3}

    def test_add_row_rejects_unknown_columns(self):
        table = DataTable(["id"])
        with pytest.raises(InvalidArgumentError):
            table.add_row({"id": 1, "colour": "red"})

    def test_add_row_rejects_wrong_length(self):
        table = DataTable(["id", "text"])
        with pytest.raises(InvalidArgumentError):
            table.add_row([1])

    def test_duplicate_columns_rejected(self):
        with pytest.raises(InvalidArgumentError):
            DataTable(["id", "id"])

    def test_from_records_collects_columns_in_first_seen_order(self):
        table = DataTable.from_records([{"id": 1}, {"id": 2, "text": "b"}])
        assert table.columns == ["id", "text"]
        assert table.row(0) == {"id": 1, "text": None}

    def test_column_values_ignore_empty_cells(self):
        table = DataTable(["value"], [[3], [None], [1], [8]])
        assert table.column_values("value") == [3, 1, 8]
        assert table.column_values("missing") == []


class TestHelpers:
    def test_as_table_accepts_list_of_dicts(self):
        table = as_table([{"id": 1}])
        assert isinstance(table, DataTable)
        assert as_table(None) is None

    def test_as_table_rejects_single_dict(self):
        with pytest.raises(InvalidArgumentError):
            as_table({"id": 1})

    def test_present_drops_empty_cells(self):
        assert present({"id": 1, "x": None, "text": ""}) == {"id": 1, "text": ""}

    def test_timestamp_ms(self):
        moment = datetime(2012, 1, 1, tzinfo=timezone.utc)
        assert timestamp_ms(moment) == moment.timestamp() * 1000
        assert timestamp_ms(1500) == 1500.0
        assert timestamp_ms(None) is None
        with pytest.raises(InvalidArgumentError):
            timestamp_ms("yesterday")

    def test_numbers_converts_supplied_cells(self):
        assert numbers({"x": "12.5", "y": 3, "text": "a"}, ("x", "y", "radius")) == {"x": 12.5, "y": 3.0}
        with pytest.raises(InvalidArgumentError):
            numbers({"x": "left"}, ("x",))
        with pytest.raises(InvalidArgumentError):
            numbers({"x": [1]}, ("x",))
