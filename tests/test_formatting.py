"""
Unit tests for response shaping and JSON serialization.
"""

import json
from datetime import date, datetime, time, timedelta, timezone
from decimal import Decimal
from unittest.mock import MagicMock

import pytest

from mysql_runner.utils.formatting import (
    dump_response,
    format_response,
    format_rows_to_dict,
    format_timedelta,
    json_default,
)


class TestFormatResponse:
    """Result/error exclusivity."""

    def test_result_only(self):
        assert format_response(result=[{"x": 1}]) == {"result": [{"x": 1}]}

    def test_error_wins_over_result(self):
        assert format_response(result="OK", error="query is required") == {
            "error": "query is required"
        }

    def test_empty_result_list_is_kept(self):
        assert format_response(result=[]) == {"result": []}


class TestDumpResponse:
    """Compact JSON on stdout."""

    def test_compact_rows(self):
        assert dump_response({"result": [{"x": 1}]}) == '{"result":[{"x":1}]}'

    def test_effect_summary(self):
        text = dump_response({"result": {"last_insert_id": 0, "rows_affected": 1}})

        assert text == '{"result":{"last_insert_id":0,"rows_affected":1}}'

    def test_column_order_is_preserved(self):
        text = dump_response({"result": [{"z": 1, "a": 2, "m": 3}]})

        assert text == '{"result":[{"z":1,"a":2,"m":3}]}'

    def test_native_types_round_trip(self):
        row = {"n": None, "i": 7, "f": 1.5, "b": True, "s": "text"}

        assert json.loads(dump_response({"result": [row]})) == {"result": [row]}

    def test_temporal_and_decimal_values(self):
        row = {
            "created": datetime(2024, 1, 2, 3, 4, 5),
            "day": date(2024, 1, 2),
            "price": Decimal("10.50"),
            "duration": timedelta(hours=26, minutes=3),
            "tags": {"b", "a"},
        }

        decoded = json.loads(dump_response({"result": [row]}))

        assert decoded["result"][0] == {
            "created": "2024-01-02T03:04:05Z",
            "day": "2024-01-02T00:00:00Z",
            "price": "10.50",
            "duration": "26:03:00",
            "tags": "a,b",
        }


class TestJsonDefault:
    """Conversions for values json cannot encode itself."""

    def test_aware_datetime_keeps_offset(self):
        value = datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc)

        assert json_default(value) == "2024-01-02T03:04:05+00:00"

    def test_date_renders_as_midnight_timestamp(self):
        assert json_default(date(2024, 1, 2)) == "2024-01-02T00:00:00Z"

    def test_time_of_day(self):
        assert json_default(time(12, 30)) == "12:30:00"

    def test_bytes(self):
        assert json_default(b"abc") == "abc"

    def test_unknown_type_raises(self):
        with pytest.raises(TypeError):
            json_default(object())


class TestFormatTimedelta:
    """TIME column rendering."""

    def test_negative(self):
        assert format_timedelta(timedelta(hours=-1)) == "-01:00:00"

    def test_fractional(self):
        assert format_timedelta(timedelta(seconds=-0.5)) == "-00:00:00.500000"
        assert format_timedelta(timedelta(minutes=1, microseconds=250)) == "00:01:00.000250"


class TestFormatRowsToDict:
    """Cursor rows to column mappings."""

    def test_maps_rows(self):
        cursor = MagicMock()
        cursor.description = [("id",), ("data",)]

        rows = format_rows_to_dict(cursor, [(1, b"\xff")])

        assert rows == [{"id": 1, "data": "�"}]

    def test_without_description(self):
        cursor = MagicMock()
        cursor.description = None

        assert format_rows_to_dict(cursor, []) == []
