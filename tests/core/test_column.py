"""Tests for column descriptors and per-kind rules.

Why these tests exist:
- Each column kind owns its text, sort and match semantics
- Sort keys must stay mutually comparable within a column
- Duplicate column ids make a view undefined and must be rejected
"""

from datetime import UTC, date, datetime
from decimal import Decimal
from enum import Enum

import pytest

from recordflow import ColumnDescriptor, ColumnKind, DuplicateColumnError
from recordflow.core.column import (
    PLACEHOLDER,
    date_column,
    enum_column,
    format_cell,
    index_columns,
    is_active_filter,
    item,
    matches_filter,
    numeric_column,
    sort_key,
    text_column,
    to_timestamp,
    value_text,
)


class Color(Enum):
    RED = "red"
    DARK_RED = "dark-red"


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (None, ""),
        ("Hello", "Hello"),
        (3, "3"),
        (Color.RED, "red"),
        (date(2024, 1, 2), "2024-01-02"),
        (datetime(2024, 1, 2, 3, 4), "2024-01-02T03:04:00"),
    ],
    ids=["none", "str", "int", "enum", "date", "datetime"],
)
def test_value_text(value, expected):
    assert value_text(value) == expected


def test_to_timestamp_mixes_dates_datetimes_and_iso_strings():
    """Dates, naive/aware datetimes and ISO strings land on one comparable scale.

    Why: Backend rows carry ISO strings; locally created rows carry datetimes.
    """
    day = to_timestamp(date(2024, 1, 2))
    naive = to_timestamp(datetime(2024, 1, 2))
    aware = to_timestamp(datetime(2024, 1, 2, tzinfo=UTC))
    iso = to_timestamp("2024-01-02T00:00:00Z")

    assert day == naive == aware == iso
    assert to_timestamp("not a date") is None
    assert to_timestamp(42) is None


def test_text_sort_key_ignores_case():
    col = text_column("name")
    assert sort_key(col, {"name": "Beta"}) == sort_key(col, {"name": "beta"})
    assert sort_key(col, {"name": "alpha"}) < sort_key(col, {"name": "Beta"})


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (3, 3),
        (2.5, 2.5),
        (Decimal("1.5"), Decimal("1.5")),
        (None, None),
        (True, None),
        (float("nan"), None),
        ("12", None),
    ],
    ids=["int", "float", "decimal", "none", "bool", "nan", "str"],
)
def test_numeric_sort_key(value, expected):
    """Non-numeric and NaN values count as missing so they sort last."""
    col = numeric_column("n")
    assert sort_key(col, {"n": value}) == expected


def test_custom_sort_key_applies_to_accessor_value():
    order = {"low": 0, "high": 1}
    col = text_column("level", sort_key=order.get)
    assert sort_key(col, {"level": "high"}) == 1
    assert sort_key(col, {"level": "unknown"}) is None


def test_text_filter_is_case_insensitive_substring():
    col = text_column("name")
    assert matches_filter(col, {"name": "Write Report"}, "report")
    assert not matches_filter(col, {"name": "Write Report"}, "notes")
    assert not matches_filter(col, {"name": None}, "x")


def test_enum_filter_matches_whole_value():
    """ENUM filters compare whole values so "red" does not match "dark-red"."""
    col = enum_column("color")
    assert matches_filter(col, {"color": Color.RED}, "RED")
    assert not matches_filter(col, {"color": Color.DARK_RED}, "red")


def test_predicate_and_exact_filters():
    col = numeric_column("n")
    assert matches_filter(col, {"n": 5}, lambda v: v is not None and v > 3)
    assert not matches_filter(col, {"n": None}, lambda v: v is not None and v > 3)
    assert matches_filter(col, {"n": 5}, 5)
    assert not matches_filter(col, {"n": 5}, 6)


@pytest.mark.parametrize(("value", "active"), [(None, False), ("", False), ("x", True), (0, True)])
def test_is_active_filter(value, active):
    assert is_active_filter(value) is active


def test_format_cell_defaults_and_formatter():
    plain = text_column("stage")
    upper = text_column("stage", formatter=lambda v: (v or "").upper())

    assert format_cell(plain, {"stage": None}) == PLACEHOLDER
    assert format_cell(plain, {"stage": "draft"}) == "draft"
    assert format_cell(upper, {"stage": "draft"}) == "DRAFT"


def test_index_columns_rejects_duplicates():
    with pytest.raises(DuplicateColumnError, match="status"):
        index_columns([enum_column("status"), text_column("status")])


def test_index_columns_preserves_order():
    cols = [text_column("b"), text_column("a")]
    assert list(index_columns(cols)) == ["b", "a"]


def test_factories_default_to_item_accessor():
    col = date_column("updated_at")
    assert col.kind is ColumnKind.DATE
    assert col.value({"updated_at": "2024-01-01"}) == "2024-01-01"
    assert col.value({}) is None
    assert item("x")({"x": 1}) == 1


def test_label_falls_back_to_id():
    assert ColumnDescriptor(id="title", accessor=item("title")).label == "title"
    assert text_column("title", header="Title").label == "Title"
