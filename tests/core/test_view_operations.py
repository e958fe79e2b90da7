"""Tests for the pure projection pipeline.

Critical Invariants:
- total_matching equals a linear scan with the same predicates
- Sorting is stable in both directions, missing keys last
- Page index is clamped when the result shrinks, never an empty page when matches exist
"""

import math

from hypothesis import given
from hypothesis import strategies as st

from recordflow import PageState, SortDirection, SortState, ViewState
from recordflow.core.column import enum_column, index_columns, numeric_column, text_column
from recordflow.core.view import (
    apply_column_filters,
    apply_global_filter,
    clamp_page_index,
    next_sort,
    page_count,
    project,
    slice_page,
    sort_records,
)

STATUSES = ["todo", "started", "done"]

COLUMNS = index_columns(
    [
        text_column("name"),
        enum_column("status"),
        numeric_column("priority"),
        text_column("secret", filterable=False),
    ]
)


@st.composite
def records_strategy(draw, max_size=40):
    """Generate records with unique ids and plenty of duplicate keys."""
    size = draw(st.integers(min_value=0, max_value=max_size))
    return [
        {
            "id": f"r{i}",
            "name": draw(st.text(alphabet="abAB ", max_size=4)),
            "status": draw(st.sampled_from(STATUSES)),
            "priority": draw(st.one_of(st.none(), st.integers(min_value=0, max_value=3))),
            "secret": "hidden",
        }
        for i in range(size)
    ]


def test_status_scenario_keeps_source_order():
    """Scenario: status filter "todo" keeps a and c, in source order."""
    records = [
        {"id": "a", "status": "todo"},
        {"id": "b", "status": "done"},
        {"id": "c", "status": "todo"},
    ]
    columns = index_columns([enum_column("status")])
    state = ViewState(filters={"status": "todo"})

    projection, _ = project(records, columns, state)

    assert [r["id"] for r in projection.page_rows] == ["a", "c"]
    assert projection.total_matching == 2


@given(
    records=records_strategy(),
    status=st.sampled_from([*STATUSES, ""]),
    name_part=st.text(alphabet="abAB", max_size=2),
    search=st.text(alphabet="ab", max_size=2),
)
def test_total_matching_equals_linear_scan(records, status, name_part, search):
    """PROPERTY: total_matching equals a linear scan applying the same predicates.

    Column filters combine with AND; the global filter is an OR over
    filterable columns, so the non-filterable "secret" never matches.
    """
    state = ViewState(
        filters={"status": status, "name": name_part},
        global_filter=search or None,
        page=PageState(size=7),
    )
    projection, _ = project(records, COLUMNS, state)

    def searchable(r):
        texts = [r["name"], r["status"], "" if r["priority"] is None else str(r["priority"])]
        return any(search.casefold() in t.casefold() for t in texts)

    expected = [
        r
        for r in records
        if (not status or r["status"] == status)
        and name_part.casefold() in r["name"].casefold()
        and (not search or searchable(r))
    ]
    assert projection.total_matching == len(expected)
    assert list(projection.page_rows) == expected[:7]


@given(records=records_strategy(), direction=st.sampled_from(list(SortDirection)))
def test_sort_is_stable_with_missing_last(records, direction):
    """PROPERTY: equal keys keep insertion order in both directions; None sorts last."""
    ordered = sort_records(records, COLUMNS["priority"], direction)
    position = {r["id"]: i for i, r in enumerate(records)}

    present = [r for r in ordered if r["priority"] is not None]
    missing = [r for r in ordered if r["priority"] is None]
    assert ordered == present + missing
    assert [position[r["id"]] for r in missing] == sorted(position[r["id"]] for r in missing)

    for a, b in zip(present, present[1:], strict=False):
        if direction is SortDirection.ASC:
            assert a["priority"] <= b["priority"]
        else:
            assert a["priority"] >= b["priority"]
        if a["priority"] == b["priority"]:
            assert position[a["id"]] < position[b["id"]]


def test_sort_puts_non_comparable_custom_keys_last():
    """Mixed custom key types do not raise; odd ones out go last."""
    records = [{"id": "1", "v": "b"}, {"id": "2", "v": 3}, {"id": "3", "v": "a"}]
    column = text_column("v", sort_key=lambda v: v)

    ordered = sort_records(records, column, SortDirection.DESC)

    assert [r["id"] for r in ordered] == ["1", "3", "2"]


def test_sort_keeps_source_order_when_same_type_keys_do_not_compare():
    """Tuples holding None share a type but still raise on comparison.

    Why: A bad custom sort key must not break the whole projection.
    """
    records = [
        {"id": "1", "v": (1, "b")},
        {"id": "2", "v": None},
        {"id": "3", "v": (1, None)},
        {"id": "4", "v": (0, "a")},
    ]
    columns = index_columns([text_column("v", sort_key=lambda v: v)])

    for direction in SortDirection:
        state = ViewState(sort=SortState("v", direction))
        projection, _ = project(records, columns, state)
        assert [r["id"] for r in projection.page_rows] == ["1", "3", "4", "2"]


@given(
    total=st.integers(min_value=0, max_value=60),
    size=st.integers(min_value=1, max_value=10),
    requested=st.integers(min_value=0, max_value=20),
    keep=st.integers(min_value=0, max_value=60),
)
def test_page_index_is_clamped_after_shrink(total, size, requested, keep):
    """PROPERTY: after the result shrinks, the page index is the last valid page.

    Why: Leaving the viewer on an empty page after filtering is a UX defect.
    """
    keep = min(keep, total)
    records = [{"id": str(i), "name": "keep" if i < keep else "drop"} for i in range(total)]
    columns = index_columns([text_column("name")])
    state = ViewState(filters={"name": "keep"}, page=PageState(index=requested, size=size))

    projection, effective = project(records, columns, state)

    last = max(1, math.ceil(keep / size)) - 1
    assert projection.page_index == min(requested, last)
    assert effective.page.index == projection.page_index
    if keep:
        assert projection.page_rows
    assert projection.can_prev == (projection.page_index > 0)
    assert projection.can_next == (projection.page_index < projection.page_count - 1)


def test_project_returns_same_state_when_no_clamp_needed():
    state = ViewState(page=PageState(index=0, size=5))
    _, effective = project([{"id": "x", "name": "n"}], index_columns([text_column("name")]), state)
    assert effective is state


def test_page_count_has_floor_of_one():
    assert page_count(0, 10) == 1
    assert page_count(10, 10) == 1
    assert page_count(11, 10) == 2


def test_clamp_page_index_bounds():
    assert clamp_page_index(-2, 3) == 0
    assert clamp_page_index(1, 3) == 1
    assert clamp_page_index(9, 3) == 2


def test_slice_page():
    assert slice_page(list(range(12)), PageState(index=1, size=5)) == [5, 6, 7, 8, 9]
    assert slice_page(list(range(12)), PageState(index=2, size=5)) == [10, 11]


def test_next_sort_cycles_asc_desc_none():
    first = next_sort(None, "name")
    assert first == SortState("name", SortDirection.ASC)
    second = next_sort(first, "name")
    assert second == SortState("name", SortDirection.DESC)
    assert next_sort(second, "name") is None
    assert next_sort(second, "status") == SortState("status", SortDirection.ASC)


def test_inactive_filters_are_ignored():
    records = [{"id": "1", "name": "x"}]
    assert apply_column_filters(records, COLUMNS, {"name": "", "status": None}) == records
    assert apply_global_filter(records, COLUMNS.values(), "") == records
