"""
Tests for seat/locker grouping and pagination.
"""

from __future__ import annotations

import pytest

from seatbooking.application.use_cases.pagination import (
    SCROLL,
    clamp_page,
    columns_for_viewport,
    group_by_section,
    paginate,
    step_page,
)
from seatbooking.application.utils.natural_sort import natural_sort_key
from seatbooking.domain.entities.inventory import Locker, Seat


def _seats(count: int, section: str | None = "Hall A") -> list[Seat]:
    return [Seat(id=f"s{i}", number=str(i), section=section) for i in range(1, count + 1)]


def test_natural_sort_orders_digit_runs_numerically():
    assert sorted(["A10", "A2", "A1"], key=natural_sort_key) == ["A1", "A2", "A10"]
    assert sorted(["10", "9", "1"], key=natural_sort_key) == ["1", "9", "10"]
    assert natural_sort_key("a2") == natural_sort_key("A2")


def test_columns_follow_viewport_breakpoints():
    assert columns_for_viewport(320) == 4
    assert columns_for_viewport(639) == 4
    assert columns_for_viewport(640) == 6
    assert columns_for_viewport(768) == 8
    assert columns_for_viewport(1279) == 8
    assert columns_for_viewport(1280) == 10


def test_twenty_seats_split_into_sixteen_and_four():
    """columns=4 and 4 rows per page: 20 seats give pages of 16 and 4."""
    seats = _seats(20)
    first = paginate(seats, columns=4)[0]
    second = paginate(seats, columns=4, page_by_section={"Hall A": 1})[0]

    assert first.total_pages == 2
    assert len(first.items) == 16
    assert len(second.items) == 4
    assert [s.number for s in second.items] == ["17", "18", "19", "20"]
    assert first.has_next and not first.has_previous
    assert second.has_previous and not second.has_next


def test_page_index_is_clamped():
    seats = _seats(20)
    assert paginate(seats, columns=4, page_by_section={"Hall A": 9})[0].page == 1
    assert paginate(seats, columns=4, page_by_section={"Hall A": -3})[0].page == 0
    assert clamp_page(5, 0) == 0


def test_sections_keep_independent_pages():
    seats = _seats(20, "Hall A") + [Seat(id=f"q{i}", number=f"Q{i}", section="Quiet") for i in range(1, 21)]
    pages = {p.section: p for p in paginate(seats, columns=4, page_by_section={"Quiet": 1})}

    assert pages["Hall A"].page == 0
    assert pages["Quiet"].page == 1


def test_every_item_appears_exactly_once():
    seats = _seats(37, "Hall A") + [Seat(id=f"g{i}", number=str(i)) for i in range(1, 6)]
    seen = []
    for section, items in group_by_section(seats).items():
        total_pages = paginate(items, columns=6)[0].total_pages
        for page in range(total_pages):
            seen.extend(s.id for s in paginate(items, columns=6, page_by_section={section: page})[0].items)
    assert sorted(seen) == sorted(s.id for s in seats)


def test_missing_section_defaults_to_general():
    grouped = group_by_section([Seat(id="x", number="1"), Locker(id="l", number="2")])
    assert list(grouped) == ["General"]
    assert len(grouped["General"]) == 2


def test_scroll_mode_returns_whole_section():
    pages = paginate(_seats(40), columns=4, mode=SCROLL)
    assert len(pages) == 1
    assert len(pages[0].items) == 40
    assert pages[0].total_pages == 1


def test_step_page_touches_one_section():
    pages = step_page({"Hall A": 0, "Quiet": 2}, "Hall A", 1, total_pages=2)
    assert pages == {"Hall A": 1, "Quiet": 2}
    assert step_page(pages, "Hall A", 1, total_pages=2)["Hall A"] == 1


def test_invalid_arguments_raise():
    with pytest.raises(ValueError):
        paginate(_seats(3), columns=0)
    with pytest.raises(ValueError):
        paginate(_seats(3), columns=4, mode="carousel")
