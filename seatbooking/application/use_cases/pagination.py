from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Generic, Iterable, Mapping, Protocol, TypeVar

from seatbooking.application.utils.natural_sort import natural_sort_key

PAGED = "paged"
SCROLL = "scroll"
DEFAULT_ROWS_PER_PAGE = 4

# (min viewport width in px, columns), widest first
COLUMN_BREAKPOINTS = ((1280, 10), (768, 8), (640, 6))
MIN_COLUMNS = 4


class InventoryItem(Protocol):
    @property
    def number(self) -> str: ...

    @property
    def section_name(self) -> str: ...


T = TypeVar("T", bound=InventoryItem)


@dataclass(frozen=True)
class SectionPage(Generic[T]):
    section: str
    items: tuple[T, ...]
    page: int
    total_pages: int

    @property
    def has_previous(self) -> bool:
        return self.page > 0

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages - 1


def columns_for_viewport(width_px: int) -> int:
    for min_width, columns in COLUMN_BREAKPOINTS:
        if width_px >= min_width:
            return columns
    return MIN_COLUMNS


def group_by_section(items: Iterable[T]) -> dict[str, list[T]]:
    """Naturally sorted items grouped by section, sections in order of first appearance."""
    grouped: dict[str, list[T]] = {}
    for item in sorted(items, key=lambda i: natural_sort_key(i.number)):
        grouped.setdefault(item.section_name, []).append(item)
    return grouped


def clamp_page(page: int, total_pages: int) -> int:
    return max(0, min(page, max(total_pages, 1) - 1))


def paginate(
    items: Iterable[T],
    columns: int,
    page_by_section: Mapping[str, int] | None = None,
    mode: str = PAGED,
    rows_per_page: int = DEFAULT_ROWS_PER_PAGE,
) -> list[SectionPage[T]]:
    """
    Lay out seats or lockers for display.

    Paged mode shows ``columns * rows_per_page`` items per section page, each section
    keeping its own page index (clamped into range). Scroll mode shows every item of a
    section on one page.
    """
    if columns < 1 or rows_per_page < 1:
        raise ValueError("columns and rows_per_page must be positive")
    if mode not in (PAGED, SCROLL):
        raise ValueError(f"Unknown display mode: {mode}")

    pages = page_by_section or {}
    page_size = columns * rows_per_page
    result: list[SectionPage[T]] = []

    for section, section_items in group_by_section(items).items():
        if mode == SCROLL:
            result.append(SectionPage(section=section, items=tuple(section_items), page=0, total_pages=1))
            continue
        total_pages = max(1, math.ceil(len(section_items) / page_size))
        page = clamp_page(pages.get(section, 0), total_pages)
        start = page * page_size
        result.append(
            SectionPage(
                section=section,
                items=tuple(section_items[start : start + page_size]),
                page=page,
                total_pages=total_pages,
            )
        )
    return result


def step_page(page_by_section: Mapping[str, int], section: str, delta: int, total_pages: int) -> dict[str, int]:
    """Move one section's page index by ``delta`` without touching the others."""
    updated = dict(page_by_section)
    updated[section] = clamp_page(updated.get(section, 0) + delta, total_pages)
    return updated
