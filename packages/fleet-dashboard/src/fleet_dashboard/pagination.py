"""Pagination window over an ordered, already filtered sequence."""

from collections.abc import Sequence
from dataclasses import dataclass
import math
from typing import Generic, TypeVar

T = TypeVar("T")

PAGE_SIZE_OPTIONS = (10, 25, 50, 100)
DEFAULT_PAGE_SIZE = 25


@dataclass(frozen=True)
class PageWindow(Generic[T]):
    items: list[T]
    total_items: int
    total_pages: int
    page: int
    page_size: int

    @property
    def start_index(self) -> int:
        return (self.page - 1) * self.page_size

    @property
    def end_index(self) -> int:
        return min(self.start_index + self.page_size, self.total_items)

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages

    @property
    def has_previous(self) -> bool:
        return self.page > 1


def total_pages_for(total_items: int, page_size: int) -> int:
    if page_size <= 0:
        raise ValueError(f"page_size must be positive, got {page_size}")
    return max(1, math.ceil(total_items / page_size))


def paginate(records: Sequence[T], page: int, page_size: int) -> PageWindow[T]:
    """Slice ``records`` for ``page``.

    A page past the end is clamped to the last page; a page below 1 becomes 1.
    An empty input always reports page 1 with no items.
    """
    total_items = len(records)
    total_pages = total_pages_for(total_items, page_size)
    page = min(max(1, page), total_pages)

    start = (page - 1) * page_size
    return PageWindow(
        items=list(records[start : start + page_size]),
        total_items=total_items,
        total_pages=total_pages,
        page=page,
        page_size=page_size,
    )


class PaginationState:
    """Current page and page size owned by a list view.

    ``total_pages`` is whatever the last computed window reported; navigation is
    bounded by it and ``sync`` writes a clamped page back.
    """

    def __init__(self, items_per_page: int = DEFAULT_PAGE_SIZE, current_page: int = 1):
        if items_per_page <= 0:
            raise ValueError(f"items_per_page must be positive, got {items_per_page}")
        self.items_per_page = items_per_page
        self.current_page = max(1, current_page)
        self.total_pages = 1

    def sync(self, window: PageWindow) -> None:
        self.current_page = window.page
        self.total_pages = window.total_pages

    def go_to_page(self, page: int) -> None:
        self.current_page = max(1, min(page, self.total_pages))

    def next_page(self) -> None:
        if self.current_page < self.total_pages:
            self.current_page += 1

    def previous_page(self) -> None:
        if self.current_page > 1:
            self.current_page -= 1

    def first_page(self) -> None:
        self.current_page = 1

    def last_page(self) -> None:
        self.current_page = self.total_pages

    def set_items_per_page(self, items_per_page: int) -> None:
        # The old offset means nothing under a new divisor
        if items_per_page <= 0:
            raise ValueError(f"items_per_page must be positive, got {items_per_page}")
        self.items_per_page = items_per_page
        self.current_page = 1

    def reset(self) -> None:
        self.current_page = 1
