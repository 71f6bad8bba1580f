"""Paging over an in-memory snapshot of the query history."""

import math

from .config import DEFAULT_PAGE_SIZE
from .models import HistoryPage, HistorySelection


class HistoryPaginator:
    """Holds the full history list and the page currently shown.

    The list is replaced wholesale by ``load`` after every append or purge;
    it is never patched in place.
    """

    def __init__(self, page_size=DEFAULT_PAGE_SIZE):
        if page_size < 1:
            raise ValueError("page_size must be at least 1")
        self.page_size = page_size
        self._records = ()
        self._current_page = 1

    def load(self, records):
        self._records = tuple(records)
        self._current_page = 1

    @property
    def total_count(self):
        return len(self._records)

    @property
    def total_pages(self):
        return max(1, math.ceil(self.total_count / self.page_size))

    @property
    def current_page(self):
        return self._current_page

    @property
    def page_items(self):
        start = (self._current_page - 1) * self.page_size
        return self._records[start:start + self.page_size]

    @property
    def can_go_previous(self):
        return self._current_page > 1

    @property
    def can_go_next(self):
        return self._current_page < self.total_pages

    def go_to(self, page):
        self._current_page = min(max(1, int(page)), self.total_pages)
        return self.snapshot()

    def first(self):
        return self.go_to(1)

    def previous(self):
        if self.can_go_previous:
            self._current_page -= 1
        return self.snapshot()

    def next(self):
        if self.can_go_next:
            self._current_page += 1
        return self.snapshot()

    def last(self):
        return self.go_to(self.total_pages)

    def snapshot(self):
        return HistoryPage(
            items=self.page_items,
            current_page=self._current_page,
            total_pages=self.total_pages,
            total_count=self.total_count,
        )

    def select(self, index):
        """Pick the ``index``-th record of the current page for replay."""
        items = self.page_items
        if not 0 <= index < len(items):
            raise IndexError(f"No history entry at position {index} on page {self._current_page}")
        return HistorySelection(items[index])
