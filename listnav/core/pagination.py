"""
Page window computation and the paginator presenter.

The window is the bounded run of page indices shown as buttons: it starts
one page before the current page and is re-anchored to the tail when fewer
than `window_size` pages remain.
"""

import logging
import math
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Optional

from ..config.constants import DEFAULT_CURRENT_PAGE, DEFAULT_WINDOW_SIZE
from ..exceptions import ConfigurationError

logger = logging.getLogger(__name__)

PageChangeCallback = Callable[[int], None]


def page_count(total: Optional[int], limit: Optional[int]) -> int:
    """Number of pages needed for `total` items, or 0 when either value is missing/zero."""
    if not total or not limit:
        return 0
    return math.ceil(total / limit)


def page_window(current_page: int, pages: int, window_size: int) -> list[int]:
    """
    Contiguous ascending page indices to display.

    Examples:
        >>> page_window(0, 5, 4)
        [0, 1, 2, 3]
        >>> page_window(4, 5, 4)
        [1, 2, 3, 4]
    """
    start = current_page - 1 if current_page > 0 else 0

    if pages - current_page < window_size:
        start = max(0, pages - window_size)

    return list(range(start, min(start + window_size, pages)))


@dataclass
class PageWindowState:
    """Paginator inputs plus the computed window."""

    total: Optional[int] = None
    limit: Optional[int] = None
    window_size: int = DEFAULT_WINDOW_SIZE
    current_page: int = DEFAULT_CURRENT_PAGE
    pages: list[int] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.validate()

    def validate(self) -> None:
        if self.total is not None and self.total < 0:
            raise ConfigurationError("total must not be negative", setting="total", value=self.total)
        if self.limit is not None and self.limit < 0:
            raise ConfigurationError("limit must not be negative", setting="limit", value=self.limit)
        if self.window_size < 1:
            raise ConfigurationError(
                "window_size must be at least 1", setting="window_size", value=self.window_size
            )
        if self.current_page < 0:
            raise ConfigurationError(
                "current_page must not be negative", setting="current_page", value=self.current_page
            )

    @property
    def page_count(self) -> int:
        return page_count(self.total, self.limit)


class Paginator:
    """
    Paginator presenter.

    Owns a PageWindowState, recomputes the window on every change and
    notifies subscribers with the new 0-based page index when navigating.
    With no total or limit the window is empty and navigation is a no-op.
    """

    _SETTABLE = ("total", "limit", "window_size", "current_page")

    def __init__(
        self,
        total: Optional[int] = None,
        limit: Optional[int] = None,
        window_size: int = DEFAULT_WINDOW_SIZE,
        current_page: int = DEFAULT_CURRENT_PAGE,
        on_page_change: Optional[PageChangeCallback] = None,
    ):
        self._state = PageWindowState(
            total=total, limit=limit, window_size=window_size, current_page=current_page
        )
        self._subscribers: list[PageChangeCallback] = []
        if on_page_change:
            self._subscribers.append(on_page_change)

    @property
    def state(self) -> PageWindowState:
        """Get current state."""
        return self._state

    @property
    def pages(self) -> list[int]:
        return self._state.pages

    @property
    def current_page(self) -> int:
        return self._state.current_page

    @property
    def page_count(self) -> int:
        return self._state.page_count

    def subscribe_page_changes(self, callback: PageChangeCallback) -> Callable[[], None]:
        """Register a page-change callback; returns a function that unsubscribes it."""
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def initialize(self) -> list[int]:
        """Compute the initial window."""
        self._recompute()
        return self._state.pages

    def on_config_changed(self, **changes: Optional[int]) -> list[int]:
        """Apply new inputs (total, limit, window_size, current_page) and recompute."""
        unknown = set(changes) - set(self._SETTABLE)
        if unknown:
            raise ConfigurationError("Unknown paginator setting", setting=", ".join(sorted(unknown)))

        previous = {name: getattr(self._state, name) for name in changes}
        for name, value in changes.items():
            setattr(self._state, name, value)
        try:
            self._state.validate()
        except ConfigurationError:
            for name, value in previous.items():
                setattr(self._state, name, value)
            raise

        self._recompute()
        return self._state.pages

    def navigate(self, page: int) -> None:
        """Go to `page`, notify subscribers and recompute the window."""
        if not self._state.page_count:
            logger.debug(f"Ignoring navigation to page {page}: no total or limit")
            return

        self._state.current_page = page
        for callback in list(self._subscribers):
            callback(page)
        self._recompute()

    def navigate_to_start(self) -> None:
        self.navigate(0)

    def navigate_to_end(self) -> None:
        pages = self._state.page_count
        self.navigate(pages - 1 if pages else 0)

    def next_page(self) -> None:
        """Move one page forward, stopping at the last page."""
        pages = self._state.page_count
        if pages and self._state.current_page < pages - 1:
            self.navigate(self._state.current_page + 1)

    def previous_page(self) -> None:
        """Move one page back, stopping at the first page."""
        if self._state.page_count and self._state.current_page > 0:
            self.navigate(self._state.current_page - 1)

    def _recompute(self) -> None:
        pages = self._state.page_count
        if not pages:
            self._state.pages = []
            return

        self._state.pages = page_window(self._state.current_page, pages, self._state.window_size)

    def dispose(self) -> None:
        self._subscribers.clear()
