"""UI-independent list navigation logic: filtering, debouncing and page windows."""

from .debounce import Debouncer
from .highlight import filter_items, highlight_text, occurrences, split_highlights, strip_markers
from .pagination import PageWindowState, Paginator, page_count, page_window

__all__ = [
    "Debouncer",
    "PageWindowState",
    "Paginator",
    "filter_items",
    "highlight_text",
    "occurrences",
    "page_count",
    "page_window",
    "split_highlights",
    "strip_markers",
]
