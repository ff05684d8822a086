"""
Picker application used by `listnav pick`.

Shows a search dropdown over the items plus a paginated listing of the
full item list. Exits with the selected item.
"""

import logging
from typing import Optional

from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Vertical
from textual.widgets import Footer, Static

from ..core.highlight import Item
from .paginator import PaginatorBar
from .search_dropdown import DropdownConfig, SearchDropdown

logger = logging.getLogger(__name__)

PAGE_LIMIT = 10


class ListnavApp(App[Optional[Item]]):
    """Pick one item from a list."""

    CSS = """
    #picker {
        padding: 1 2;
    }

    #page-listing {
        height: auto;
        margin-top: 1;
        color: $text-muted;
    }
    """

    BINDINGS = [
        Binding("ctrl+q", "quit", "Quit"),
    ]

    def __init__(self, config: DropdownConfig, page_limit: int = PAGE_LIMIT) -> None:
        super().__init__()
        self.config = config
        self.page_limit = page_limit

    def compose(self) -> ComposeResult:
        with Vertical(id="picker"):
            yield SearchDropdown(self.config, id="dropdown")
            yield Static("", id="page-listing")
            yield PaginatorBar(total=len(self.config.items), limit=self.page_limit, id="paginator")
        yield Footer()

    def on_mount(self) -> None:
        self._show_page(0)
        self.query_one("#dropdown-input").focus()

    def _show_page(self, page: int) -> None:
        start = page * self.page_limit
        rows = self.config.items[start:start + self.page_limit]
        lines = [str(item.get(self.config.bind_property, "")) for item in rows]
        self.query_one("#page-listing", Static).update("\n".join(lines))

    def on_paginator_bar_page_changed(self, event: PaginatorBar.PageChanged) -> None:
        self._show_page(event.page)

    def on_search_dropdown_item_selected(self, event: SearchDropdown.ItemSelected) -> None:
        logger.info(f"Picked {event.item!r}")
        self.exit(event.item)
