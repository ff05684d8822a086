"""Paginator widget: first/last buttons around a window of page buttons."""

import logging
from typing import Any, Optional

from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal
from textual.message import Message
from textual.widget import Widget
from textual.widgets import Button

from ...config.ui_config import get_window_size
from ...core.pagination import Paginator

logger = logging.getLogger(__name__)


class PaginatorBar(Widget):
    """Renders a Paginator and posts PageChanged when navigating."""

    class PageChanged(Message):
        """Fired with the new 0-based page index."""

        def __init__(self, page: int) -> None:
            self.page = page
            super().__init__()

    BINDINGS = [
        Binding("left", "previous_page", "Prev", show=False),
        Binding("right", "next_page", "Next", show=False),
        Binding("home", "first_page", "First", show=False),
        Binding("end", "last_page", "Last", show=False),
    ]

    DEFAULT_CSS = """
    PaginatorBar {
        height: 3;
    }

    PaginatorBar #paginator-pages {
        width: auto;
        height: 3;
    }

    PaginatorBar Button {
        min-width: 5;
        margin: 0 1 0 0;
    }

    PaginatorBar Button.active {
        background: $primary;
        color: $text;
    }

    PaginatorBar.empty {
        display: none;
    }
    """

    def __init__(
        self,
        total: Optional[int] = None,
        limit: Optional[int] = None,
        window_size: Optional[int] = None,
        current_page: int = 0,
        *args: Any,
        **kwargs: Any,
    ) -> None:
        super().__init__(*args, **kwargs)
        self.paginator = Paginator(
            total=total,
            limit=limit,
            window_size=window_size or get_window_size(),
            current_page=current_page,
            on_page_change=self._on_page_change,
        )

    def compose(self) -> ComposeResult:
        with Horizontal():
            yield Button("«", name="start")
            yield Horizontal(id="paginator-pages")
            yield Button("»", name="end")

    async def on_mount(self) -> None:
        self.paginator.initialize()
        await self._render_pages()

    def on_unmount(self) -> None:
        self.paginator.dispose()

    async def update_config(self, **changes: Optional[int]) -> None:
        """Apply new total/limit/window_size/current_page."""
        self.paginator.on_config_changed(**changes)
        await self._render_pages()

    def _on_page_change(self, page: int) -> None:
        logger.debug(f"Page changed to {page}")
        self.post_message(self.PageChanged(page))

    async def _render_pages(self) -> None:
        container = self.query_one("#paginator-pages", Horizontal)
        await container.remove_children()

        current = self.paginator.current_page
        buttons = [
            Button(str(page + 1), name=f"page-{page}", classes="active" if page == current else "")
            for page in self.paginator.pages
        ]
        if buttons:
            await container.mount(*buttons)

        self.set_class(not buttons, "empty")

    async def on_button_pressed(self, event: Button.Pressed) -> None:
        event.stop()
        name = event.button.name or ""
        if name == "start":
            self.paginator.navigate_to_start()
        elif name == "end":
            self.paginator.navigate_to_end()
        elif name.startswith("page-"):
            self.paginator.navigate(int(name.removeprefix("page-")))
        await self._render_pages()

    async def action_previous_page(self) -> None:
        self.paginator.previous_page()
        await self._render_pages()

    async def action_next_page(self) -> None:
        self.paginator.next_page()
        await self._render_pages()

    async def action_first_page(self) -> None:
        self.paginator.navigate_to_start()
        await self._render_pages()

    async def action_last_page(self) -> None:
        self.paginator.navigate_to_end()
        await self._render_pages()
