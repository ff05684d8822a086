"""
Search dropdown widget.

Textual adapter around SearchDropdownPresenter: forwards keystrokes and
lifecycle events, renders the filtered items with highlighted matches and
posts ItemSelected when the user picks an item.
"""

import logging
from typing import Any, Optional

from rich.text import Text
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal
from textual.message import Message
from textual.widget import Widget
from textual.widgets import Input, OptionList, Static
from textual.widgets.option_list import Option

from ...config.ui_config import get_highlight_style
from ...core.highlight import Item, split_highlights, strip_markers
from .dropdown_presenter import DropdownConfig, DropdownState, SearchDropdownPresenter

logger = logging.getLogger(__name__)


class SearchDropdown(Widget):
    """
    Searchable single-select dropdown.

    Layout:
    - Caption label
    - Search input with a clear marker
    - Option list of (filtered) items, shown while open
    """

    class ItemSelected(Message):
        """Fired when the user selects an item."""

        def __init__(self, item: Item) -> None:
            self.item = item
            super().__init__()

    BINDINGS = [
        Binding("escape", "close", "Close", show=False),
        Binding("ctrl+l", "clear", "Clear"),
        Binding("f4", "toggle_dropdown", "Toggle"),
    ]

    DEFAULT_CSS = """
    SearchDropdown {
        height: auto;
    }

    SearchDropdown #dropdown-label {
        height: 1;
        color: $text-muted;
    }

    SearchDropdown #dropdown-bar {
        height: 3;
    }

    SearchDropdown #dropdown-input {
        width: 1fr;
    }

    SearchDropdown #dropdown-arrow {
        width: 3;
        padding: 1 1;
    }

    SearchDropdown #dropdown-list {
        height: auto;
        max-height: 12;
        display: none;
    }

    SearchDropdown.opened #dropdown-list {
        display: block;
    }

    SearchDropdown #dropdown-status {
        height: 1;
        color: $text-muted;
    }
    """

    def __init__(self, config: DropdownConfig, *args: Any, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self._config = config
        self._highlight_style = get_highlight_style()
        self._ready = False
        self.presenter = SearchDropdownPresenter(
            on_state_update=self._on_state_update,
            on_item_selected=self._on_item_selected,
        )

    def compose(self) -> ComposeResult:
        yield Static(self._config.label, id="dropdown-label")
        with Horizontal(id="dropdown-bar"):
            yield Input(placeholder="Type to search...", id="dropdown-input")
            yield Static("▾", id="dropdown-arrow")
        yield OptionList(id="dropdown-list")
        yield Static("", id="dropdown-status")

    def on_mount(self) -> None:
        self._ready = True
        self.presenter.initialize(self._config)

    def on_unmount(self) -> None:
        self._ready = False
        self.presenter.dispose()

    def update_config(self, **changes: Any) -> None:
        """Push new inputs (items, bind_item, ...) into the presenter."""
        self.presenter.on_config_changed(**changes)

    def _on_item_selected(self, item: Item) -> None:
        self.post_message(self.ItemSelected(item))

    def _on_state_update(self, state: DropdownState) -> None:
        """Handle state updates from presenter."""
        if not self._ready:
            return
        try:
            self._render_state(state)
        except Exception as e:
            logger.error(f"Error rendering dropdown state: {e}")

    def render_item(self, item: Item) -> Text:
        """Build a Rich Text for an item, styling the highlighted segments."""
        value = item.get(self._config.bind_property)
        text = Text()
        if not isinstance(value, str):
            return text
        for segment, highlighted in split_highlights(value):
            text.append(segment, style=self._highlight_style if highlighted else None)
        return text

    def _render_state(self, state: DropdownState) -> None:
        input_widget = self.query_one("#dropdown-input", Input)
        if input_widget.value != state.input_text:
            input_widget.value = state.input_text

        option_list = self.query_one("#dropdown-list", OptionList)
        option_list.clear_options()
        option_list.add_options([Option(self.render_item(item)) for item in state.filtered_items])

        index = self.presenter.selected_index
        if index is not None:
            option_list.highlighted = index

        self.set_class(state.is_open, "opened")
        self.query_one("#dropdown-arrow", Static).update("▴" if state.is_open else "▾")
        self.query_one("#dropdown-status", Static).update(state.status_text)

    def on_input_changed(self, event: Input.Changed) -> None:
        """Forward keystrokes to the presenter."""
        if event.input.id != "dropdown-input":
            return
        event.stop()
        # Values we wrote ourselves (after a pick or clear) are already in sync
        if event.value == self.presenter.state.input_text:
            return
        self.presenter.on_input(event.value)

    def on_option_list_option_selected(self, event: OptionList.OptionSelected) -> None:
        event.stop()
        items = self.presenter.state.filtered_items
        if 0 <= event.option_index < len(items):
            item = items[event.option_index]
            value = item.get(self._config.bind_property)
            origin_text = strip_markers(value) if isinstance(value, str) else None
            self.presenter.pick(item, origin_text)
            self.presenter.close()

    def action_toggle_dropdown(self) -> None:
        if self.presenter.toggle_open():
            self.query_one("#dropdown-input", Input).focus()

    def action_close(self) -> None:
        self.presenter.close()

    def action_clear(self) -> None:
        self.presenter.clear()
        self.query_one("#dropdown-input", Input).focus()

    @property
    def selected_item(self) -> Optional[Item]:
        return self.presenter.state.selected_item
