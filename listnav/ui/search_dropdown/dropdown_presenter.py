"""
Presenter for the searchable single-select dropdown.

Owns the selection state machine and the search pipeline:
keystrokes → debounce → (local filter | external typeahead) → displayed items.
The widget only forwards input/lifecycle events and renders DropdownState.
"""

import asyncio
import inspect
import logging
from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass, field, replace
from typing import Any, Optional, Union

from ...config.constants import DEFAULT_LABEL
from ...config.ui_config import get_debounce_ms
from ...core.debounce import Debouncer
from ...core.highlight import Item, filter_items, strip_item, strip_markers
from ...exceptions import ConfigurationError, TypeaheadError

logger = logging.getLogger(__name__)

TypeaheadResult = Optional[list[Item]]
TypeaheadChannel = Callable[[str], Union[Awaitable[TypeaheadResult], TypeaheadResult]]
SelectionCallback = Callable[[Item], None]


@dataclass
class DropdownConfig:
    """Inputs supplied by the surrounding UI."""

    items: list[Item]
    bind_property: str
    bind_value: Optional[str] = None
    bind_item: Optional[Item] = None  # Preferred item to preselect silently
    label: str = DEFAULT_LABEL
    currently_selected_item: Optional[Item] = None
    typeahead: Optional[TypeaheadChannel] = None
    debounce_ms: Optional[int] = None  # None → get_debounce_ms()

    def __post_init__(self) -> None:
        if not self.bind_property:
            raise ConfigurationError("bind_property is required", setting="bind_property")
        if self.debounce_ms is not None and self.debounce_ms < 0:
            raise ConfigurationError(
                "debounce_ms must not be negative", setting="debounce_ms", value=self.debounce_ms
            )


@dataclass
class DropdownState:
    """Complete dropdown state for the UI."""

    selected_item: Optional[Item] = None
    last_selected_item: Optional[Item] = None
    last_query: Optional[str] = None
    input_text: str = ""
    filtered_items: list[Item] = field(default_factory=list)
    is_open: bool = False
    anchor_text: Optional[str] = None  # Display text of the row last picked
    status_text: str = ""


class SearchDropdownPresenter:
    """
    Handles search dropdown business logic.

    Features:
    - Debounced local filtering with match highlighting
    - Optional external typeahead channel with stale-response protection
    - Single selection with silent preselection from a bound item
    """

    def __init__(
        self,
        on_state_update: Optional[Callable[[DropdownState], None]] = None,
        on_item_selected: Optional[SelectionCallback] = None,
    ):
        self.on_state_update = on_state_update
        self._state = DropdownState()
        self._config: Optional[DropdownConfig] = None
        self._initial_items: list[Item] = []
        self._debouncer: Optional[Debouncer[str]] = None
        self._query_seq = 0
        self._tasks: set[asyncio.Task[Any]] = set()
        self._selection_subscribers: list[SelectionCallback] = []
        if on_item_selected:
            self._selection_subscribers.append(on_item_selected)

    @property
    def state(self) -> DropdownState:
        """Get current state."""
        return self._state

    @property
    def config(self) -> DropdownConfig:
        if self._config is None:
            raise ConfigurationError("Presenter has not been initialized")
        return self._config

    @property
    def debouncer(self) -> Optional[Debouncer[str]]:
        return self._debouncer

    @property
    def selected_index(self) -> Optional[int]:
        """Index of the selected item within the displayed list, for scrolling."""
        selected = self._state.selected_item
        if selected is None or self._config is None:
            return None

        bind_property = self._config.bind_property
        target = selected.get(bind_property)
        for index, item in enumerate(self._state.filtered_items):
            value = item.get(bind_property)
            if isinstance(value, str) and strip_markers(value) == target:
                return index
        return None

    def subscribe_selection_changes(self, callback: SelectionCallback) -> Callable[[], None]:
        """Register a selection callback; returns a function that unsubscribes it."""
        self._selection_subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._selection_subscribers:
                self._selection_subscribers.remove(callback)

        return unsubscribe

    def _notify_update(self) -> None:
        """Notify listeners of state change."""
        if self.on_state_update:
            self.on_state_update(self._state)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def initialize(self, config: DropdownConfig) -> None:
        """Set up state from the initial configuration."""
        self._config = config
        self._initial_items = list(config.items)

        state = self._state
        state.filtered_items = list(config.items)

        if config.currently_selected_item is not None:
            self._select_silently(config.currently_selected_item)

        if config.bind_value and config.bind_item:
            candidate = config.bind_item.get(config.bind_value)
            match = self._find_item(config.bind_value, candidate)
            if match is not None:
                self._select_silently(match)

        delay_ms = config.debounce_ms if config.debounce_ms is not None else get_debounce_ms()
        self._debouncer = Debouncer(delay_ms, self._on_debounced)

        logger.debug(f"Dropdown initialized with {len(config.items)} items, debounce={delay_ms}ms")
        self._notify_update()

    def on_config_changed(self, config: Optional[DropdownConfig] = None, **changes: Any) -> None:
        """
        React to new inputs from the surrounding UI.

        Accepts either a complete DropdownConfig or individual fields to
        replace on the current one.
        """
        previous = self.config
        if config is None:
            config = replace(previous, **changes)
        elif changes:
            config = replace(config, **changes)
        self._config = config

        state = self._state
        state.filtered_items = list(config.items)

        if config.currently_selected_item is not previous.currently_selected_item:
            if config.currently_selected_item is None:
                state.selected_item = None
            else:
                self._select_silently(config.currently_selected_item)

        if config.bind_item:
            candidate = config.bind_item.get(config.bind_property)
            match = self._find_item(config.bind_property, candidate)
            if match is not None:
                self._select_silently(match)

        # Selection went from something to nothing: don't leave stale text behind
        if state.selected_item is None and state.last_selected_item is not None:
            state.input_text = ""

        if state.last_query:
            state.filtered_items = filter_items(config.items, state.last_query, config.bind_property)

        self._notify_update()

    def dispose(self) -> None:
        """Cancel pending deliveries and in-flight queries, drop subscribers."""
        if self._debouncer:
            self._debouncer.dispose()
        for task in list(self._tasks):
            task.cancel()
        self._tasks.clear()
        self._selection_subscribers.clear()
        self.on_state_update = None

    # ------------------------------------------------------------------
    # Search pipeline
    # ------------------------------------------------------------------

    def on_input(self, value: str) -> None:
        """Handle a raw input value from the search box."""
        config = self.config
        state = self._state
        state.input_text = value
        state.is_open = True

        if not value:
            # Cleared input resets immediately, bypassing the timer
            if self._debouncer:
                self._debouncer.cancel()
            self._query_seq += 1
            state.last_query = None
            source = self._initial_items if config.typeahead else config.items
            state.filtered_items = list(source)
            state.status_text = ""
            self._notify_update()
            return

        if self._debouncer:
            self._debouncer.push(value)

    def _on_debounced(self, value: str) -> None:
        """Deliver a debounced query to the local engine or the typeahead channel."""
        state = self._state
        if not state.input_text:
            return

        config = self.config
        state.last_query = value

        if config.typeahead:
            self._query_seq += 1
            task = asyncio.get_running_loop().create_task(
                self._run_typeahead(value, self._query_seq)
            )
            self._tasks.add(task)
            task.add_done_callback(self._tasks.discard)
            return

        state.filtered_items = filter_items(config.items, value, config.bind_property)
        state.status_text = f"{len(state.filtered_items)} of {len(config.items)} items"
        self._notify_update()

    async def _query_channel(self, query: str) -> TypeaheadResult:
        try:
            result = self.config.typeahead(query)
            if inspect.isawaitable(result):
                result = await result
        except asyncio.CancelledError:
            raise
        except Exception as e:
            raise TypeaheadError(query=query, reason=str(e)) from e
        return result

    async def _run_typeahead(self, query: str, seq: int) -> None:
        """Forward `query` to the channel and apply the response if still current."""
        try:
            items = await self._query_channel(query)
        except TypeaheadError as e:
            logger.error(f"{e}")
            if seq == self._query_seq:
                self._state.status_text = f"Search error: {e.message}"
                self._notify_update()
            return

        if seq != self._query_seq:
            logger.debug(f"Discarding stale typeahead response for {query!r}")
            return

        if items is None:
            # The channel delivers its results through on_config_changed instead
            return

        self.apply_external_items(items)

    def apply_external_items(self, items: list[Item]) -> None:
        """Display items supplied by the external channel, replaying the last query locally.

        Only the item list changes: selection, preselection and the typed
        text are left as the user set them.
        """
        config = replace(self.config, items=list(items))
        self._config = config

        state = self._state
        if state.last_query:
            state.filtered_items = filter_items(config.items, state.last_query, config.bind_property)
        else:
            state.filtered_items = list(config.items)
        state.status_text = f"{len(state.filtered_items)} of {len(config.items)} items"
        self._notify_update()

    # ------------------------------------------------------------------
    # Selection
    # ------------------------------------------------------------------

    def pick(self, item: Mapping[str, str], origin_text: Optional[str] = None) -> None:
        """Handle an explicit user pick."""
        config = self.config
        state = self._state
        bind_property = config.bind_property

        value = item.get(bind_property)
        cleaned_value = strip_markers(value) if isinstance(value, str) else value

        if state.selected_item is not None and state.selected_item.get(bind_property) == cleaned_value:
            return

        selected = strip_item(item, bind_property)
        state.selected_item = selected
        state.last_selected_item = dict(selected)
        state.input_text = cleaned_value if isinstance(cleaned_value, str) else ""
        state.anchor_text = origin_text
        state.last_query = None
        if self._debouncer:
            self._debouncer.cancel()

        logger.info(f"Item selected: {state.input_text!r}")
        for callback in list(self._selection_subscribers):
            callback(dict(selected))

        state.filtered_items = list(config.items)
        state.status_text = ""
        self._notify_update()

    def clear(self) -> None:
        """Drop the selection and reset the displayed list."""
        config = self.config
        state = self._state

        state.selected_item = None
        state.input_text = ""
        state.anchor_text = None
        state.last_query = None
        state.status_text = ""
        if self._debouncer:
            self._debouncer.cancel()
        self._query_seq += 1

        state.filtered_items = list(config.items)
        self._notify_update()

    def toggle_open(self) -> bool:
        """Flip the open state; returns the new value."""
        self._state.is_open = not self._state.is_open
        self._notify_update()
        return self._state.is_open

    def close(self) -> None:
        if self._state.is_open:
            self._state.is_open = False
            self._notify_update()

    def _select_silently(self, item: Mapping[str, str]) -> None:
        """Select without notifying subscribers (system-driven, not a user action)."""
        selected = strip_item(item, self.config.bind_property)
        self._state.selected_item = selected
        value = selected.get(self.config.bind_property)
        self._state.input_text = value if isinstance(value, str) else ""

    def _find_item(self, key: str, candidate: Any) -> Optional[Item]:
        if candidate is None:
            return None
        for item in self.config.items:
            if item.get(key) == candidate:
                return item
        return None
