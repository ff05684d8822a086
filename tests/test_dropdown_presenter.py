"""Tests for the search dropdown presenter (selection state machine and search pipeline)."""

import asyncio
import copy
from unittest.mock import AsyncMock, Mock

import pytest

from listnav.config.constants import HIGHLIGHT_END, HIGHLIGHT_START
from listnav.core.highlight import strip_markers
from listnav.exceptions import ConfigurationError
from listnav.ui.search_dropdown.dropdown_presenter import (
    DropdownConfig,
    DropdownState,
    SearchDropdownPresenter,
)

DEBOUNCE_MS = 10
SETTLE = 0.06  # Comfortably longer than the debounce period


def mark(text: str) -> str:
    return f"{HIGHLIGHT_START}{text}{HIGHLIGHT_END}"


def names(items):
    return [strip_markers(i["name"]) for i in items]


@pytest.fixture
def on_selected():
    return Mock()


@pytest.fixture
def on_update():
    return Mock()


@pytest.fixture
def presenter(projects, on_selected, on_update):
    presenter = SearchDropdownPresenter(on_state_update=on_update, on_item_selected=on_selected)
    presenter.initialize(
        DropdownConfig(items=projects, bind_property="name", bind_value="id", debounce_ms=DEBOUNCE_MS)
    )
    yield presenter
    presenter.dispose()


class TestDropdownConfig:
    def test_requires_bind_property(self, projects):
        with pytest.raises(ConfigurationError):
            DropdownConfig(items=projects, bind_property="")

    def test_rejects_negative_debounce(self, projects):
        with pytest.raises(ConfigurationError):
            DropdownConfig(items=projects, bind_property="name", debounce_ms=-5)

    def test_defaults(self, projects):
        config = DropdownConfig(items=projects, bind_property="name")

        assert config.label == "Project"
        assert config.typeahead is None


class TestInitialize:
    def test_shows_all_items(self, presenter, projects, on_update):
        state = presenter.state

        assert isinstance(state, DropdownState)
        assert state.filtered_items == projects
        assert state.filtered_items is not projects
        assert state.selected_item is None
        assert state.input_text == ""
        on_update.assert_called()

    def test_preselects_bind_item_by_value(self, projects, on_selected):
        presenter = SearchDropdownPresenter(on_item_selected=on_selected)
        presenter.initialize(
            DropdownConfig(
                items=projects,
                bind_property="name",
                bind_value="id",
                bind_item={"id": "3"},
            )
        )

        assert presenter.state.selected_item == {"id": "3", "name": "Bookkeeping Tools"}
        assert presenter.state.input_text == "Bookkeeping Tools"
        on_selected.assert_not_called()

    def test_unknown_bind_item_leaves_state_unselected(self, projects):
        presenter = SearchDropdownPresenter()
        presenter.initialize(
            DropdownConfig(items=projects, bind_property="name", bind_value="id", bind_item={"id": "99"})
        )

        assert presenter.state.selected_item is None
        assert presenter.state.input_text == ""

    def test_adopts_currently_selected_item(self, projects):
        presenter = SearchDropdownPresenter()
        presenter.initialize(
            DropdownConfig(items=projects, bind_property="name", currently_selected_item=projects[1])
        )

        assert presenter.state.selected_item == projects[1]
        assert presenter.state.selected_item is not projects[1]
        assert presenter.state.input_text == "Closed Book"

    def test_debounce_defaults_to_configured_value(self, projects):
        presenter = SearchDropdownPresenter()
        presenter.initialize(DropdownConfig(items=projects, bind_property="name"))

        assert presenter.debouncer.delay_ms == 350

    def test_config_before_initialize_raises(self):
        with pytest.raises(ConfigurationError):
            SearchDropdownPresenter().config


class TestPick:
    def test_pick_strips_markers_and_notifies(self, presenter, projects, on_selected):
        highlighted = {"id": "2", "name": f"Cl{mark('os')}ed Book"}

        presenter.pick(highlighted, origin_text="Closed Book")

        expected = {"id": "2", "name": "Closed Book"}
        on_selected.assert_called_once_with(expected)
        assert presenter.state.selected_item == expected
        assert presenter.state.last_selected_item == expected
        assert presenter.state.input_text == "Closed Book"
        assert presenter.state.anchor_text == "Closed Book"
        assert highlighted["name"] == f"Cl{mark('os')}ed Book"

    def test_pick_resets_filtered_items(self, presenter, projects):
        presenter.state.filtered_items = [projects[1]]

        presenter.pick(projects[0])

        assert presenter.state.filtered_items == projects

    def test_same_item_twice_is_noop(self, presenter, projects, on_selected):
        presenter.pick(projects[1])
        state_before = copy.deepcopy(presenter.state)

        presenter.pick({"id": "2", "name": f"{mark('Closed')} Book"})

        on_selected.assert_called_once()
        assert presenter.state == state_before

    def test_new_pick_replaces_selection(self, presenter, projects, on_selected):
        presenter.pick(projects[0])
        presenter.pick(projects[3])

        assert on_selected.call_count == 2
        assert presenter.state.selected_item == projects[3]

    def test_selection_is_a_snapshot(self, presenter, projects):
        presenter.pick(projects[0])
        projects[0]["name"] = "Renamed"

        assert presenter.state.selected_item["name"] == "Open Source"

    def test_subscriber_cannot_mutate_selection(self, presenter, projects):
        presenter.subscribe_selection_changes(lambda item: item.update(name="mutated"))

        presenter.pick(projects[0])

        assert presenter.state.selected_item["name"] == "Open Source"

    def test_unsubscribe(self, presenter, projects):
        callback = Mock()
        unsubscribe = presenter.subscribe_selection_changes(callback)
        unsubscribe()

        presenter.pick(projects[0])

        callback.assert_not_called()

    def test_selected_index(self, presenter, projects):
        assert presenter.selected_index is None

        presenter.pick(projects[2])
        assert presenter.selected_index == 2

        presenter.state.filtered_items = [{"id": "3", "name": f"{mark('Book')}keeping Tools"}]
        assert presenter.selected_index == 0

        presenter.state.filtered_items = [projects[0]]
        assert presenter.selected_index is None


class TestClear:
    def test_clear(self, presenter, projects):
        presenter.pick(projects[1], origin_text="Closed Book")
        presenter.state.filtered_items = []

        presenter.clear()

        assert presenter.state.selected_item is None
        assert presenter.state.input_text == ""
        assert presenter.state.anchor_text is None
        assert presenter.state.filtered_items == projects

    def test_pick_after_clear_notifies_again(self, presenter, projects, on_selected):
        presenter.pick(projects[1])
        presenter.clear()
        presenter.pick(projects[1])

        assert on_selected.call_count == 2


class TestConfigChanged:
    def test_bind_item_selects_silently(self, presenter, on_selected):
        presenter.on_config_changed(bind_item={"name": "Closed Book"})

        assert presenter.state.selected_item == {"id": "2", "name": "Closed Book"}
        assert presenter.state.input_text == "Closed Book"
        on_selected.assert_not_called()

    def test_unknown_bind_item_is_ignored(self, presenter, projects):
        presenter.pick(projects[0])

        presenter.on_config_changed(bind_item={"name": "Nope"})

        assert presenter.state.selected_item == projects[0]

    def test_new_items_reset_filtered_list(self, presenter):
        new_items = [{"id": "9", "name": "Nine"}]

        presenter.on_config_changed(items=new_items)

        assert presenter.state.filtered_items == new_items
        assert presenter.config.items == new_items

    def test_selection_removed_clears_stale_text(self, projects):
        presenter = SearchDropdownPresenter()
        presenter.initialize(
            DropdownConfig(items=projects, bind_property="name", currently_selected_item=projects[0])
        )
        presenter.pick(projects[1])

        presenter.on_config_changed(currently_selected_item=None)

        assert presenter.state.selected_item is None
        assert presenter.state.input_text == ""

    def test_accepts_full_config(self, presenter, projects):
        config = DropdownConfig(items=projects[:2], bind_property="name", debounce_ms=DEBOUNCE_MS)

        presenter.on_config_changed(config)

        assert presenter.config is config
        assert presenter.state.filtered_items == projects[:2]


class TestToggle:
    def test_toggle_open(self, presenter):
        assert presenter.toggle_open() is True
        assert presenter.state.is_open
        assert presenter.toggle_open() is False

    def test_close(self, presenter):
        presenter.toggle_open()
        presenter.close()

        assert not presenter.state.is_open


class TestLocalSearch:
    @pytest.mark.asyncio
    async def test_debounced_filter(self, presenter):
        presenter.on_input("Bo")
        assert presenter.debouncer.pending

        await asyncio.sleep(SETTLE)

        items = presenter.state.filtered_items
        assert names(items) == ["Closed Book", "Bookkeeping Tools"]
        assert items[0]["name"] == f"Closed {mark('Bo')}ok"
        assert presenter.state.last_query == "Bo"

    @pytest.mark.asyncio
    async def test_only_latest_query_applied(self, presenter):
        with_spy = Mock(wraps=presenter._on_debounced)
        presenter.debouncer.on_deliver = with_spy

        presenter.on_input("o")
        presenter.on_input("op")
        presenter.on_input("ope")
        await asyncio.sleep(SETTLE)

        with_spy.assert_called_once_with("ope")
        assert names(presenter.state.filtered_items) == ["Open Source"]

    @pytest.mark.asyncio
    async def test_clearing_input_resets_immediately(self, presenter, projects):
        presenter.on_input("design")
        await asyncio.sleep(SETTLE)
        assert names(presenter.state.filtered_items) == ["Design System"]

        presenter.on_input("")

        assert presenter.state.filtered_items == projects
        assert presenter.state.last_query is None

    @pytest.mark.asyncio
    async def test_clear_before_delivery_cancels_search(self, presenter, projects):
        presenter.on_input("design")
        presenter.on_input("")
        await asyncio.sleep(SETTLE)

        assert presenter.state.filtered_items == projects

    @pytest.mark.asyncio
    async def test_items_change_replays_last_query(self, presenter):
        presenter.on_input("book")
        await asyncio.sleep(SETTLE)

        presenter.on_config_changed(items=[{"id": "7", "name": "Notebook"}, {"id": "8", "name": "Pen"}])

        assert presenter.state.filtered_items == [{"id": "7", "name": f"Note{mark('book')}"}]

    @pytest.mark.asyncio
    async def test_pick_cancels_pending_search(self, presenter, projects):
        presenter.on_input("design")
        presenter.pick(projects[0])
        await asyncio.sleep(SETTLE)

        assert presenter.state.filtered_items == projects

    @pytest.mark.asyncio
    async def test_dispose_cancels_pending_search(self, presenter, projects):
        presenter.on_input("design")
        presenter.dispose()
        await asyncio.sleep(SETTLE)

        assert presenter.state.filtered_items == projects


class TestTypeahead:
    def _presenter(self, projects, typeahead):
        presenter = SearchDropdownPresenter()
        presenter.initialize(
            DropdownConfig(
                items=projects,
                bind_property="name",
                typeahead=typeahead,
                debounce_ms=DEBOUNCE_MS,
            )
        )
        return presenter

    @pytest.mark.asyncio
    async def test_query_forwarded_and_results_displayed(self, projects):
        typeahead = AsyncMock(return_value=[{"id": "5", "name": "Remote Docs"}])
        presenter = self._presenter(projects, typeahead)

        presenter.on_input("Doc")
        await asyncio.sleep(SETTLE)

        typeahead.assert_awaited_once_with("Doc")
        assert presenter.state.filtered_items == [{"id": "5", "name": f"Remote {mark('Doc')}s"}]
        assert presenter.config.items == [{"id": "5", "name": "Remote Docs"}]

    @pytest.mark.asyncio
    async def test_sync_channel(self, projects):
        typeahead = Mock(return_value=[{"id": "5", "name": "Remote Docs"}])
        presenter = self._presenter(projects, typeahead)

        presenter.on_input("rem")
        await asyncio.sleep(SETTLE)

        typeahead.assert_called_once_with("rem")
        assert names(presenter.state.filtered_items) == ["Remote Docs"]

    @pytest.mark.asyncio
    async def test_out_of_band_items_replay_locally(self, projects):
        typeahead = AsyncMock(return_value=None)
        presenter = self._presenter(projects, typeahead)

        presenter.on_input("tool")
        await asyncio.sleep(SETTLE)
        presenter.on_config_changed(items=[{"id": "6", "name": "Toolbox"}, {"id": "7", "name": "Other"}])

        typeahead.assert_awaited_once_with("tool")
        assert presenter.state.filtered_items == [{"id": "6", "name": f"{mark('Tool')}box"}]

    @pytest.mark.asyncio
    async def test_stale_response_discarded(self, projects):
        async def typeahead(query):
            if query == "al":
                await asyncio.sleep(0.15)
                return [{"id": "a", "name": "alpha"}]
            return [{"id": "b", "name": "beta"}]

        presenter = self._presenter(projects, typeahead)

        presenter.on_input("al")
        await asyncio.sleep(0.05)
        presenter.on_input("be")
        await asyncio.sleep(0.3)

        assert names(presenter.state.filtered_items) == ["beta"]
        assert presenter.config.items == [{"id": "b", "name": "beta"}]

    @pytest.mark.asyncio
    async def test_clearing_reverts_to_initial_items(self, projects):
        typeahead = AsyncMock(return_value=[{"id": "5", "name": "Remote Docs"}])
        presenter = self._presenter(projects, typeahead)

        presenter.on_input("doc")
        await asyncio.sleep(SETTLE)
        presenter.on_input("")

        assert presenter.state.filtered_items == projects

    @pytest.mark.asyncio
    async def test_channel_error_keeps_list(self, projects):
        typeahead = AsyncMock(side_effect=RuntimeError("backend down"))
        presenter = self._presenter(projects, typeahead)

        presenter.on_input("doc")
        await asyncio.sleep(SETTLE)

        assert presenter.state.filtered_items == projects
        assert presenter.state.status_text.startswith("Search error")

    @pytest.mark.asyncio
    async def test_results_keep_user_pick_over_bound_item(self, projects, on_selected):
        typeahead = AsyncMock(return_value=copy.deepcopy(projects))
        presenter = SearchDropdownPresenter(on_item_selected=on_selected)
        presenter.initialize(
            DropdownConfig(
                items=projects,
                bind_property="name",
                bind_value="id",
                bind_item={"id": "1", "name": "Open Source"},
                typeahead=typeahead,
                debounce_ms=DEBOUNCE_MS,
            )
        )
        presenter.pick(projects[1])

        presenter.on_input("boo")
        await asyncio.sleep(SETTLE)

        assert presenter.state.selected_item == projects[1]
        assert presenter.state.input_text == "boo"
        assert names(presenter.state.filtered_items) == ["Closed Book", "Bookkeeping Tools"]
        on_selected.assert_called_once_with(projects[1])

    @pytest.mark.asyncio
    async def test_results_after_clear_keep_typed_text(self, projects):
        typeahead = AsyncMock(return_value=copy.deepcopy(projects))
        presenter = self._presenter(projects, typeahead)
        presenter.pick(projects[1])
        presenter.clear()

        presenter.on_input("boo")
        await asyncio.sleep(SETTLE)

        assert presenter.state.selected_item is None
        assert presenter.state.input_text == "boo"
        assert presenter.state.last_query == "boo"
        assert names(presenter.state.filtered_items) == ["Closed Book", "Bookkeeping Tools"]
        assert presenter.state.status_text == "2 of 4 items"
