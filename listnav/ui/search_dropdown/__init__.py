"""
Search dropdown - searchable single-select list.

Provides:
- SearchDropdown: Textual widget
- SearchDropdownPresenter: selection state machine and search pipeline
"""

from .dropdown_presenter import DropdownConfig, DropdownState, SearchDropdownPresenter
from .dropdown_widget import SearchDropdown

__all__ = [
    "DropdownConfig",
    "DropdownState",
    "SearchDropdown",
    "SearchDropdownPresenter",
]
