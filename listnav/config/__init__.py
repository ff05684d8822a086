"""Configuration utilities for listnav."""

from .constants import DEFAULT_DEBOUNCE_MS, DEFAULT_WINDOW_SIZE, LISTNAV_CONFIG_DIR
from .ui_config import get_debounce_ms, get_highlight_style, get_window_size

__all__ = [
    "DEFAULT_DEBOUNCE_MS",
    "DEFAULT_WINDOW_SIZE",
    "LISTNAV_CONFIG_DIR",
    "get_debounce_ms",
    "get_highlight_style",
    "get_window_size",
]
