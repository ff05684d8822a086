"""
listnav UI configuration.

Handles persistence of widget preferences (debounce period, paginator
window, highlight style). Config is stored in ~/.config/listnav/ui_config.json
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from . import constants
from .settings import get_env_var

logger = logging.getLogger(__name__)

DEFAULT_CONFIG: dict[str, Any] = {
    "debounce_ms": constants.DEFAULT_DEBOUNCE_MS,
    "window_size": constants.DEFAULT_WINDOW_SIZE,
    "highlight_style": constants.DEFAULT_HIGHLIGHT_STYLE,
}


def get_ui_config_path() -> Path:
    """
    Get path to UI config file.

    Returns:
        Path to ~/.config/listnav/ui_config.json
    """
    constants.LISTNAV_CONFIG_DIR.mkdir(parents=True, exist_ok=True)
    return constants.LISTNAV_CONFIG_DIR / "ui_config.json"


def load_ui_config() -> dict[str, Any]:
    """
    Load UI configuration from file.

    Returns:
        Config dict, or defaults if file doesn't exist or is invalid
    """
    path = get_ui_config_path()
    if path.exists():
        try:
            config = json.loads(path.read_text())
            if not isinstance(config, dict):
                return DEFAULT_CONFIG.copy()
            # Merge with defaults to handle missing keys
            return {**DEFAULT_CONFIG, **config}
        except (json.JSONDecodeError, OSError):
            return DEFAULT_CONFIG.copy()
    return DEFAULT_CONFIG.copy()


def save_ui_config(config: dict[str, Any]) -> None:
    """
    Save UI configuration to file.

    Args:
        config: Configuration dict to save
    """
    path = get_ui_config_path()
    try:
        path.write_text(json.dumps(config, indent=2) + "\n")
    except OSError:
        # Silently fail - config is non-critical
        pass


def _positive_int(raw: Any, fallback: int, *, allow_zero: bool = False) -> int:
    try:
        value = int(raw)
    except (TypeError, ValueError):
        return fallback
    if value < 0 or (value == 0 and not allow_zero):
        return fallback
    return value


def get_debounce_ms() -> int:
    """Debounce period in ms: LISTNAV_DEBOUNCE_MS, then the config file, then the default."""
    env_value = get_env_var("LISTNAV_DEBOUNCE_MS")
    if env_value is not None:
        value = _positive_int(env_value, -1, allow_zero=True)
        if value >= 0:
            return value
        logger.warning(f"Ignoring invalid LISTNAV_DEBOUNCE_MS={env_value!r}")

    return _positive_int(
        load_ui_config().get("debounce_ms"),
        constants.DEFAULT_DEBOUNCE_MS,
        allow_zero=True,
    )


def get_window_size() -> int:
    """Number of page buttons the paginator shows."""
    env_value = get_env_var("LISTNAV_WINDOW_SIZE")
    if env_value is not None:
        value = _positive_int(env_value, 0)
        if value:
            return value
        logger.warning(f"Ignoring invalid LISTNAV_WINDOW_SIZE={env_value!r}")

    return _positive_int(load_ui_config().get("window_size"), constants.DEFAULT_WINDOW_SIZE)


def get_highlight_style() -> str:
    """Rich style string used for highlighted matches."""
    style = load_ui_config().get("highlight_style")
    if isinstance(style, str) and style.strip():
        return style
    return constants.DEFAULT_HIGHLIGHT_STYLE


def set_debounce_ms(debounce_ms: int) -> None:
    """Persist the debounce period."""
    config = load_ui_config()
    config["debounce_ms"] = debounce_ms
    save_ui_config(config)
