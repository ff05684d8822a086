"""
Centralized constants for listnav.

Tunable values live here so that widgets, presenters and the CLI all read
the same numbers instead of carrying their own literals.
"""

from pathlib import Path

# =============================================================================
# PATHS
# =============================================================================

LISTNAV_CONFIG_DIR = Path.home() / ".config" / "listnav"

# =============================================================================
# SEARCH DROPDOWN
# =============================================================================

# Quiet period before a typed query is delivered (milliseconds)
DEFAULT_DEBOUNCE_MS = 350

DEFAULT_LABEL = "Project"

# Marker pair wrapped around matched substrings
HIGHLIGHT_START = "<mark>"
HIGHLIGHT_END = "</mark>"

# Rich style used when rendering highlighted segments
DEFAULT_HIGHLIGHT_STYLE = "bold black on yellow"

# =============================================================================
# PAGINATOR
# =============================================================================

DEFAULT_WINDOW_SIZE = 4  # Max page buttons visible at once
DEFAULT_CURRENT_PAGE = 0

# =============================================================================
# ENVIRONMENT VARIABLES
# =============================================================================

ENV_VAR_DEFINITIONS = {
    "LISTNAV_DEBOUNCE_MS": {
        "description": "Quiet period in milliseconds before a search query is delivered",
        "default": None,
        "valid_values": None,
    },
    "LISTNAV_WINDOW_SIZE": {
        "description": "Number of page buttons shown by the paginator",
        "default": None,
        "valid_values": None,
    },
    "LISTNAV_LOG_LEVEL": {
        "description": "Log level for listnav loggers",
        "default": "INFO",
        "valid_values": ["DEBUG", "INFO", "WARNING", "ERROR"],
    },
}
