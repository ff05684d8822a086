"""Logging setup for the listnav TUI.

Most modules use the standard pattern:

    import logging
    logger = logging.getLogger(__name__)

The TUI calls `setup_tui_logging()` once at startup so log output never
lands on the terminal the widgets are drawing on.

Paths are built inline instead of importing LISTNAV_CONFIG_DIR so logging
can be configured before the config package is imported.
"""

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

# Max log file size: 5MB, keep 2 backups
_MAX_LOG_BYTES = 5 * 1024 * 1024
_BACKUP_COUNT = 2

_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def _log_dir() -> Path:
    log_dir = Path.home() / ".config" / "listnav"
    log_dir.mkdir(parents=True, exist_ok=True)
    return log_dir


def setup_tui_logging(module_name: str, level: int = logging.INFO) -> logging.Logger:
    """
    Set up logging for the TUI.

    The root logger is set to WARNING to avoid noise from third-party libs
    and writes to ~/.config/listnav/tui_debug.log. listnav's own loggers
    (listnav.*) are set to `level`.

    Returns:
        The logger for `module_name`.
    """
    try:
        if not logging.getLogger().handlers:
            handler = RotatingFileHandler(
                _log_dir() / "tui_debug.log", maxBytes=_MAX_LOG_BYTES, backupCount=_BACKUP_COUNT
            )
            handler.setFormatter(logging.Formatter(_FORMAT))
            logging.basicConfig(level=logging.WARNING, handlers=[handler])

        logging.getLogger("listnav").setLevel(level)

    except Exception as e:
        # We can't log this failure since logging is what's failing
        import sys
        print(f"Warning: TUI logging setup failed: {e}", file=sys.stderr)

    return logging.getLogger(module_name)
