"""Tests for listnav logging helpers."""

import logging
from logging.handlers import RotatingFileHandler
from unittest.mock import patch

from listnav.utils.logging_utils import setup_tui_logging


def test_setup_tui_logging_sets_levels(tmp_path):
    with patch("pathlib.Path.home", return_value=tmp_path):
        logger = setup_tui_logging("listnav.tests.tui", level=logging.DEBUG)

    try:
        assert logger.name == "listnav.tests.tui"
        assert logging.getLogger("listnav").level == logging.DEBUG
        assert logger.isEnabledFor(logging.DEBUG)
    finally:
        logging.getLogger("listnav").setLevel(logging.NOTSET)


def test_setup_tui_logging_writes_to_file_without_root_handlers(tmp_path):
    root = logging.getLogger()
    saved_handlers, saved_level = root.handlers[:], root.level
    root.handlers = []

    try:
        with patch("pathlib.Path.home", return_value=tmp_path):
            setup_tui_logging("listnav.tests.tui")

        handlers = [h for h in root.handlers if isinstance(h, RotatingFileHandler)]
        assert len(handlers) == 1
        assert handlers[0].baseFilename == str(tmp_path / ".config" / "listnav" / "tui_debug.log")
        assert root.level == logging.WARNING
    finally:
        for handler in root.handlers:
            handler.close()
        root.handlers = saved_handlers
        root.setLevel(saved_level)
        logging.getLogger("listnav").setLevel(logging.NOTSET)
