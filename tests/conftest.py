"""Shared pytest fixtures for listnav tests."""

import os
from unittest.mock import patch

import pytest

_ENV_VARS = ("LISTNAV_DEBOUNCE_MS", "LISTNAV_WINDOW_SIZE", "LISTNAV_LOG_LEVEL")


@pytest.fixture(autouse=True)
def isolated_config(tmp_path):
    """Point the config directory at a temp dir and clear listnav env vars."""
    config_dir = tmp_path / "listnav-config"
    env = {k: v for k, v in os.environ.items() if k not in _ENV_VARS}
    with patch("listnav.config.constants.LISTNAV_CONFIG_DIR", config_dir), patch.dict(
        os.environ, env, clear=True
    ):
        yield config_dir


@pytest.fixture
def projects():
    """Sample dropdown items."""
    return [
        {"id": "1", "name": "Open Source"},
        {"id": "2", "name": "Closed Book"},
        {"id": "3", "name": "Bookkeeping Tools"},
        {"id": "4", "name": "Design System"},
    ]
