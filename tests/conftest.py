from __future__ import annotations

import os

import pytest

from image_paste.settings import reset_settings_cache

_PREFIX = "IMAGE_PASTE_"


@pytest.fixture(autouse=True)
def _isolated_settings(monkeypatch):
    """Run every test without IMAGE_PASTE_* variables or cached settings."""

    for key in [name for name in os.environ if name.startswith(_PREFIX)]:
        monkeypatch.delenv(key)
    reset_settings_cache()
    yield
    # load_dotenv writes to os.environ directly, outside monkeypatch's records.
    for key in [name for name in os.environ if name.startswith(_PREFIX)]:
        del os.environ[key]
    reset_settings_cache()
