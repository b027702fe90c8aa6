"""tests/conftest.py

Shared fixtures: explicit ``Settings`` instances so no test depends on
the developer's environment or ``.env`` file.
"""

from __future__ import annotations

import pytest

from helpers import SleepRecorder
from srmguide.config.settings import Settings


@pytest.fixture
def configured_settings() -> Settings:
    return Settings(GEMINI_API_KEY="test-key-abcd", ENV="dev", _env_file=None)


@pytest.fixture
def unconfigured_settings() -> Settings:
    return Settings(GEMINI_API_KEY=None, ENV="dev", _env_file=None)


@pytest.fixture
def sleep_recorder() -> SleepRecorder:
    return SleepRecorder()
