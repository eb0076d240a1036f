from pathlib import Path
from typing import Generator

import pytest

from config import config
from tests.helpers.stub_clients import SleepRecorder


@pytest.fixture(autouse=True)
def _isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    # Keep a developer's .env out of the settings under test.
    monkeypatch.chdir(tmp_path)
    config.cache_clear()
    yield
    config.cache_clear()


@pytest.fixture(scope="function")
def sleep_recorder() -> SleepRecorder:
    return SleepRecorder()
