from __future__ import annotations

import pytest
from payloads import NOW

from thirtytoday.config import Settings
from thirtytoday.dates import ArchiveWindow


class RecordingSleep:
    def __init__(self) -> None:
        self.delays: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)


@pytest.fixture
def sleep() -> RecordingSleep:
    return RecordingSleep()


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        guardian_api_key="guardian-key",
        nytimes_api_key="nytimes-key",
        meteostat_api_key="meteostat-key",
        request_delay=6.0,
        data_path=tmp_path / "data.json",
    )


@pytest.fixture
def window() -> ArchiveWindow:
    return ArchiveWindow.around(NOW)
