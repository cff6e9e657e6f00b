from pathlib import Path

import pytest

from backend.src.services.config import AppConfig
from backend.src.services.container import Services, build_services


class FakeClock:
    """Manually advanced epoch-ms clock."""

    def __init__(self, start: int = 1_700_000_000_000):
        self.now = start

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int) -> int:
        self.now += ms
        return self.now


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def app_config(tmp_path: Path) -> AppConfig:
    return AppConfig(database_path=tmp_path / "notes.db")


@pytest.fixture
def services(app_config: AppConfig, clock: FakeClock) -> Services:
    built = build_services(app_config, clock=clock)
    yield built
    built.close()
