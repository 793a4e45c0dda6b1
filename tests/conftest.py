# tests/conftest.py
from pathlib import Path
import pytest

from jsontree.config import Settings
from jsontree.di import Container, build_container


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(DATA_ROOT=tmp_path / "data", HTTP_BEARER_TOKEN="test-token", LOCK_TIMEOUT_SEC=5.0)


@pytest.fixture
def container(settings: Settings) -> Container:
    return build_container(settings)


@pytest.fixture
def root(container: Container) -> Path:
    return container.resolver.root
