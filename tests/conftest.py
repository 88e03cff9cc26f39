"""Shared pytest fixtures for validation response test suites."""

from collections.abc import Generator
from pathlib import Path
import sys

import pytest
from fastapi.testclient import TestClient

PROJECT_ROOT = Path(__file__).resolve().parents[1]
FIXTURES_DIR = Path(__file__).resolve().parent / "fixtures"
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))


@pytest.fixture(autouse=True)
def _clear_settings_cache() -> Generator[None, None, None]:
    """Reload environment-backed settings for every test."""
    from validation_response.core.config import get_settings

    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def fixture_models(monkeypatch: pytest.MonkeyPatch) -> str:
    """Make the sample model module importable and return its name."""
    monkeypatch.syspath_prepend(str(FIXTURES_DIR))
    return "sample_dtos"


@pytest.fixture
def client() -> Generator[TestClient, None, None]:
    """Provide an API test client for the default application."""
    from validation_response.main import create_app

    with TestClient(create_app()) as test_client:
        yield test_client
