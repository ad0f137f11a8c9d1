"""
Pytest configuration and shared fixtures for Kinship tests.

Test Categories:
- unit: Fast tests with no external dependencies (< 100ms each)
- integration: Tests that go through the FastAPI app and real SQLite files

Run categories:
- pytest -m unit              # Fast unit tests only
- pytest -m "not integration" # Skip integration tests
- pytest                      # All tests
"""
import pytest

from tests.factories import NOW
from tests.reset_singletons import reset_all_singletons


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "unit: Fast unit tests")
    config.addinivalue_line("markers", "integration: Integration tests (FastAPI app + SQLite)")


@pytest.fixture(autouse=True)
def isolated_data_path(tmp_path, monkeypatch):
    """
    Point every store at a temporary data directory.

    Resets singletons before and after so no test sees another test's
    database.
    """
    from config.settings import settings

    data_path = tmp_path / "data"
    monkeypatch.setattr(settings, "data_path", data_path)
    reset_all_singletons()
    yield data_path
    reset_all_singletons()


@pytest.fixture
def now():
    """Fixed reference time shared with tests.factories."""
    return NOW
