"""
Pytest configuration and fixtures for SRTM toolkit tests.
"""
import pytest

from srtm.config import get_settings
from srtm.services.recommendation import engine as engine_module


@pytest.fixture(autouse=True)
def fresh_settings(monkeypatch):
    """Drop cached settings and the default engine around every test"""
    get_settings.cache_clear()
    monkeypatch.setattr(engine_module, "_default_engine", None)

    yield

    get_settings.cache_clear()
