"""Pytest configuration for NiceGUI component tests.

These tests use NiceGUI's User fixture for fast, lightweight testing
of UI components without requiring a browser.

Note: The pytest_plugins for NiceGUI is registered in the root conftest.py.
"""

import pytest

from src.services import ServiceContainer
from src.settings import Settings
from src.ui.state import AppState


@pytest.fixture
def test_settings() -> Settings:
    """Default settings with auto-scroll off (no browser to scroll in)."""
    return Settings(auto_scroll=False)


@pytest.fixture
def test_services(test_settings, fake_comic) -> ServiceContainer:
    """Service container driven by the in-memory fake client."""
    return ServiceContainer(test_settings, comic=fake_comic)


@pytest.fixture
def test_app_state() -> AppState:
    """Fresh per-page state with auto-scroll off."""
    return AppState(auto_scroll=False)
