"""Pytest fixtures for Infinite Comic tests."""

import logging
from pathlib import Path

import pytest

from src.memory.story_state import StoryContext, StoryDraft, StoryState
from src.settings import Settings
from tests.shared.fake_comic import FakeComicClient, make_page

# Enable NiceGUI testing plugin for component tests
pytest_plugins = ["nicegui.testing.user_plugin"]


@pytest.fixture(autouse=True, scope="function")
def cleanup_production_log_handlers():
    """Remove file handlers pointing to the production log after each test.

    Tests that call setup_logging() with the default file would otherwise
    leave handlers writing to logs/infinite_comic.log.
    """
    yield

    root_logger = logging.getLogger()
    production_log_name = "infinite_comic.log"

    handlers_to_remove = []
    for handler in root_logger.handlers:
        if isinstance(handler, logging.FileHandler):
            if hasattr(handler, "baseFilename") and production_log_name in handler.baseFilename:
                handlers_to_remove.append(handler)

    for handler in handlers_to_remove:
        handler.close()
        root_logger.removeHandler(handler)


@pytest.fixture(autouse=True)
def clear_settings_cache_per_test():
    """Clear Settings cache before each test to ensure isolation."""
    Settings.clear_cache()
    yield
    Settings.clear_cache()


@pytest.fixture(autouse=True)
def isolate_settings_file(tmp_path: Path, monkeypatch):
    """Redirect SETTINGS_FILE so no test reads or writes the real src/settings.json."""
    import src.settings._settings as settings_module

    monkeypatch.setattr(settings_module, "SETTINGS_FILE", tmp_path / "settings.json")
    yield tmp_path / "settings.json"


@pytest.fixture
def api_key(monkeypatch) -> str:
    """Provide a Gemini API key in the environment."""
    monkeypatch.setenv("GEMINI_API_KEY", "test-key")
    monkeypatch.delenv("GOOGLE_API_KEY", raising=False)
    return "test-key"


@pytest.fixture
def no_api_key(monkeypatch) -> None:
    """Remove every Gemini API key variable from the environment."""
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)
    monkeypatch.delenv("GOOGLE_API_KEY", raising=False)


@pytest.fixture
def tmp_settings() -> Settings:
    """Create default settings without loading from disk."""
    settings = Settings()
    settings.validate()
    return settings


@pytest.fixture
def fake_comic() -> FakeComicClient:
    """Fresh FakeComicClient per test."""
    return FakeComicClient()


@pytest.fixture
def story_context() -> StoryContext:
    """A small valid premise."""
    return StoryContext(
        character_name="Rex",
        character_description="A tired detective",
        plot_summary="A missing cat",
        art_style="Noir",
    )


@pytest.fixture
def sample_draft() -> StoryDraft:
    """A draft waiting for review."""
    return StoryDraft(
        narrative="The rain never stops.",
        visual_description="Close-up: Rex lights a cigarette",
        choices=("Follow the stranger", "Go home"),
    )


@pytest.fixture
def steady_state(story_context: StoryContext) -> StoryState:
    """A steady story with two committed pages, the first annotated."""
    return StoryState(
        pages=(make_page(1, user_choice="Option 1A"), make_page(2)),
        context=story_context,
    )
