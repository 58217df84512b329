"""Tests for ServiceContainer initialization."""

import logging
from unittest.mock import patch

from src.services import ComicService, ServiceContainer, StoryService
from src.settings import Settings


class TestServiceContainer:
    """Tests for ServiceContainer class."""

    def test_init_with_provided_settings(self):
        """Provided settings are shared with every service."""
        settings = Settings()
        container = ServiceContainer(settings)

        assert container.settings is settings
        assert isinstance(container.comic, ComicService)
        assert isinstance(container.story, StoryService)
        assert container.story.client is container.comic
        assert container.comic.settings is settings

    def test_init_loads_settings_if_not_provided(self):
        """Settings are loaded when None is passed."""
        with patch("src.services.Settings.load") as mock_load:
            mock_settings = Settings()
            mock_load.return_value = mock_settings

            container = ServiceContainer(None)

            mock_load.assert_called_once()
            assert container.settings is mock_settings

    def test_custom_comic_client(self, fake_comic):
        """A fake client replaces the Gemini-backed one."""
        container = ServiceContainer(Settings(), comic=fake_comic)
        assert container.comic is fake_comic
        assert container.story.client is fake_comic

    def test_init_logs_timing(self, caplog):
        """Initialization is logged at INFO level."""
        with caplog.at_level(logging.INFO, logger="src.services"):
            ServiceContainer(Settings())

        assert any("Initializing ServiceContainer" in r.message for r in caplog.records)
        assert any("ServiceContainer initialized" in r.message for r in caplog.records)
