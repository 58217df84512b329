"""Services layer - business logic separated from UI.

This module provides a clean interface between the UI and the Gemini-backed
comic generation plus the turn state machine built on top of it.
"""

import logging
import time
from dataclasses import dataclass

from src.settings import Settings

from .comic_service import ComicClient, ComicService, StorySegment
from .story_service import Err, ErrorKind, Ok, StoryService, TransitionResult

logger = logging.getLogger(__name__)


@dataclass
class ServiceContainer:
    """Dependency injection container for all services.

    Usage:
        settings = Settings.load()
        services = ServiceContainer(settings)

        pending = services.story.begin_start(state, context)
        result = services.story.finish_start(pending)
    """

    settings: Settings
    comic: ComicClient
    story: StoryService

    def __init__(self, settings: Settings | None = None, comic: ComicClient | None = None):
        """Create and wire service instances that share a Settings object.

        Args:
            settings: Application settings. Loaded via Settings.load() if omitted.
            comic: Generative client. Defaults to the Gemini-backed ComicService;
                tests pass a fake here.
        """
        t0 = time.perf_counter()
        logger.info("Initializing ServiceContainer...")
        self.settings = settings or Settings.load()
        self.comic = comic or ComicService(self.settings)
        self.story = StoryService(self.settings, self.comic)
        logger.info(
            "ServiceContainer initialized with %s in %.2fs",
            type(self.comic).__name__,
            time.perf_counter() - t0,
        )


__all__ = [
    "ComicClient",
    "ComicService",
    "Err",
    "ErrorKind",
    "Ok",
    "ServiceContainer",
    "StorySegment",
    "StoryService",
    "TransitionResult",
]
