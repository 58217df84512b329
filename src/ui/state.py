"""Centralized UI state management."""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field

from src.memory.story_state import StoryState, TurnPhase

logger = logging.getLogger(__name__)


@dataclass
class AppState:
    """Centralized UI state.

    Holds the current StoryState snapshot plus the few UI-only flags that do
    not belong in the story itself. Every story change goes through
    ``set_story`` so the page can re-render from one place.

    Usage:
        state = AppState()
        state.set_story(services.story.begin_start(state.story, context))
    """

    # ========== Story ==========
    story: StoryState = field(default_factory=StoryState)

    # Reader's working copy of the draft's visual direction
    visual_edit: str = ""

    # ========== UI Preferences ==========
    dark_mode: bool = True
    auto_scroll: bool = True

    # ========== Callbacks ==========
    # Called, in registration order, after every story change
    _listeners: list[Callable[[], None]] = field(default_factory=list)

    @property
    def phase(self) -> TurnPhase:
        """Phase of the current story."""
        return self.story.phase

    @property
    def is_busy(self) -> bool:
        """True while a remote call is outstanding."""
        return self.story.is_generating

    @property
    def can_retry_start(self) -> bool:
        """True after a failed opening: a context is set but no page or draft exists."""
        return self.story.phase is TurnPhase.STEADY and not self.story.pages

    @property
    def scroll_target(self) -> str | None:
        """Anchor the view should scroll to after a change: the draft card or the newest page."""
        if self.story.draft is not None:
            return "draft-review"
        if self.story.pages:
            return self.story.pages[-1].id
        return None

    def set_story(self, story: StoryState) -> None:
        """Replace the story snapshot and trigger the change callback.

        Args:
            story: New story state.
        """
        previous = self.story.phase
        if story.draft is not None and story.draft is not self.story.draft:
            self.visual_edit = story.draft.visual_description
        self.story = story
        if previous is not story.phase:
            logger.debug("Story phase %s -> %s", previous.value, story.phase.value)
        for listener in self._listeners:
            listener()

    def dismiss_error(self) -> None:
        """Clear the error banner."""
        if self.story.error is not None:
            self.set_story(self.story.clear_error())

    def on_story_change(self, callback: Callable[[], None]) -> None:
        """Register a callback fired after every story change."""
        self._listeners.append(callback)
