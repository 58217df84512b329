"""Comic page - the single page running the whole story."""

import logging
from collections.abc import Callable
from typing import Literal

from nicegui import Client, context, run, ui

from src.memory.story_state import StoryContext, StoryState
from src.services import Err, ServiceContainer, TransitionResult
from src.ui.components.choice_controls import ChoiceControls
from src.ui.components.comic_panel import ComicPanel
from src.ui.components.generation_status import GenerationStatus
from src.ui.components.script_review import ScriptReview
from src.ui.components.setup_form import SetupForm
from src.ui.state import AppState
from src.utils.exceptions import StateTransitionError

logger = logging.getLogger(__name__)

UNEXPECTED_FAILURE_MESSAGE = "Something went wrong. Please try again."


class ComicPage:
    """Renders the story as a pure function of AppState.story.

    Every reader action follows the same shape:
    1. ``begin_*`` on the story service, applied immediately so the busy state shows.
    2. ``finish_*`` in a worker thread via ``run.io_bound``.
    3. The resulting Ok or Err state replaces the current one.
    """

    def __init__(self, state: AppState, services: ServiceContainer):
        """Initialize comic page.

        Args:
            state: Application state holding the story.
            services: Service container with the story service.
        """
        self.state = state
        self.services = services
        self._client: Client | None = None  # For background task safety
        self._anchors: dict[str, ui.element] = {}

    def _notify(
        self,
        message: str,
        type: Literal["positive", "negative", "warning", "info", "ongoing"] = "info",
    ) -> None:
        """Show a notification, falling back to logging when no client is available."""
        if self._client:
            with self._client:
                ui.notify(message, type=type)
        else:
            try:
                ui.notify(message, type=type)
            except RuntimeError:
                logger.warning("Could not show notification: %s", message)

    def build(self) -> None:
        """Build the comic page UI."""
        # Capture client for background task safety
        try:
            self._client = context.client
        except RuntimeError:
            logger.warning("Could not capture client context during build")

        self.state.on_story_change(self._refresh)
        with ui.column().classes("w-full max-w-3xl mx-auto gap-6 p-4"):
            self._render()

    @ui.refreshable
    def _render(self) -> None:
        """Rebuild everything below the header from the current story."""
        self._anchors = {}
        story = self.state.story

        GenerationStatus(self.state, on_retry=self.retry_start).build()

        if story.context is None:
            SetupForm(self.state, on_start=self.start_story).build()
            return

        for page in story.pages:
            is_latest = page is story.last_page
            self._anchors[page.id] = ComicPanel(page, is_latest=is_latest).build()

        card = ScriptReview(self.state, on_approve=self.approve_draft).build()
        if card is not None:
            self._anchors["draft-review"] = card

        ChoiceControls(self.state, on_choose=self.choose).build()

    def _refresh(self) -> None:
        """Re-render after a story change and bring the newest content into view."""
        if self._client:
            with self._client:
                self._render.refresh()
                self._scroll_to_latest()
        else:
            self._render.refresh()

    def _scroll_to_latest(self) -> None:
        """Scroll the draft card or the newest panel into view."""
        target = self.state.scroll_target
        if not self.state.auto_scroll or target is None:
            return
        element = self._anchors.get(target)
        if element is None:
            return
        ui.run_javascript(
            f"getHtmlElement({element.id})?.scrollIntoView({{behavior: 'smooth', block: 'start'}})"
        )

    # ========== Reader actions ==========

    async def _run_turn(
        self,
        operation: str,
        begin: Callable[[], StoryState],
        finish: Callable[[StoryState], TransitionResult],
    ) -> TransitionResult | None:
        """Apply the busy state, run the remote step off the event loop, apply the result.

        Returns:
            The transition result, or None when the action was rejected up front.
        """
        if self.state.is_busy:
            self._notify("Generation already in progress", type="warning")
            return None

        try:
            pending = begin()
        except (StateTransitionError, ValueError) as e:
            logger.warning("Rejected %s: %s", operation, e)
            self._notify(str(e), type="warning")
            return None

        self.state.set_story(pending)
        try:
            result = await run.io_bound(finish, pending)
        except Exception:
            logger.exception("Turn '%s' crashed outside the story service", operation)
            self.state.set_story(pending.with_error(UNEXPECTED_FAILURE_MESSAGE))
            self._notify(UNEXPECTED_FAILURE_MESSAGE, type="negative")
            return None

        self.state.set_story(result.state)
        if isinstance(result, Err):
            self._notify(result.message, type="negative")
        return result

    async def start_story(self, story_context: StoryContext) -> None:
        """Record the premise and draft the opening panel."""
        story = self.services.story
        await self._run_turn(
            "start",
            lambda: story.begin_start(self.state.story, story_context),
            story.finish_start,
        )

    async def retry_start(self) -> None:
        """Re-issue the opening script request after a failure."""
        story = self.services.story
        await self._run_turn(
            "retry start",
            lambda: story.begin_retry_start(self.state.story),
            story.finish_start,
        )

    async def choose(self, choice: str) -> None:
        """Record the reader's choice and draft the next panel."""
        story = self.services.story
        await self._run_turn(
            "choose",
            lambda: story.begin_choose(self.state.story, choice),
            lambda pending: story.finish_choose(pending, choice),
        )

    async def approve_draft(self, visual_description: str) -> None:
        """Render the draft with the reader's visual direction."""
        story = self.services.story
        result = await self._run_turn(
            "approve",
            lambda: story.begin_approve(self.state.story, visual_description),
            lambda pending: story.finish_approve(pending, visual_description),
        )
        if result is not None and not isinstance(result, Err):
            last_page = self.state.story.last_page
            if last_page is not None:
                self._notify(f"Page {last_page.number} inked", type="positive")
