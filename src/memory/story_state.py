"""Story state - the single value driving the comic's turn lifecycle.

Every model here is frozen. Transitions never mutate a state; they return a
new one built with ``model_copy``, so the UI always renders a consistent
snapshot and the previous value stays usable for error recovery.
"""

from __future__ import annotations

import logging
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from src.utils.exceptions import InvalidTransitionError

logger = logging.getLogger(__name__)

PAGE_ID_PREFIX = "page-"


class TurnPhase(Enum):
    """Where the story is in its turn lifecycle."""

    SETUP = "setup"  # No context yet
    DRAFTING = "drafting"  # Waiting for a script, no draft
    REVIEW = "review"  # Draft waiting for the reader's visual edits
    RENDERING = "rendering"  # Draft approved, waiting for the image
    STEADY = "steady"  # Idle, no draft; choices available once a page exists


class StoryContext(BaseModel):
    """The fixed premise of a session. Set once at setup, read-only afterward."""

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    character_name: str = Field(min_length=1)
    character_description: str = ""
    plot_summary: str = ""
    art_style: str = Field(min_length=1)

    @classmethod
    def default(cls) -> StoryContext:
        """Demo premise used to seed the setup form."""
        return cls(
            character_name="John Constantine",
            character_description=(
                "A cynical, chain-smoking occult detective in a trench coat. Blonde messy hair."
            ),
            plot_summary="Investigating a deal gone wrong with a minor demon in a London pub.",
            art_style="Gritty Noir, high contrast, ink heavy, muted colors with neon accents",
        )


class StoryDraft(BaseModel):
    """A generated panel script waiting for review. Only the visual direction is editable."""

    model_config = ConfigDict(frozen=True)

    narrative: str
    visual_description: str
    choices: tuple[str, str]


class StoryPage(BaseModel):
    """A committed panel.

    ``user_choice`` is the only field that changes after creation: it records
    the option the reader picked on this page, so later prompts can replay it.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    narrative: str
    image_url: str
    choices: tuple[str, str]
    visual_description: str  # The edited direction actually used for the image
    user_choice: str | None = None

    @property
    def number(self) -> int:
        """Sequence number encoded in the page id (page-3 -> 3)."""
        return int(self.id.removeprefix(PAGE_ID_PREFIX))


class StoryState(BaseModel):
    """Complete session state.

    Usage:
        state = StoryState()
        state = state.with_context(context)  # DRAFTING
        state = state.with_draft(draft)  # REVIEW
        state = state.begin_rendering()  # RENDERING
        state = state.commit_page(edited_text, image_url)  # STEADY
    """

    model_config = ConfigDict(frozen=True)

    pages: tuple[StoryPage, ...] = ()
    is_generating: bool = False
    error: str | None = None
    context: StoryContext | None = None
    draft: StoryDraft | None = None

    @property
    def phase(self) -> TurnPhase:
        """Derive the lifecycle phase from context, draft and busy flag."""
        if self.context is None:
            return TurnPhase.SETUP
        if self.draft is None:
            return TurnPhase.DRAFTING if self.is_generating else TurnPhase.STEADY
        return TurnPhase.RENDERING if self.is_generating else TurnPhase.REVIEW

    @property
    def last_page(self) -> StoryPage | None:
        """Most recently committed page, if any."""
        return self.pages[-1] if self.pages else None

    @property
    def current_choices(self) -> tuple[str, ...]:
        """Options offered to the reader right now (empty unless steady with pages)."""
        if self.phase is not TurnPhase.STEADY or not self.pages:
            return ()
        return self.pages[-1].choices

    @property
    def next_page_id(self) -> str:
        """Id the next committed page will receive."""
        return f"{PAGE_ID_PREFIX}{len(self.pages) + 1}"

    # ========== Transitions ==========

    def with_context(self, context: StoryContext) -> StoryState:
        """Record the premise and enter DRAFTING for the opening panel."""
        return self.model_copy(
            update={"context": context, "is_generating": True, "error": None, "draft": None}
        )

    def begin_drafting(self) -> StoryState:
        """Enter DRAFTING: busy, no draft, previous error cleared."""
        return self.model_copy(update={"is_generating": True, "error": None, "draft": None})

    def annotate_last_page(self, choice: str) -> StoryState:
        """Record the reader's choice on the newest page.

        Returns a new pages tuple; every earlier page is carried over unchanged.

        Raises:
            InvalidTransitionError: If there is no page to annotate.
        """
        if not self.pages:
            raise InvalidTransitionError(
                "No page to record a choice on", operation="choose", phase=self.phase.value
            )
        annotated = self.pages[-1].model_copy(update={"user_choice": choice})
        return self.model_copy(update={"pages": (*self.pages[:-1], annotated)})

    def with_draft(self, draft: StoryDraft) -> StoryState:
        """Enter REVIEW with a freshly generated draft."""
        return self.model_copy(update={"draft": draft, "is_generating": False})

    def begin_rendering(self) -> StoryState:
        """Enter RENDERING: busy, draft kept so a failure can fall back to REVIEW."""
        return self.model_copy(update={"is_generating": True, "error": None})

    def commit_page(self, visual_description: str, image_url: str) -> StoryState:
        """Turn the draft into a page and enter STEADY.

        The page keeps the draft's narrative and choices but stores the
        reader's edited visual direction.

        Raises:
            InvalidTransitionError: If there is no draft to commit.
        """
        if self.draft is None:
            raise InvalidTransitionError(
                "No draft to commit", operation="approve", phase=self.phase.value
            )
        page = StoryPage(
            id=self.next_page_id,
            narrative=self.draft.narrative,
            image_url=image_url,
            choices=self.draft.choices,
            visual_description=visual_description,
        )
        logger.debug("Committed %s (%d pages)", page.id, len(self.pages) + 1)
        return self.model_copy(
            update={"pages": (*self.pages, page), "draft": None, "is_generating": False}
        )

    def with_error(self, message: str) -> StoryState:
        """Leave the busy state with a user-facing error. Draft and pages are untouched."""
        return self.model_copy(update={"is_generating": False, "error": message})

    def clear_error(self) -> StoryState:
        """Dismiss the error banner."""
        return self.model_copy(update={"error": None})
