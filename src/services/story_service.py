"""Story service - runs the comic's turn lifecycle.

Every user action is split in two steps so the UI can show the busy state
while the remote call runs off the event loop:

- ``begin_*`` is cheap and pure: it checks the phase and returns the busy state.
- ``finish_*`` issues the single remote call and returns a TransitionResult.

``start``/``choose``/``approve`` chain both steps for callers that do not
need the intermediate state.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import TypeAlias

from src.memory.story_state import StoryContext, StoryDraft, StoryState, TurnPhase
from src.services.comic_service import ComicClient, StorySegment
from src.settings import Settings
from src.utils.exceptions import (
    ConfigError,
    GenerationError,
    InvalidTransitionError,
    RenderError,
    TurnInProgressError,
    summarize_llm_error,
)
from src.utils.logging_config import log_context, log_performance
from src.utils.validation import validate_not_empty, validate_not_none

logger = logging.getLogger(__name__)

OPENING_INSTRUCTION = "Begin the story. Establish the scene and character."

START_FAILED_MESSAGE = "Failed to initialize the story script. Please try again."
CHOOSE_FAILED_MESSAGE = "The connection to the ether was severed. Try again."
APPROVE_FAILED_MESSAGE = "Failed to ink the page. The artist is on strike."


class ErrorKind(Enum):
    """Why a transition failed."""

    GENERATION = "generation"  # Script request failed
    RENDER = "render"  # Image request failed
    CONFIGURATION = "configuration"  # API key missing


@dataclass(frozen=True)
class Ok:
    """Transition succeeded; ``state`` is the new story state."""

    state: StoryState


@dataclass(frozen=True)
class Err:
    """Transition failed; ``state`` is the recovered state with its error set."""

    state: StoryState
    kind: ErrorKind
    message: str


TransitionResult: TypeAlias = Ok | Err


class StoryService:
    """Turn state machine over a ComicClient.

    Usage:
        story = StoryService(settings, comic)
        result = story.start(StoryState(), context)
        if isinstance(result, Ok):
            result = story.approve(result.state, edited_visual_description)
    """

    def __init__(self, settings: Settings, client: ComicClient):
        """Initialize story service.

        Args:
            settings: Application settings.
            client: Generative client issuing the script and image requests.
        """
        self.settings = validate_not_none(settings, "settings")
        self.client = validate_not_none(client, "client")
        logger.debug("StoryService initialized with %s", type(client).__name__)

    # ========== Guards ==========

    def _require(self, state: StoryState, operation: str, *phases: TurnPhase) -> None:
        """Reject an operation while busy or from a phase it is not valid in.

        Raises:
            TurnInProgressError: If a remote call is outstanding.
            InvalidTransitionError: If the state is not in one of ``phases``.
        """
        if state.is_generating:
            raise TurnInProgressError(
                f"Cannot {operation} while another turn is in progress",
                operation=operation,
                phase=state.phase.value,
            )
        if state.phase not in phases:
            expected = ", ".join(p.value for p in phases)
            raise InvalidTransitionError(
                f"Cannot {operation} from phase '{state.phase.value}' (expected {expected})",
                operation=operation,
                phase=state.phase.value,
            )

    def _require_pending(self, pending: StoryState, operation: str, phase: TurnPhase) -> None:
        """Check that ``pending`` is the busy state produced by the matching begin step."""
        if pending.phase is not phase:
            raise InvalidTransitionError(
                f"Cannot finish {operation} from phase '{pending.phase.value}' "
                f"(expected {phase.value})",
                operation=operation,
                phase=pending.phase.value,
            )

    def _fail(
        self,
        pending: StoryState,
        kind: ErrorKind,
        message: str,
        error: Exception,
        operation: str,
    ) -> Err:
        """Log a failed turn and convert it into an Err carrying the recovered state."""
        logger.error(
            "Turn '%s' failed (%s): %s",
            operation,
            kind.value,
            summarize_llm_error(error),
        )
        return Err(state=pending.with_error(message), kind=kind, message=message)

    # ========== Script generation ==========

    def _draft_next(
        self, pending: StoryState, instruction: str, failure_message: str, operation: str
    ) -> TransitionResult:
        """Request the next panel script and move DRAFTING -> REVIEW."""
        self._require_pending(pending, operation, TurnPhase.DRAFTING)
        context = pending.context
        assert context is not None  # DRAFTING implies a context

        with log_context(f"turn-{operation}-{pending.next_page_id}"):
            try:
                with log_performance(logger, f"{operation}: script for {pending.next_page_id}"):
                    segment = self.client.generate_segment(pending.pages, instruction, context)
                draft = self._to_draft(segment)
            except ConfigError as e:
                return self._fail(pending, ErrorKind.CONFIGURATION, str(e), e, operation)
            except GenerationError as e:
                return self._fail(pending, ErrorKind.GENERATION, failure_message, e, operation)
            except Exception as e:
                logger.exception("Unexpected failure while drafting %s", pending.next_page_id)
                return self._fail(pending, ErrorKind.GENERATION, failure_message, e, operation)

            logger.info("Draft ready for %s: choices=%s", pending.next_page_id, draft.choices)
            return Ok(pending.with_draft(draft))

    @staticmethod
    def _to_draft(segment: StorySegment) -> StoryDraft:
        """Convert the wire-format segment into a draft (validates exactly two choices)."""
        return StoryDraft(
            narrative=segment.narrative,
            visual_description=segment.visual_description,
            choices=tuple(segment.choices),
        )

    # ========== start ==========

    def begin_start(self, state: StoryState, context: StoryContext) -> StoryState:
        """Record the premise and enter DRAFTING. Valid only from SETUP.

        Raises:
            TurnInProgressError: If a remote call is outstanding.
            InvalidTransitionError: If a story has already started.
        """
        validate_not_none(context, "context")
        self._require(state, "start", TurnPhase.SETUP)
        logger.info("Starting story for protagonist '%s'", context.character_name)
        return state.with_context(context)

    def finish_start(self, pending: StoryState) -> TransitionResult:
        """Request the opening panel script with an empty history."""
        return self._draft_next(pending, OPENING_INSTRUCTION, START_FAILED_MESSAGE, "start")

    def start(self, state: StoryState, context: StoryContext) -> TransitionResult:
        """Begin the story and draft the opening panel."""
        return self.finish_start(self.begin_start(state, context))

    # ========== retry_start ==========

    def begin_retry_start(self, state: StoryState) -> StoryState:
        """Re-enter DRAFTING after a failed opening. Valid from STEADY with no pages.

        Raises:
            TurnInProgressError: If a remote call is outstanding.
            InvalidTransitionError: If the story already has pages or a draft.
        """
        self._require(state, "retry start", TurnPhase.STEADY)
        if state.pages:
            raise InvalidTransitionError(
                "Cannot retry the opening once pages exist",
                operation="retry start",
                phase=state.phase.value,
            )
        return state.begin_drafting()

    def retry_start(self, state: StoryState) -> TransitionResult:
        """Re-issue the opening script request with the recorded context."""
        return self.finish_start(self.begin_retry_start(state))

    # ========== choose ==========

    def begin_choose(self, state: StoryState, choice: str) -> StoryState:
        """Stamp the choice on the newest page and enter DRAFTING.

        Valid only from STEADY with at least one page. The stamp survives a
        failed request so the history stays truthful.

        Raises:
            TurnInProgressError: If a remote call is outstanding.
            InvalidTransitionError: If not steady or there are no pages yet.
            ValueError: If ``choice`` is empty.
        """
        validate_not_empty(choice, "choice")
        self._require(state, "choose", TurnPhase.STEADY)
        if not state.pages:
            raise InvalidTransitionError(
                "Cannot choose before the first page exists",
                operation="choose",
                phase=state.phase.value,
            )
        logger.info("Reader chose '%s' on %s", choice, state.pages[-1].id)
        return state.annotate_last_page(choice).begin_drafting()

    def finish_choose(self, pending: StoryState, choice: str) -> TransitionResult:
        """Request the next panel script, driven by the chosen option."""
        return self._draft_next(pending, choice, CHOOSE_FAILED_MESSAGE, "choose")

    def choose(self, state: StoryState, choice: str) -> TransitionResult:
        """Record a choice and draft the panel it leads to."""
        return self.finish_choose(self.begin_choose(state, choice), choice)

    # ========== approve ==========

    def begin_approve(self, state: StoryState, visual_description: str) -> StoryState:
        """Enter RENDERING. Valid only from REVIEW.

        Raises:
            TurnInProgressError: If a remote call is outstanding.
            InvalidTransitionError: If there is no draft under review.
            ValueError: If the edited visual description is empty.
        """
        validate_not_empty(visual_description, "visual_description")
        self._require(state, "approve", TurnPhase.REVIEW)
        return state.begin_rendering()

    def finish_approve(self, pending: StoryState, visual_description: str) -> TransitionResult:
        """Render the edited visual direction and commit the page.

        A transport failure keeps the draft so the reader can re-approve.
        """
        operation = "approve"
        self._require_pending(pending, operation, TurnPhase.RENDERING)
        context = pending.context
        assert context is not None  # RENDERING implies a context

        with log_context(f"turn-{operation}-{pending.next_page_id}"):
            edited = pending.draft is not None and (
                pending.draft.visual_description != visual_description
            )
            logger.info("Rendering %s (visual direction edited=%s)", pending.next_page_id, edited)
            try:
                with log_performance(logger, f"{operation}: image for {pending.next_page_id}"):
                    image_url = self.client.generate_image(visual_description, context.art_style)
            except ConfigError as e:
                return self._fail(pending, ErrorKind.CONFIGURATION, str(e), e, operation)
            except RenderError as e:
                return self._fail(pending, ErrorKind.RENDER, APPROVE_FAILED_MESSAGE, e, operation)
            except Exception as e:
                logger.exception("Unexpected failure while rendering %s", pending.next_page_id)
                return self._fail(pending, ErrorKind.RENDER, APPROVE_FAILED_MESSAGE, e, operation)

            return Ok(pending.commit_page(visual_description, image_url))

    def approve(self, state: StoryState, visual_description: str) -> TransitionResult:
        """Approve the draft with the reader's visual direction and render the panel."""
        return self.finish_approve(self.begin_approve(state, visual_description), visual_description)
