"""Script review component - the draft card between drafting and rendering."""

import logging
from collections.abc import Awaitable, Callable

from nicegui import ui
from nicegui.elements.textarea import Textarea
from nicegui.events import ValueChangeEventArguments

from src.ui.state import AppState
from src.ui.theme import CAPTION_CLASS, get_busy_label

logger = logging.getLogger(__name__)

APPROVE_LABEL = "Approve & Render Panel"
DRAFT_ANCHOR = "draft-review"


class ScriptReview:
    """Review card for the current draft.

    The narrative is locked; the visual direction is editable and its
    working copy lives in ``AppState.visual_edit`` so it survives re-renders
    and a failed render.
    """

    def __init__(self, state: AppState, on_approve: Callable[[str], Awaitable[None]]):
        """Initialize script review.

        Args:
            state: Application state holding the draft and the edit buffer.
            on_approve: Called with the edited visual direction.
        """
        self.state = state
        self.on_approve = on_approve
        self._textarea: Textarea | None = None

    def build(self) -> ui.element | None:
        """Build the review card. Returns the card, or None when there is no draft."""
        draft = self.state.story.draft
        if draft is None:
            return None

        busy = self.state.is_busy
        with ui.card().classes("w-full border-4 border-dashed border-black p-4").mark(
            DRAFT_ANCHOR
        ) as card:
            ui.label(f"Script for {self.state.story.next_page_id.upper()}").classes(
                "text-sm font-black uppercase"
            )

            ui.label("Narrative (locked)").classes("text-xs text-neutral-500 mt-2")
            ui.label(draft.narrative).classes(CAPTION_CLASS)

            ui.label("Visual Direction").classes("text-xs text-neutral-500 mt-2")
            self._textarea = ui.textarea(
                value=self.state.visual_edit,
                on_change=self._handle_edit,
            ).classes("w-full font-mono").props("autogrow outlined")
            if busy:
                self._textarea.disable()

            with ui.row().classes("w-full gap-2 mt-1"):
                for choice in draft.choices:
                    ui.chip(choice, icon="call_split").props("outline dense")

            button = ui.button(
                get_busy_label(self.state.phase) if busy else APPROVE_LABEL,
                icon="brush",
                on_click=self._handle_approve,
            ).classes("w-full mt-2")
            if busy:
                button.disable()
        return card

    def _handle_edit(self, e: ValueChangeEventArguments) -> None:
        """Keep the edit buffer in sync with the textarea."""
        self.state.visual_edit = e.value or ""

    async def _handle_approve(self) -> None:
        """Send the edited visual direction to the page."""
        text = self.state.visual_edit
        if not text.strip():
            ui.notify("Visual direction cannot be empty", type="warning")
            return
        await self.on_approve(text)
