"""Setup form component for entering the story premise."""

import logging
from collections.abc import Awaitable, Callable

from nicegui import ui
from nicegui.elements.input import Input
from nicegui.elements.textarea import Textarea
from pydantic import ValidationError

from src.memory.story_state import StoryContext
from src.ui.state import AppState
from src.ui.theme import get_busy_label

logger = logging.getLogger(__name__)

START_LABEL = "Start Story"


class SetupForm:
    """Premise form shown before the first panel.

    Seeded from StoryContext.default() so a reader can start immediately.

    Usage:
        form = SetupForm(state, on_start=page.start_story)
        form.build()
    """

    def __init__(
        self,
        state: AppState,
        on_start: Callable[[StoryContext], Awaitable[None]],
        initial: StoryContext | None = None,
    ):
        """Initialize setup form.

        Args:
            state: Application state (read for the busy flag).
            on_start: Called with the validated context when Start is clicked.
            initial: Values to seed the fields with.
        """
        self.state = state
        self.on_start = on_start
        self.initial = initial or StoryContext.default()
        self._name_input: Input | None = None
        self._description_input: Textarea | None = None
        self._plot_input: Textarea | None = None
        self._style_input: Input | None = None

    def build(self) -> None:
        """Build the form UI."""
        busy = self.state.is_busy
        with ui.card().classes("w-full max-w-2xl mx-auto border-4 border-black p-6").mark(
            "setup-form"
        ):
            ui.label("Create Your Protagonist").classes("text-xl font-black uppercase")

            self._name_input = ui.input(
                "Protagonist Name", value=self.initial.character_name
            ).classes("w-full")
            self._description_input = ui.textarea(
                "Character Description", value=self.initial.character_description
            ).classes("w-full")
            self._plot_input = ui.textarea(
                "Plot / Premise", value=self.initial.plot_summary
            ).classes("w-full")
            self._style_input = ui.input("Art Style", value=self.initial.art_style).classes(
                "w-full"
            )

            button = ui.button(
                get_busy_label(self.state.phase) if busy else START_LABEL,
                icon="play_arrow",
                on_click=self._handle_start,
            ).classes("w-full mt-2")
            if busy:
                button.disable()

    def read_context(self) -> StoryContext:
        """Build a StoryContext from the current field values.

        Raises:
            ValidationError: If the protagonist name or art style is blank.
        """
        assert self._name_input and self._description_input
        assert self._plot_input and self._style_input
        return StoryContext(
            character_name=self._name_input.value or "",
            character_description=self._description_input.value or "",
            plot_summary=self._plot_input.value or "",
            art_style=self._style_input.value or "",
        )

    async def _handle_start(self) -> None:
        """Validate the form and hand the context to the page."""
        try:
            context = self.read_context()
        except ValidationError as e:
            logger.debug("Setup form rejected: %s", e)
            ui.notify("Protagonist name and art style are required", type="warning")
            return
        await self.on_start(context)
