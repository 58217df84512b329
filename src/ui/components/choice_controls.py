"""Choice controls component - the two lettered options under the newest page."""

from collections.abc import Awaitable, Callable

from nicegui import ui

from src.ui.state import AppState
from src.ui.theme import CHOICES_BUSY_LABEL, choice_label


class ChoiceControls:
    """A/B choice buttons, replaced by a waiting label while a turn runs."""

    def __init__(self, state: AppState, on_choose: Callable[[str], Awaitable[None]]):
        """Initialize choice controls.

        Args:
            state: Application state.
            on_choose: Called with the chosen option's text.
        """
        self.state = state
        self.on_choose = on_choose

    def build(self) -> None:
        """Build the controls. Nothing is rendered unless choices are on offer or a turn is drafting."""
        story = self.state.story
        if self.state.is_busy and story.pages and story.draft is None:
            with ui.row().classes("w-full justify-center items-center gap-2 py-4"):
                ui.spinner(size="md")
                ui.label(CHOICES_BUSY_LABEL).classes("font-bold uppercase")
            return

        choices = story.current_choices
        if not choices:
            return

        with ui.column().classes("w-full gap-2").mark("choices"):
            ui.label("What happens next?").classes("text-sm font-black uppercase")
            for index, choice in enumerate(choices):
                ui.button(
                    choice_label(index, choice),
                    on_click=lambda c=choice: self.on_choose(c),
                ).classes("w-full text-left").props("outline no-caps")
