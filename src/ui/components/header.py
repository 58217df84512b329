"""Header component with the comic's title and page count."""

import logging

from nicegui import ui
from nicegui.elements.label import Label

from src.ui.state import AppState

logger = logging.getLogger(__name__)

TITLE = "NOIR NARRATIVES"
SUBTITLE = "Infinite Comic Generator"


class Header:
    """Application header with title, subtitle and page counter."""

    def __init__(self, state: AppState):
        """Initialize header."""
        self.state = state
        self._count_label: Label | None = None

    def build(self) -> None:
        """Build the header UI."""
        with ui.header().classes("items-center border-b-4 border-black").style(
            "background-color: #0a0a0a"
        ):
            with ui.row().classes("w-full items-center gap-3 px-4 py-2"):
                ui.icon("auto_stories", size="lg").classes("text-yellow-400")
                with ui.column().classes("gap-0"):
                    ui.label(TITLE).classes("text-2xl font-black tracking-widest text-white")
                    ui.label(SUBTITLE).classes("text-xs uppercase text-neutral-400")

                ui.space()

                self._count_label = ui.label().classes("text-sm text-neutral-400")
                self.refresh()

    def refresh(self) -> None:
        """Update the page counter from the current story."""
        if self._count_label is None:
            return
        count = len(self.state.story.pages)
        self._count_label.text = f"{count} page{'s' if count != 1 else ''}" if count else ""
