"""Generation status component - busy indicator and error banner."""

import logging
from collections.abc import Awaitable, Callable

from nicegui import ui

from src.ui.state import AppState
from src.ui.theme import get_busy_label

logger = logging.getLogger(__name__)

RETRY_LABEL = "Retry Opening"


class GenerationStatus:
    """Shows what the comic is waiting on, and what went wrong.

    - A spinner with "Drafting Script..." or "Inking Page..." while busy.
    - An error banner with a dismiss button when the story carries an error.
    - A retry button on the banner when the opening script failed.

    Usage:
        status = GenerationStatus(state, on_retry=page.retry_start)
        status.build()
    """

    def __init__(self, state: AppState, on_retry: Callable[[], Awaitable[None]] | None = None):
        """Initialize generation status component.

        Args:
            state: Application state.
            on_retry: Called when the reader retries a failed opening.
        """
        self.state = state
        self.on_retry = on_retry

    def build(self) -> None:
        """Build the indicator and banner for the current state."""
        self._build_busy_indicator()
        self._build_error_banner()
        if not self.state.story.error:
            self._build_retry()

    def _build_busy_indicator(self) -> None:
        """Spinner plus phase label while a remote call is outstanding."""
        label = get_busy_label(self.state.phase)
        if not self.state.is_busy or not label:
            return
        with ui.row().classes("w-full items-center gap-2 py-2").mark("busy-indicator"):
            ui.spinner("dots", size="lg", color="primary")
            ui.label(label).classes("font-bold uppercase tracking-wide")

    def _build_error_banner(self) -> None:
        """Error message with dismiss and, for a failed opening, retry."""
        error = self.state.story.error
        if not error:
            return

        with ui.row().classes(
            "w-full items-center gap-2 p-3 border-4 border-red-600 bg-red-50 text-red-800"
        ).mark("error-banner"):
            ui.icon("error", color="negative")
            ui.label(error).classes("flex-grow font-bold")
            self._build_retry()
            ui.button(icon="close", on_click=self.state.dismiss_error).props("flat round dense")

    def _build_retry(self) -> None:
        """Retry button, offered only while a failed opening left the story without pages."""
        if not self.state.can_retry_start or self.on_retry is None:
            return
        ui.button(RETRY_LABEL, icon="refresh", on_click=self.on_retry).props("color=negative")
