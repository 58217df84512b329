"""Comic panel component for a committed page."""

from nicegui import ui

from src.memory.story_state import StoryPage
from src.ui.theme import (
    CAPTION_CLASS,
    INACTIVE_PANEL_CLASS,
    PAGE_BADGE_CLASS,
    PANEL_FRAME_CLASS,
    page_badge_text,
)


class ComicPanel:
    """One inked page: artwork, caption box and page badge.

    Only the newest page is shown at full strength; earlier pages are dimmed.
    """

    def __init__(self, page: StoryPage, is_latest: bool = False):
        """Initialize comic panel.

        Args:
            page: Committed page to display.
            is_latest: Whether this is the most recent page.
        """
        self.page = page
        self.is_latest = is_latest

    def build(self) -> ui.element:
        """Build the panel UI and return its outer element (used as a scroll anchor)."""
        classes = PANEL_FRAME_CLASS
        if not self.is_latest:
            classes = f"{classes} {INACTIVE_PANEL_CLASS}"

        with ui.element("div").classes(f"relative {classes}").mark(self.page.id) as frame:
            ui.image(self.page.image_url).classes("w-full aspect-square")
            ui.label(page_badge_text(self.page.number)).classes(
                f"absolute top-2 left-2 {PAGE_BADGE_CLASS}"
            )
            with ui.element("div").classes("p-3"):
                ui.label(self.page.narrative).classes(CAPTION_CLASS)
                if self.page.user_choice:
                    ui.label(f"Chosen: {self.page.user_choice}").classes(
                        "text-xs italic text-neutral-500 mt-2"
                    )
        return frame
