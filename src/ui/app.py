"""Main NiceGUI application for the Infinite Comic."""

import logging
from collections.abc import Callable

from nicegui import app, ui

from src.services import ServiceContainer
from src.ui.components.header import Header
from src.ui.pages.comic import ComicPage
from src.ui.state import AppState
from src.ui.theme import COLORS, get_background_class

logger = logging.getLogger(__name__)


class InfiniteComicApp:
    """Main Infinite Comic application.

    A single route; each browser connection gets its own AppState so
    concurrent tabs never share a story.
    """

    def __init__(self, services: ServiceContainer):
        """Initialize the application."""
        self.services = services

    def new_state(self) -> AppState:
        """Create a fresh per-connection state seeded from settings."""
        settings = self.services.settings
        return AppState(dark_mode=settings.dark_mode, auto_scroll=settings.auto_scroll)

    def _apply_theme(self, state: AppState) -> None:
        """Apply theme settings to the page."""
        ui.query("body").classes(get_background_class())

        if state.dark_mode:
            ui.dark_mode().enable()
        else:
            ui.dark_mode().disable()

    def _page_layout(self, state: AppState, build_content: Callable[[], None]) -> None:
        """Render the shared layout: theme, header, then the page content.

        Args:
            state: Per-connection application state.
            build_content: Zero-argument callable rendering the page body.
        """
        self._apply_theme(state)

        header = Header(state)
        header.build()
        state.on_story_change(header.refresh)

        with ui.column().classes("w-full flex-grow p-0"):
            build_content()

    def _setup_global_colors(self) -> None:
        """Set the global color palette from the theme."""
        colors = app.colors
        colors.primary = COLORS["primary"]
        colors.secondary = COLORS["secondary"]
        colors.positive = COLORS["positive"]
        colors.negative = COLORS["negative"]
        colors.warning = COLORS["warning"]
        colors.info = COLORS["info"]
        logger.debug("Global color palette configured")

    def _setup_exception_handler(self) -> None:
        """Set up global exception handler for unhandled UI errors.

        This catches exceptions that occur after the page is sent to the client,
        such as errors in async handlers or background tasks.
        """

        def handle_exception(e: Exception) -> None:
            """Log an unhandled UI exception and notify the reader."""
            logger.exception("Unhandled UI exception")
            ui.notify(f"An error occurred: {e}", type="negative", timeout=10000)

        ui.on_exception(handle_exception)
        logger.debug("Global exception handler registered")

    def build(self) -> None:
        """Set up global UI configuration and register the comic page."""
        self._setup_global_colors()
        self._setup_exception_handler()

        @ui.page("/")
        def comic_page() -> None:
            """Render the comic page."""
            state = self.new_state()

            def content() -> None:
                """Build the comic page content."""
                page = ComicPage(state, self.services)
                page.build()

            self._page_layout(state, content)

        app.on_shutdown(self._on_shutdown)
        logger.info("Infinite Comic app built")

    def _on_shutdown(self) -> None:
        """Handle application shutdown."""
        logger.info("Infinite Comic shutting down")

    def run(
        self,
        host: str = "127.0.0.1",
        port: int = 7860,
        title: str = "Noir Narratives",
        reload: bool = False,
    ) -> None:
        """Run the application."""
        logger.info("Starting Infinite Comic on http://%s:%s", host, port)
        ui.run(
            host=host,
            port=port,
            title=title,
            reload=reload,
            favicon="💥",
            show=False,
        )


def create_app(services: ServiceContainer | None = None) -> InfiniteComicApp:
    """Create and configure the Infinite Comic application."""
    if services is None:
        services = ServiceContainer()

    app_instance = InfiniteComicApp(services)
    app_instance.build()
    return app_instance
