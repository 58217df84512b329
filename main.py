#!/usr/bin/env python3
"""Infinite Comic - an endless, reader-steered noir comic.

Each turn Gemini drafts a caption, a visual direction and two choices;
the reader edits the visual direction, approves it and the panel is inked.

Usage:
    python main.py                      # Launch NiceGUI web UI
    python main.py --port 8080 --reload # Development server on another port
"""

import argparse
import logging
import sys
import time

from dotenv import load_dotenv

from src.utils.logging_config import setup_logging

logger = logging.getLogger(__name__)


def run_web_ui(
    host: str | None = None,
    port: int | None = None,
    reload: bool = False,
    startup_t0: float | None = None,
) -> None:
    """Launch the NiceGUI web interface.

    Args:
        host: Host to bind to. Defaults to the persisted setting.
        port: Port to listen on. Defaults to the persisted setting.
        reload: Enable auto-reload for development.
        startup_t0: Start time from main() for accurate startup timing.
    """
    from src.services import ServiceContainer
    from src.settings import Settings
    from src.ui import create_app

    logger.info("Starting Infinite Comic web UI...")

    t0 = time.perf_counter()
    settings = Settings.load()
    logger.info("Settings loaded in %.2fs", time.perf_counter() - t0)

    # The key is only required at the first remote call; warn early anyway
    if not settings.has_api_key():
        logger.warning(
            "%s is not set; the first turn will fail until it is exported or added to .env",
            settings.api_key_env,
        )

    services = ServiceContainer(settings)

    t2 = time.perf_counter()
    app = create_app(services)
    logger.info("App created in %.2fs", time.perf_counter() - t2)

    total_t0 = startup_t0 if startup_t0 is not None else t0
    logger.info("Startup complete in %.2fs, launching server...", time.perf_counter() - total_t0)
    app.run(host=host or settings.host, port=port or settings.port, reload=reload)


def main() -> None:
    """Main entry point."""
    t0 = time.perf_counter()
    parser = argparse.ArgumentParser(description="Infinite Comic - Noir Narratives")
    parser.add_argument(
        "--host",
        type=str,
        default=None,
        help="Host for web UI (default: from settings, 127.0.0.1)",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=None,
        help="Port for web UI (default: from settings, 7860)",
    )
    parser.add_argument(
        "--reload",
        action="store_true",
        help="Enable auto-reload for development",
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="INFO",
        help="Logging level (default: INFO)",
    )
    parser.add_argument(
        "--log-file",
        type=str,
        default="default",
        help="Log file path (default: logs/infinite_comic.log, use 'none' to disable)",
    )

    args = parser.parse_args()

    # GEMINI_API_KEY may live in a .env file next to main.py
    load_dotenv()

    log_file = None if args.log_file.lower() == "none" else args.log_file
    setup_logging(level=args.log_level, log_file=log_file)

    # If no explicit --log-level on CLI, respect the persisted setting
    if not any(arg.startswith("--log-level") for arg in sys.argv):
        from src.settings import Settings

        try:
            settings = Settings.load()
            if settings.log_level != args.log_level:
                from src.utils.logging_config import set_log_level

                set_log_level(settings.log_level)
        except (FileNotFoundError, ValueError) as e:
            logger.debug("Could not apply persisted log level: %s", e)

    run_web_ui(host=args.host, port=args.port, reload=args.reload, startup_t0=t0)


if __name__ in {"__main__", "__mp_main__"}:
    main()
