"""Settings package for Infinite Comic.

This package provides application settings management:
- _paths.py: Path constants for the settings file and the log directory
- _settings.py: Main Settings dataclass (JSON-backed, cached)
- _validation.py: Settings validation functions
"""

from src.settings._paths import SETTINGS_FILE
from src.settings._settings import API_KEY_FALLBACK_ENV, LOG_LEVELS, Settings

__all__ = [
    "API_KEY_FALLBACK_ENV",
    "LOG_LEVELS",
    "SETTINGS_FILE",
    "Settings",
]
