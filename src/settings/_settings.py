"""Main Settings dataclass for Infinite Comic.

Settings are stored in settings.json. The Gemini API key is never written
there; it is read from the process environment at the first remote call.
"""

from __future__ import annotations

import json
import logging
import os
import shutil
import tempfile
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any, ClassVar

from src.settings import _validation as _validation_mod
from src.settings._paths import SETTINGS_FILE
from src.utils.exceptions import ConfigError

# Configure module logger
logger = logging.getLogger(__name__)

# Checked when the configured variable is unset; google-genai reads the same name
API_KEY_FALLBACK_ENV = "GOOGLE_API_KEY"

LOG_LEVELS: dict[str, str] = {
    "DEBUG": "Debug",
    "INFO": "Info",
    "WARNING": "Warning",
    "ERROR": "Error",
}


def _merge_with_defaults(data: dict[str, Any], settings_cls: type[Settings]) -> bool:
    """Merge loaded JSON data with dataclass defaults.

    - Adds missing top-level keys with their default values
    - Removes top-level keys that no longer exist in the dataclass

    Modifies *data* in place.

    Returns:
        True if any changes were made, False otherwise.
    """
    default_dict = asdict(settings_cls())
    known_fields = {f.name for f in fields(settings_cls)}
    changed = False

    for key in list(data):
        if key not in known_fields:
            logger.info("Removing obsolete setting: %s", key)
            del data[key]
            changed = True

    for key in known_fields:
        if key not in data:
            logger.info("Adding new setting with default: %s", key)
            data[key] = default_dict[key]
            changed = True

    return changed


def _atomic_write_json(path: Path | str, data: dict[str, Any]) -> None:
    """Write JSON to *path* atomically via a temp file + rename."""
    path = Path(path)
    fd, tmp_path = tempfile.mkstemp(dir=str(path.parent), suffix=".tmp")
    try:
        with os.fdopen(fd, "w") as f:
            json.dump(data, f, indent=2)
        os.replace(tmp_path, str(path))
    except BaseException:
        try:
            os.unlink(tmp_path)
        except OSError as cleanup_err:
            logger.warning("Failed to remove temp settings file %s: %s", tmp_path, cleanup_err)
        raise


@dataclass
class Settings:
    """Application settings, stored as JSON."""

    # Gemini models
    text_model: str = "gemini-2.5-flash"
    image_model: str = "gemini-2.5-flash-image"  # "Nano Banana"
    text_temperature: float = 0.9

    # Every remote call is bounded; a timeout takes the transport-failure path
    request_timeout: float = 120.0

    # Environment variable holding the Gemini API key
    api_key_env: str = "GEMINI_API_KEY"

    # General
    log_level: str = "INFO"

    # Web UI
    host: str = "127.0.0.1"
    port: int = 7860
    dark_mode: bool = True
    auto_scroll: bool = True  # Scroll to the newest panel or draft after each turn

    def save(self) -> None:
        """Save settings to JSON file."""
        self.validate()
        _atomic_write_json(SETTINGS_FILE, asdict(self))

    def validate(self) -> None:
        """Validate all settings fields. Delegates to _validation module.

        Raises:
            ValueError: If any field contains an invalid value.
        """
        _validation_mod.validate(self)

    def get_api_key(self) -> str:
        """Read the Gemini API key from the environment.

        Returns:
            The API key.

        Raises:
            ConfigError: If neither the configured variable nor GOOGLE_API_KEY is set.
        """
        api_key = os.environ.get(self.api_key_env) or os.environ.get(API_KEY_FALLBACK_ENV)
        if not api_key:
            raise ConfigError(
                f"{self.api_key_env} is not set. Export it or add it to a .env file "
                "before starting a story."
            )
        return api_key

    def has_api_key(self) -> bool:
        """Check whether an API key is available without raising."""
        return bool(os.environ.get(self.api_key_env) or os.environ.get(API_KEY_FALLBACK_ENV))

    # Class-level cache for settings (speeds up repeated load() calls)
    _cached_instance: ClassVar[Settings | None] = None

    @classmethod
    def load(cls, use_cache: bool = True) -> Settings:
        """Load settings from JSON file, or create defaults.

        New settings get default values and removed settings are cleaned up;
        customized values are preserved.

        Args:
            use_cache: If True, return cached instance if available. Set to False
                to force reload from disk (useful after save() or in tests).

        Returns:
            Settings instance.

        Raises:
            ValueError: If a stored value has the wrong type or is out of range.
        """
        if use_cache and cls._cached_instance is not None:
            return cls._cached_instance

        data: dict[str, Any] = {}
        loaded_from_file = False

        if SETTINGS_FILE.exists():
            try:
                with open(SETTINGS_FILE) as f:
                    raw = json.load(f)
                if isinstance(raw, dict):
                    data = raw
                    loaded_from_file = bool(raw)
                else:
                    logger.error(
                        "Corrupted settings file (expected JSON object, got %s)",
                        type(raw).__name__,
                    )
                    cls._backup_corrupt_file()
            except json.JSONDecodeError as e:
                logger.error("Corrupted settings file (invalid JSON): %s", e)
                cls._backup_corrupt_file()
            except OSError as e:
                logger.error("Cannot read settings file (may be locked or inaccessible): %s", e)

        logger.info(
            "Settings load: loaded_from_file=%s, keys_read=%d",
            loaded_from_file,
            len(data),
        )

        changed = _merge_with_defaults(data, cls)

        # TypeError surfaces when range checks compare incompatible types
        # (e.g. "port": "eighty") - wrap as ValueError for clarity.
        try:
            settings = cls(**data)
            settings.validate()
        except TypeError as e:
            raise ValueError(f"A setting has an invalid type: {e}") from e

        if changed or not loaded_from_file:
            try:
                _atomic_write_json(SETTINGS_FILE, asdict(settings))
            except OSError as write_err:
                logger.warning(
                    "Could not persist settings to disk: %s - using in-memory values",
                    write_err,
                )

        cls._cached_instance = settings
        return settings

    @staticmethod
    def _backup_corrupt_file() -> None:
        """Copy an unreadable settings file aside before it gets overwritten."""
        backup_path = SETTINGS_FILE.with_suffix(".json.corrupt")
        try:
            shutil.copy(SETTINGS_FILE, backup_path)
            logger.info("Backed up corrupted settings to %s", backup_path)
        except OSError as copy_err:
            logger.warning("Failed to backup corrupted settings: %s", copy_err)

    @classmethod
    def clear_cache(cls) -> None:
        """Clear the cached settings instance.

        Use this in tests that need to verify settings loading behavior,
        or after programmatically modifying settings files.
        """
        cls._cached_instance = None
