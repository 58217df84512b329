"""Validation functions for Settings."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from src.settings._settings import Settings

logger = logging.getLogger(__name__)


def validate(settings: Settings) -> None:
    """Validate all settings fields.

    Delegates to individual validation functions for each category of settings.

    Raises:
        ValueError: If any field contains an invalid value.
    """
    _validate_log_level(settings)
    _validate_models(settings)
    _validate_temperature(settings)
    _validate_timeouts(settings)
    _validate_api_key_env(settings)
    _validate_server(settings)


def _validate_log_level(settings: Settings) -> None:
    """Validate log_level is a known logging level."""
    from src.settings._settings import LOG_LEVELS

    if settings.log_level not in LOG_LEVELS:
        raise ValueError(
            f"log_level must be one of {list(LOG_LEVELS.keys())}, got {settings.log_level}"
        )


def _validate_models(settings: Settings) -> None:
    """Validate that both Gemini model names are set."""
    for name, value in (("text_model", settings.text_model), ("image_model", settings.image_model)):
        if not isinstance(value, str) or not value.strip():
            raise ValueError(f"{name} must be a non-empty model name, got {value!r}")


def _validate_temperature(settings: Settings) -> None:
    """Validate text generation temperature."""
    if not 0.0 <= settings.text_temperature <= 2.0:
        raise ValueError(
            f"text_temperature must be between 0.0 and 2.0, got {settings.text_temperature}"
        )


def _validate_timeouts(settings: Settings) -> None:
    """Validate the remote request timeout."""
    if not 5.0 <= settings.request_timeout <= 600.0:
        raise ValueError(
            f"request_timeout must be between 5 and 600 seconds, got {settings.request_timeout}"
        )


def _validate_api_key_env(settings: Settings) -> None:
    """Validate the API key variable name looks like an environment variable."""
    name = settings.api_key_env
    if not name or not name.replace("_", "").isalnum() or name[0].isdigit():
        raise ValueError(f"api_key_env must be a valid environment variable name, got {name!r}")


def _validate_server(settings: Settings) -> None:
    """Validate web server binding."""
    if not settings.host:
        raise ValueError("host must not be empty")
    if not 1 <= settings.port <= 65535:
        raise ValueError(f"port must be between 1 and 65535, got {settings.port}")
