"""Centralized exception hierarchy for Infinite Comic.

Exception Hierarchy:

    InfiniteComicError (base for all application errors)
    ├── LLMError (Gemini related errors)
    │   ├── GenerationError (text generation transport/parse failures)
    │   └── RenderError (image generation transport failures)
    ├── ConfigError (missing API key, invalid settings)
    └── StateTransitionError (turn requested from the wrong phase)
        ├── InvalidTransitionError (operation not valid in the current phase)
        └── TurnInProgressError (a remote call is already outstanding)

Usage:
    from src.utils.exceptions import GenerationError, LLMError

    try:
        client.generate_segment(history, instruction, context)
    except GenerationError:
        logger.error("Script generation failed")
    except LLMError:
        logger.error("Gemini operation failed")
"""

import logging

logger = logging.getLogger(__name__)


def summarize_llm_error(error: Exception, max_length: int = 300) -> str:
    """Create a concise summary of an LLM-related exception for logging.

    google-genai API errors embed the full JSON error payload in their string
    form, which can run to dozens of lines. This function keeps log entries
    to one readable line.

    Args:
        error: The exception to summarize.
        max_length: Maximum length of the summary string.

    Returns:
        A concise error summary suitable for log messages.
    """
    error_type = type(error).__name__
    msg = " ".join(str(error).split())

    if not msg:
        return error_type

    if len(msg) <= max_length:
        return msg

    # API errors carry an HTTP status code worth keeping up front
    code = getattr(error, "code", None)
    if code is not None:
        return f"{error_type} (code {code}): {msg[:max_length]}..."

    return f"{msg[:max_length]}... [{len(msg) - max_length} chars truncated]"


class InfiniteComicError(Exception):
    """Base exception for all Infinite Comic errors.

    All custom exceptions should inherit from this class to allow
    catching all application-specific errors with a single except clause.
    """

    pass


class LLMError(InfiniteComicError):
    """Base exception for Gemini-related errors.

    Raised when any remote generation fails. Subclasses identify which
    of the two remote calls failed.
    """

    pass


class GenerationError(LLMError):
    """Raised when the script (narrative/visual/choices) request fails.

    Covers transport failures, timeouts, empty responses and responses
    that do not parse into the expected segment shape.
    """

    pass


class RenderError(LLMError):
    """Raised when the panel image request fails at the transport level.

    A response that arrives but carries no image is not an error; the
    client substitutes a placeholder image instead.
    """

    pass


class ConfigError(InfiniteComicError):
    """Raised when configuration is missing or invalid.

    The most common cause is a missing Gemini API key in the environment.
    """

    pass


class StateTransitionError(InfiniteComicError):
    """Base exception for turn transitions requested at the wrong time.

    Attributes:
        operation: Name of the rejected operation (start, choose, approve...).
        phase: Phase the story was in when the operation was requested.
    """

    def __init__(self, message: str, operation: str | None = None, phase: str | None = None):
        """Initialize StateTransitionError.

        Args:
            message: Human-readable error message.
            operation: Name of the rejected operation.
            phase: Value of the phase the story was in.
        """
        super().__init__(message)
        self.operation = operation
        self.phase = phase


class InvalidTransitionError(StateTransitionError):
    """Raised when an operation is not valid from the current phase.

    For example, choosing an option while a draft is waiting for review.
    """

    pass


class TurnInProgressError(StateTransitionError):
    """Raised when a turn is requested while a remote call is outstanding."""

    pass
