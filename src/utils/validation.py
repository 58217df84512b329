"""Argument checks for the story service.

Both helpers hand the value back, so a check and the assignment it guards
can share one line.
"""

from typing import TypeVar

T = TypeVar("T")


def validate_not_none(value: T | None, param_name: str) -> T:
    """Return ``value``.

    Raises:
        ValueError: If value is None.
    """
    if value is None:
        raise ValueError(f"Parameter '{param_name}' cannot be None")
    return value


def validate_not_empty(value: object, param_name: str) -> str:
    """Return ``value`` when it is a string with at least one visible character.

    Raises:
        ValueError: If value is None or blank.
        TypeError: If value is not a string.
    """
    text = validate_not_none(value, param_name)
    if not isinstance(text, str):
        raise TypeError(f"Parameter '{param_name}' must be a string, got {type(text).__name__}")
    if not text.strip():
        raise ValueError(f"Parameter '{param_name}' cannot be empty")
    return text
