"""Tests for input validation utilities."""

import pytest

from src.utils.validation import validate_not_empty, validate_not_none


class TestValidateNotNone:
    """Tests for validate_not_none."""

    def test_returns_value(self):
        """Falsy but present values pass through unchanged."""
        assert validate_not_none(0, "count") == 0
        assert validate_not_none("", "name") == ""

    def test_rejects_none(self):
        """None raises with the parameter name."""
        with pytest.raises(ValueError, match="'client' cannot be None"):
            validate_not_none(None, "client")


class TestValidateNotEmpty:
    """Tests for validate_not_empty."""

    def test_returns_text(self):
        """Non-blank strings pass through unstripped."""
        assert validate_not_empty(" Follow the stranger ", "choice") == " Follow the stranger "

    @pytest.mark.parametrize("value", ["", "   ", "\n\t"])
    def test_rejects_blank(self, value):
        """Blank strings raise ValueError."""
        with pytest.raises(ValueError, match="cannot be empty"):
            validate_not_empty(value, "choice")

    def test_rejects_none(self):
        """None raises ValueError."""
        with pytest.raises(ValueError, match="cannot be None"):
            validate_not_empty(None, "choice")

    def test_rejects_non_string(self):
        """Non-strings raise TypeError."""
        with pytest.raises(TypeError, match="must be a string, got int"):
            validate_not_empty(42, "choice")  # type: ignore[arg-type]
