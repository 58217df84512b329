"""Tests for theme helpers."""

from src.memory.story_state import TurnPhase
from src.ui.theme import choice_label, get_busy_label, page_badge_text


class TestBusyLabels:
    """Tests for get_busy_label."""

    def test_drafting(self):
        """Drafting shows the script label."""
        assert get_busy_label(TurnPhase.DRAFTING) == "Drafting Script..."

    def test_rendering(self):
        """Rendering shows the inking label."""
        assert get_busy_label(TurnPhase.RENDERING) == "Inking Page..."

    def test_idle_phases_have_no_label(self):
        """Idle phases show nothing."""
        for phase in (TurnPhase.SETUP, TurnPhase.REVIEW, TurnPhase.STEADY):
            assert get_busy_label(phase) == ""


def test_choice_label_letters():
    """Choices are lettered A and B."""
    assert choice_label(0, "Run") == "A: Run"
    assert choice_label(1, "Hide") == "B: Hide"


def test_page_badge_text():
    """The badge shows the page number."""
    assert page_badge_text(3) == "PAGE 3"
