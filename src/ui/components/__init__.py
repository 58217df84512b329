"""Reusable UI components for the Infinite Comic."""

from .choice_controls import ChoiceControls
from .comic_panel import ComicPanel
from .generation_status import GenerationStatus
from .header import Header
from .script_review import ScriptReview
from .setup_form import SetupForm

__all__ = [
    "ChoiceControls",
    "ComicPanel",
    "GenerationStatus",
    "Header",
    "ScriptReview",
    "SetupForm",
]
