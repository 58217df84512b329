"""Theme configuration for the Infinite Comic UI.

Centralized colors, styles, and visual constants.
"""

from src.memory.story_state import TurnPhase

# ========== Primary Colors ==========
# Noir palette: ink black surfaces, paper white text, one yellow accent
COLORS = {
    "primary": "#FACC15",  # Highlighter yellow
    "primary_dark": "#CA8A04",
    "secondary": "#6B7280",
    "positive": "#22C55E",
    "negative": "#EF4444",
    "warning": "#F59E0B",
    "info": "#38BDF8",
    "background": "#0A0A0A",
    "surface": "#171717",
    "ink": "#000000",
    "paper": "#FAFAFA",
    "text_secondary": "#A3A3A3",
}

# ========== Busy Labels ==========
# Shown while a remote call is outstanding, by phase
BUSY_LABELS = {
    TurnPhase.DRAFTING: "Drafting Script...",
    TurnPhase.RENDERING: "Inking Page...",
}

CHOICES_BUSY_LABEL = "Constructing Reality..."

# Letters prefixed to the two choice buttons
CHOICE_LETTERS = ("A", "B")

# ========== Panel Styles ==========
PANEL_FRAME_CLASS = "w-full border-4 border-black bg-white shadow-[8px_8px_0_0_#000]"
CAPTION_CLASS = (
    "bg-yellow-100 text-black border-2 border-black px-3 py-2 "
    "font-mono text-sm uppercase tracking-wide"
)
PAGE_BADGE_CLASS = "bg-black text-yellow-400 font-bold px-2 py-1 text-xs"
# Older panels recede so the newest one reads as the current page
INACTIVE_PANEL_CLASS = "opacity-60 grayscale"


def get_busy_label(phase: TurnPhase) -> str:
    """Get the busy indicator text for a phase.

    Args:
        phase: Current turn phase.

    Returns:
        Label text, or an empty string when the phase is not busy.
    """
    return BUSY_LABELS.get(phase, "")


def choice_label(index: int, choice: str) -> str:
    """Prefix a choice with its letter (0 -> "A: ...")."""
    return f"{CHOICE_LETTERS[index]}: {choice}"


def page_badge_text(number: int) -> str:
    """Badge text for a panel ("PAGE 3")."""
    return f"PAGE {number}"


def get_background_class() -> str:
    """Get background class for the current theme.

    Returns:
        Background class string with Tailwind dark: variant.
    """
    return "bg-neutral-100 dark:bg-neutral-950"
