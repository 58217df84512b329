"""UI module for the Infinite Comic.

NiceGUI-based web interface with a single page:
- Setup form for the protagonist and premise
- Committed panels, the draft review card and the reader's choices
"""

from .app import InfiniteComicApp, create_app
from .state import AppState

__all__ = [
    "AppState",
    "InfiniteComicApp",
    "create_app",
]
