"""UI pages for the Infinite Comic."""

from .comic import ComicPage

__all__ = [
    "ComicPage",
]
