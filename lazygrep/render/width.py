"""Display-width estimation for single characters.

The renderer assumes a monospaced grid where each character occupies 0, 1,
or 2 columns. Everything that measures text goes through ``char_width``.
"""

from __future__ import annotations

import unicodedata

_ZERO_WIDTH_CATEGORIES = frozenset({"Mn", "Me", "Cf", "Cc"})


def char_width(ch: str) -> int:
    """Return terminal column width for one character.

    Combining marks, format and control characters consume no columns, and
    East Asian wide/fullwidth characters consume two.
    """
    if unicodedata.category(ch) in _ZERO_WIDTH_CATEGORIES:
        return 0
    if unicodedata.east_asian_width(ch) in {"W", "F"}:
        return 2
    return 1


def text_width(text: str) -> int:
    """Return the summed display width of ``text``."""
    return sum(char_width(ch) for ch in text)
