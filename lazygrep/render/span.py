"""Styled text spans: the smallest unit the renderer writes.

A span is an immutable run of text with one set of style flags. Raw control
characters are escaped when the span is built so nothing written to the
terminal can move the cursor, ring the bell, or otherwise have side effects.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from .width import char_width, text_width

STYLE_PLAIN = 0
STYLE_BOLD = 1
STYLE_DIM = 2
STYLE_UNDERLINE = 4
STYLE_REVERSE = 8

SPLIT_FILLER = "…"

_CONTROL_RE = re.compile(r"[\x00-\x1f\x7f-\x9f]")
_NAMED_ESCAPES = {"\n": "\\n", "\r": "\\r", "\t": "\\t"}


def escape_control_chars(text: str) -> str:
    """Replace C0/DEL/C1 control characters with a visible escaped form."""
    if _CONTROL_RE.search(text) is None:
        return text

    out: list[str] = []
    for ch in text:
        if _CONTROL_RE.match(ch) is None:
            out.append(ch)
            continue
        named = _NAMED_ESCAPES.get(ch)
        out.append(named if named is not None else f"\\x{ord(ch):02x}")
    return "".join(out)


@dataclass(frozen=True)
class StyledSpan:
    """Immutable run of escaped text drawn with one style."""

    text: str = ""
    style: int = STYLE_PLAIN

    def __post_init__(self) -> None:
        escaped = escape_control_chars(self.text)
        if escaped is not self.text:
            object.__setattr__(self, "text", escaped)

    @property
    def width(self) -> int:
        return text_width(self.text)

    def is_empty(self) -> bool:
        return not self.text

    def split_at_column(self, col: int) -> tuple[StyledSpan, StyledSpan]:
        return split_at_column(self, col)


def split_at_column(span: StyledSpan, col: int) -> tuple[StyledSpan, StyledSpan]:
    """Split ``span`` at display column ``col``.

    When ``col`` falls inside a wide character, that character is dropped and
    each side is padded with ``…`` for the columns it covered, so the left
    side is exactly ``col`` columns wide. Columns at or past the span width
    return ``(span, empty)``; columns at or before zero return ``(empty, span)``.
    """
    if col <= 0:
        return StyledSpan("", span.style), span

    acc = 0
    for idx, ch in enumerate(span.text):
        if acc == col:
            return StyledSpan(span.text[:idx], span.style), StyledSpan(span.text[idx:], span.style)
        next_acc = acc + char_width(ch)
        if next_acc > col:
            left = span.text[:idx] + SPLIT_FILLER * (col - acc)
            right = SPLIT_FILLER * (next_acc - col) + span.text[idx + 1 :]
            return StyledSpan(left, span.style), StyledSpan(right, span.style)
        acc = next_acc

    return span, StyledSpan("", span.style)
