"""Terminal presentation engine: styled spans, rows, frames, and the canvas."""

from .canvas import Canvas, Position
from .frame import EMPTY_SIZE, Frame, TerminalSize
from .row import Row
from .span import (
    SPLIT_FILLER,
    STYLE_BOLD,
    STYLE_DIM,
    STYLE_PLAIN,
    STYLE_REVERSE,
    STYLE_UNDERLINE,
    StyledSpan,
    escape_control_chars,
    split_at_column,
)
from .width import char_width, text_width

__all__ = [
    "Canvas",
    "Position",
    "EMPTY_SIZE",
    "Frame",
    "TerminalSize",
    "Row",
    "SPLIT_FILLER",
    "STYLE_BOLD",
    "STYLE_DIM",
    "STYLE_PLAIN",
    "STYLE_REVERSE",
    "STYLE_UNDERLINE",
    "StyledSpan",
    "escape_control_chars",
    "split_at_column",
    "char_width",
    "text_width",
]
