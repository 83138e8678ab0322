"""One terminal line as a sequence of styled spans.

Rows are edited by column, never by byte or character index: drawing a span
at column ``c`` overwrites exactly the columns it covers, splitting any span
it lands inside.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from .span import StyledSpan, split_at_column


@dataclass
class Row:
    spans: list[StyledSpan] = field(default_factory=list)

    def width(self) -> int:
        return sum(span.width for span in self.spans)

    def text(self) -> str:
        return "".join(span.text for span in self.spans)

    def draw(self, col: int, span: StyledSpan) -> None:
        """Overwrite columns ``[col, col + span.width)`` with ``span``.

        Gaps past the current end of the row are filled with plain spaces.
        """
        col = max(0, col)
        gap = col - self.width()
        if gap > 0:
            self.spans.append(StyledSpan(" " * gap))

        suffix = self.split_off(col)
        suffix.split_off_prefix(span.width)
        if not span.is_empty():
            self.spans.append(span)
        self.spans.extend(suffix.spans)

    def truncate(self, cols: int) -> None:
        """Drop everything at or beyond display column ``cols``."""
        self.split_off(cols)

    def split_off(self, col: int) -> Row:
        """Keep columns ``[0, col)`` in place and return the rest as a new row."""
        acc = 0
        for idx, span in enumerate(self.spans):
            if acc == col:
                suffix = Row(self.spans[idx:])
                del self.spans[idx:]
                return suffix

            span_width = span.width
            if acc + span_width > col:
                left, right = split_at_column(span, col - acc)
                suffix = Row([right, *self.spans[idx + 1 :]] if not right.is_empty() else self.spans[idx + 1 :])
                del self.spans[idx:]
                if not left.is_empty():
                    self.spans.append(left)
                return suffix
            acc += span_width

        # ``col`` is at or past the end of the row; nothing to split.
        return Row()

    def split_off_prefix(self, cols: int) -> None:
        """Discard the first ``cols`` display columns of this row."""
        rest = self.split_off(cols)
        self.spans = rest.spans
