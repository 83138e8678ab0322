"""``git grep`` query options and command-line construction.

``GrepOptions`` is the user-editable query: five text arguments edited in the
command header plus boolean flags toggled from the result view. The same
options render three argument lists: the one shown to the user, the text pass
that is parsed into the result tree, and the ``-o`` highlight pass.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from ..render.width import char_width

MIN_CONTEXT_LINES = 0
MAX_CONTEXT_LINES = 20

MODE_EXTERNAL = "external"
MODE_TEXT = "text"
MODE_HIGHLIGHT = "highlight"

ARG_FIELDS: tuple[str, ...] = ("pattern", "and_pattern", "not_pattern", "revision", "path")


@dataclass
class GrepArg:
    """One editable argument with a character-index edit cursor."""

    text: str = ""
    index: int = 0

    def __post_init__(self) -> None:
        self.index = max(0, min(self.index, len(self.text)))

    def is_empty(self) -> bool:
        return not self.text

    def set_text(self, text: str) -> None:
        self.text = text
        self.index = len(text)

    def insert_char(self, ch: str) -> None:
        self.text = self.text[: self.index] + ch + self.text[self.index :]
        self.index += len(ch)

    def delete_backward(self) -> None:
        if self.index == 0:
            return
        self.text = self.text[: self.index - 1] + self.text[self.index :]
        self.index -= 1

    def delete_char(self) -> None:
        self.text = self.text[: self.index] + self.text[self.index + 1 :]

    def delete_to_end(self) -> None:
        self.text = self.text[: self.index]

    def clear(self) -> None:
        self.text = ""
        self.index = 0

    def move_backward(self) -> None:
        self.index = max(0, self.index - 1)

    def move_forward(self) -> None:
        self.index = min(len(self.text), self.index + 1)

    def move_to_start(self) -> None:
        self.index = 0

    def move_to_end(self) -> None:
        self.index = len(self.text)

    def cursor_cols(self) -> int:
        """Display columns between the start of the text and the edit cursor."""
        return sum(char_width(ch) for ch in self.text[: self.index])


@dataclass
class GrepOptions:
    pattern: GrepArg = field(default_factory=GrepArg)
    and_pattern: GrepArg = field(default_factory=GrepArg)
    not_pattern: GrepArg = field(default_factory=GrepArg)
    revision: GrepArg = field(default_factory=GrepArg)
    path: GrepArg = field(default_factory=GrepArg)
    ignore_case: bool = False
    untracked: bool = False
    no_index: bool = False
    no_recursive: bool = False
    word_regexp: bool = False
    fixed_strings: bool = False
    extended_regexp: bool = False
    perl_regexp: bool = False
    context_lines: int = 0

    def __post_init__(self) -> None:
        self.context_lines = clamp_context_lines(self.context_lines)

    def arg(self, name: str) -> GrepArg:
        if name not in ARG_FIELDS:
            raise KeyError(name)
        return getattr(self, name)

    def can_flip(self, flag: str) -> bool:
        """Return whether ``flag`` may be toggled; regexp dialects are exclusive."""
        dialects = ("fixed_strings", "extended_regexp", "perl_regexp")
        if flag in dialects:
            return not any(getattr(self, other) for other in dialects if other != flag)
        return hasattr(self, flag) and isinstance(getattr(self, flag), bool)

    def flip(self, flag: str) -> bool:
        """Toggle a boolean flag, returning ``False`` when the flip is not allowed."""
        if not self.can_flip(flag):
            return False
        setattr(self, flag, not getattr(self, flag))
        return True


def clamp_context_lines(value: int) -> int:
    return max(MIN_CONTEXT_LINES, min(MAX_CONTEXT_LINES, value))


def flag_args(options: GrepOptions, mode: str) -> list[str]:
    """Return the option arguments that precede the patterns for ``mode``."""
    args: list[str] = []
    if mode == MODE_EXTERNAL:
        args.append("-n")
    else:
        args.extend(["--no-color", "--null", "-n", "-I"])
    if mode == MODE_HIGHLIGHT:
        args.append("-o")
    if mode != MODE_HIGHLIGHT and options.context_lines > 0:
        args.extend(["-C", str(options.context_lines)])

    if options.ignore_case:
        args.append("--ignore-case")
    if not options.revision.text:
        if options.untracked:
            args.append("--untracked")
        if options.no_index:
            args.append("--no-index")
    if options.no_recursive:
        args.append("--no-recursive")
    if options.word_regexp:
        args.append("--word-regexp")
    if options.fixed_strings:
        args.append("--fixed-strings")
    if options.extended_regexp:
        args.append("--extended-regexp")
    if options.perl_regexp:
        args.append("--perl-regexp")
    return args


def build_grep_args(options: GrepOptions, mode: str) -> list[str]:
    """Build ``git`` arguments (without the leading ``git``) for ``mode``."""
    args = ["grep", *flag_args(options, mode)]
    args.extend(["-e", options.pattern.text])
    if options.and_pattern.text:
        args.extend(["--and", "-e", options.and_pattern.text])
    if options.not_pattern.text:
        args.extend(["--and", "--not", "-e", options.not_pattern.text])
    if options.revision.text:
        args.append(options.revision.text)
    if options.path.text:
        args.extend(["--", options.path.text])
    return args
