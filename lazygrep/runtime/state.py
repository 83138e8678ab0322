"""Application state owned by the event loop.

One ``AppState`` instance is created at startup and passed explicitly to
every handler and widget; nothing else holds mutable UI state.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from ..navigation import NavigationEngine
from ..search.options import GrepArg, GrepOptions

FOCUS_SEARCH_RESULT = "search-result"
FOCUS_PATTERN = "pattern"
FOCUS_AND_PATTERN = "and-pattern"
FOCUS_NOT_PATTERN = "not-pattern"
FOCUS_REVISION = "revision"
FOCUS_PATH = "path"

FOCUS_ARG_FIELDS: dict[str, str] = {
    FOCUS_PATTERN: "pattern",
    FOCUS_AND_PATTERN: "and_pattern",
    FOCUS_NOT_PATTERN: "not_pattern",
    FOCUS_REVISION: "revision",
    FOCUS_PATH: "path",
}


@dataclass
class AppState:
    options: GrepOptions = field(default_factory=GrepOptions)
    navigation: NavigationEngine = field(default_factory=NavigationEngine)
    focus: str = FOCUS_SEARCH_RESULT
    search_error: str | None = None
    row_offset: int = 0
    legend_hidden: bool = False
    editing_backup: str | None = None
    dirty: bool = True
    exit: bool = False

    def is_editing(self) -> bool:
        return self.focus != FOCUS_SEARCH_RESULT

    def editing_field(self) -> str | None:
        return FOCUS_ARG_FIELDS.get(self.focus)

    def editing_arg(self) -> GrepArg | None:
        name = self.editing_field()
        if name is None:
            return None
        return self.options.arg(name)
