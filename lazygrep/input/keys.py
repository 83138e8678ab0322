"""Action names, default key bindings, and the key-dispatch registry.

Bindings are tables of ``key token -> action name`` per input mode. The
runtime turns a table into a ``KeyComboRegistry`` whose handlers perform the
named action.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass

MODE_EDITING = "editing"
MODE_SEARCH_RESULT = "search-result"
MODES: tuple[str, ...] = (MODE_EDITING, MODE_SEARCH_RESULT)

ACTIONS: frozenset[str] = frozenset(
    {
        "quit",
        "toggle-legend",
        "edit-pattern",
        "edit-and-pattern",
        "edit-not-pattern",
        "edit-revision",
        "edit-path",
        "cursor-up",
        "cursor-down",
        "cursor-left",
        "cursor-right",
        "toggle-expansion",
        "toggle-all-expansion",
        "flip-ignore-case",
        "flip-untracked",
        "flip-no-index",
        "flip-no-recursive",
        "flip-word-regexp",
        "flip-fixed-strings",
        "flip-extended-regexp",
        "flip-perl-regexp",
        "increase-context",
        "decrease-context",
        "accept-input",
        "preview",
        "cancel-input",
        "clear-arg",
        "delete-backward",
        "delete-char",
        "move-backward",
        "move-forward",
        "move-to-start",
        "move-to-end",
        "delete-to-end",
    }
)

DEFAULT_SEARCH_RESULT_BINDINGS: dict[str, str] = {
    "q": "quit",
    "ESC": "quit",
    "CTRL_C": "quit",
    "H": "toggle-legend",
    "/": "edit-pattern",
    "e": "edit-pattern",
    "a": "edit-and-pattern",
    "n": "edit-not-pattern",
    "r": "edit-revision",
    "p": "edit-path",
    "UP": "cursor-up",
    "k": "cursor-up",
    "CTRL_P": "cursor-up",
    "DOWN": "cursor-down",
    "j": "cursor-down",
    "CTRL_N": "cursor-down",
    "LEFT": "cursor-left",
    "h": "cursor-left",
    "CTRL_B": "cursor-left",
    "RIGHT": "cursor-right",
    "l": "cursor-right",
    "CTRL_F": "cursor-right",
    "t": "toggle-expansion",
    "TAB": "toggle-expansion",
    "T": "toggle-all-expansion",
    "i": "flip-ignore-case",
    "u": "flip-untracked",
    "I": "flip-no-index",
    "R": "flip-no-recursive",
    "w": "flip-word-regexp",
    "F": "flip-fixed-strings",
    "E": "flip-extended-regexp",
    "P": "flip-perl-regexp",
    "+": "increase-context",
    "-": "decrease-context",
}

DEFAULT_EDITING_BINDINGS: dict[str, str] = {
    "ESC": "quit",
    "CTRL_C": "quit",
    "ENTER": "accept-input",
    "TAB": "preview",
    "CTRL_G": "cancel-input",
    "BACKSPACE": "delete-backward",
    "DELETE": "delete-char",
    "CTRL_D": "delete-char",
    "LEFT": "move-backward",
    "CTRL_B": "move-backward",
    "RIGHT": "move-forward",
    "CTRL_F": "move-forward",
    "HOME": "move-to-start",
    "CTRL_A": "move-to-start",
    "END": "move-to-end",
    "CTRL_E": "move-to-end",
    "CTRL_K": "delete-to-end",
    "CTRL_U": "clear-arg",
}


def default_bindings() -> dict[str, dict[str, str]]:
    return {
        MODE_EDITING: dict(DEFAULT_EDITING_BINDINGS),
        MODE_SEARCH_RESULT: dict(DEFAULT_SEARCH_RESULT_BINDINGS),
    }


def merge_bindings(overrides: Mapping[str, Mapping[str, str]]) -> dict[str, dict[str, str]]:
    """Layer user bindings over the defaults, per mode."""
    merged = default_bindings()
    for mode, table in overrides.items():
        if mode in merged:
            merged[mode].update(table)
    return merged


def is_printable_key(key: str) -> bool:
    """Return whether ``key`` is a single printable character (not a named token)."""
    return len(key) == 1 and key.isprintable()


@dataclass(frozen=True)
class KeyComboBinding:
    """Mapping from one or more key tokens to a single action callback."""

    combos: tuple[str, ...]
    handler: Callable[[], bool | None]


class KeyComboRegistry:
    """Small key-dispatch table."""

    def __init__(self) -> None:
        self._handlers: dict[str, Callable[[], bool | None]] = {}

    def register_binding(self, binding: KeyComboBinding) -> KeyComboRegistry:
        """Register one binding, overwriting existing handlers for same combos."""
        for combo in binding.combos:
            self._handlers[combo] = binding.handler
        return self

    def dispatch(self, key: str) -> bool | None:
        """Invoke the handler bound to ``key``; ``None`` means the key is unbound."""
        handler = self._handlers.get(key)
        if handler is None:
            return None
        return handler()


def build_registry(
    table: Mapping[str, str],
    perform: Callable[[str], bool | None],
) -> KeyComboRegistry:
    """Build a registry whose handlers call ``perform(action)`` for each bound key."""
    combos_by_action: dict[str, list[str]] = {}
    for key, action in table.items():
        combos_by_action.setdefault(action, []).append(key)

    registry = KeyComboRegistry()
    for action, combos in combos_by_action.items():
        registry.register_binding(
            KeyComboBinding(combos=tuple(combos), handler=lambda action=action: perform(action))
        )
    return registry
