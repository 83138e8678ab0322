"""Input-layer public API for key decoding and key-binding dispatch."""

from .keys import (
    ACTIONS,
    MODE_EDITING,
    MODE_SEARCH_RESULT,
    MODES,
    KeyComboBinding,
    KeyComboRegistry,
    build_registry,
    default_bindings,
    is_printable_key,
    merge_bindings,
)
from .reader import ESC_SEQUENCE_TIMEOUT_MS, read_key

__all__ = [
    "ACTIONS",
    "MODE_EDITING",
    "MODE_SEARCH_RESULT",
    "MODES",
    "KeyComboBinding",
    "KeyComboRegistry",
    "build_registry",
    "default_bindings",
    "is_printable_key",
    "merge_bindings",
    "ESC_SEQUENCE_TIMEOUT_MS",
    "read_key",
]
