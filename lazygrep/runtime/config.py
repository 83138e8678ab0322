"""Persistent JSON config helpers.

Stores the default context-line count, legend visibility, and user key
bindings. All access is defensive: malformed or missing config falls back to
defaults.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

from platformdirs import user_config_dir

from ..input.keys import ACTIONS, MODES
from ..search.options import clamp_context_lines

logger = logging.getLogger(__name__)

APP_NAME = "lazygrep"
CONFIG_FILENAME = "config.json"
CONFIG_PATH = Path(user_config_dir(APP_NAME, appauthor=False)) / CONFIG_FILENAME


def load_config() -> dict[str, object]:
    """Load the persisted JSON config object.

    Returns an empty dict when the file is missing, unreadable, malformed, or
    does not decode to a top-level JSON object.
    """
    try:
        data = json.loads(CONFIG_PATH.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return {}
    except (OSError, ValueError) as exc:
        logger.warning("ignoring unreadable config %s: %s", CONFIG_PATH, exc)
        return {}
    return data if isinstance(data, dict) else {}


def save_config(data: dict[str, object]) -> None:
    """Persist config data as pretty-printed JSON.

    Filesystem errors are logged and otherwise ignored so an unwritable
    config never interrupts the UI.
    """
    try:
        CONFIG_PATH.parent.mkdir(parents=True, exist_ok=True)
        CONFIG_PATH.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
    except OSError as exc:
        logger.warning("could not write config %s: %s", CONFIG_PATH, exc)


def load_context_lines() -> int:
    """Return the persisted context-line count, clamped to the supported range."""
    value = load_config().get("context_lines")
    if isinstance(value, bool) or not isinstance(value, int):
        return 0
    return clamp_context_lines(value)


def save_context_lines(context_lines: int) -> None:
    config = load_config()
    config["context_lines"] = clamp_context_lines(int(context_lines))
    save_config(config)


def load_legend_hidden() -> bool:
    """Return persisted legend visibility; only explicit booleans are accepted."""
    value = load_config().get("legend_hidden")
    return bool(value) if isinstance(value, bool) else False


def save_legend_hidden(hidden: bool) -> None:
    config = load_config()
    config["legend_hidden"] = bool(hidden)
    save_config(config)


def load_key_bindings() -> dict[str, dict[str, str]]:
    """Load user key bindings as ``{mode: {key: action}}``.

    Unknown modes, unknown action names, and non-string keys are dropped.
    """
    value = load_config().get("key_bindings")
    if not isinstance(value, dict):
        return {}

    bindings: dict[str, dict[str, str]] = {}
    for mode, table in value.items():
        if mode not in MODES or not isinstance(table, dict):
            continue
        valid: dict[str, str] = {}
        for key, action in table.items():
            if not isinstance(key, str) or not key:
                continue
            if not isinstance(action, str) or action not in ACTIONS:
                logger.warning("ignoring unknown action %r bound to %r", action, key)
                continue
            valid[key] = action
        bindings[mode] = valid
    return bindings
