"""Public runtime entry points.

Groups the interactive application bootstrap (`run_app`) and the frame
composition used by tests.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .app import App
    from .state import AppState


def run_app(*args, **kwargs):
    """Lazily import the app runner to avoid package-import cycles."""
    from .app import run_app as _run_app

    return _run_app(*args, **kwargs)


def render_frame(*args, **kwargs):
    """Lazily import frame composition to avoid package-import cycles."""
    from .app import render_frame as _render_frame

    return _render_frame(*args, **kwargs)


def __getattr__(name: str):
    if name == "App":
        from . import app as _app

        return _app.App
    if name == "AppState":
        from . import state as _state

        return _state.AppState
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = [
    "App",
    "AppState",
    "render_frame",
    "run_app",
]
