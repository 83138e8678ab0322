"""Widgets drawn onto the canvas each render pass.

The set is closed: command header, result tree, and legend panel. The
runtime calls them in that order; none of them mutates application state.
"""

from .command_editor import CommandEditor
from .legend import LEGEND_COLS, Legend, remaining_cols
from .result_tree import TreeRenderer

__all__ = [
    "CommandEditor",
    "LEGEND_COLS",
    "Legend",
    "remaining_cols",
    "TreeRenderer",
]
