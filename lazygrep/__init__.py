"""lazygrep: browse ``git grep`` results in the terminal.

Only ``main`` is exported here; importing the package does not pull in the
terminal runtime.
"""

from __future__ import annotations


def main(*args, **kwargs):
    """Run the CLI; the import is deferred until the first call."""
    from .cli import main as _main

    return _main(*args, **kwargs)


__all__ = ["main"]
