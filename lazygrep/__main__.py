"""Module entrypoint for ``python -m lazygrep``.

All argument parsing and runtime setup happen in ``lazygrep.cli``.
"""

from .cli import main


if __name__ == "__main__":
    main()
