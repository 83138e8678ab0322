"""Make ``import lazygrep`` resolve to this checkout.

Running the ``pytest`` script from an environment where the package is not
installed leaves the repository root off ``sys.path``.
"""

from __future__ import annotations

import sys
from pathlib import Path

REPO_ROOT = str(Path(__file__).resolve().parents[1])

if REPO_ROOT not in sys.path:
    sys.path.insert(0, REPO_ROOT)
