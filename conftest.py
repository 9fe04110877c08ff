"""Pytest configuration.

Puts the repository root on ``sys.path`` so ``idlecat`` imports resolve when
the suite runs from a plain checkout without an editable install.
"""

import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))
