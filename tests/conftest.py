"""Test configuration helpers."""
from __future__ import annotations

import sys
from pathlib import Path

# Make the src layout importable when the package is not installed.
SRC = Path(__file__).resolve().parent.parent / "src"
src_str = str(SRC)
if src_str not in sys.path:
    sys.path.insert(0, src_str)
