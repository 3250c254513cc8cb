"""Pytest configuration.

This repo follows the `src/` layout. Some environments may invoke a `pytest`
entrypoint from a different Python install than the one used for
`python -m pip install -e ...`, which can cause `import rawcols` to fail.

To keep the suite robust, we ensure `src/` is on `sys.path` during tests.
"""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Any


def pytest_configure() -> None:
    repo_root = Path(__file__).resolve().parents[1]
    src_dir = repo_root / "src"
    sys.path.insert(0, str(src_dir))


# =============================================================================
# Shared Test Helpers
# =============================================================================


def int_record(name: str = "age", **fields: Any) -> dict[str, Any]:
    """Create a raw INT_COLUMN record."""
    return {"name": name, "type": "INT_COLUMN", **fields}


def float_record(name: str = "score", **fields: Any) -> dict[str, Any]:
    """Create a raw FLOAT_COLUMN record."""
    return {"name": name, "type": "FLOAT_COLUMN", **fields}


def string_record(name: str = "city", **fields: Any) -> dict[str, Any]:
    """Create a raw STRING_COLUMN record."""
    return {"name": name, "type": "STRING_COLUMN", **fields}


def write_json(path: Path, obj: object) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(obj, indent=2, sort_keys=False) + "\n", encoding="utf-8")
