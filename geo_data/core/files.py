"""
File Helpers
============

Whole-file writes for datasets and generated modules: content goes to a
temporary sibling first and is moved into place with os.replace, so a
reader sees either the old file or the new one.
"""

import json
import os
import tempfile
from pathlib import Path
from typing import Any


def write_text_atomic(path: Path, content: str) -> int:
    """
    Replace a file's content in one step.

    Returns:
        Number of bytes written
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    data = content.encode("utf-8")

    fd, tmp_name = tempfile.mkstemp(dir=str(path.parent), prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(data)
        os.replace(tmp_name, path)
    except BaseException:
        if os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise
    return len(data)


def write_json_atomic(path: Path, data: Any) -> int:
    """Write JSON with 2-space indentation, keeping non-ASCII text as-is."""
    return write_text_atomic(path, json.dumps(data, indent=2, ensure_ascii=False) + "\n")
