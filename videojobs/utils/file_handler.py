# utils/file_handler.py

"""
File handling utilities
"""

import json
import os
import tempfile
from datetime import datetime, timezone
from pathlib import Path
from typing import Any


def utc_now_iso() -> str:
    """Current UTC time as an ISO-8601 string"""
    return datetime.now(timezone.utc).isoformat()


def load_json(filepath: Path) -> Any:
    """Load a JSON document; raises FileNotFoundError or ValueError"""
    with open(filepath, 'r', encoding='utf-8') as f:
        return json.load(f)


def save_json_atomic(filepath: Path, data: Any) -> str:
    """Write JSON next to the target, then swap it into place"""
    filepath = Path(filepath)
    filepath.parent.mkdir(parents=True, exist_ok=True)

    fd, tmp_path = tempfile.mkstemp(
        dir=str(filepath.parent),
        prefix=f".{filepath.name}.",
        suffix=".tmp"
    )
    try:
        with os.fdopen(fd, 'w', encoding='utf-8') as f:
            json.dump(data, f, indent=2, ensure_ascii=False)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_path, filepath)
    except BaseException:
        if os.path.exists(tmp_path):
            os.unlink(tmp_path)
        raise

    return str(filepath)
