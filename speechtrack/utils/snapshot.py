"""
Snapshot persistence helpers.

The store exports plain nested dicts/lists; these helpers write them to and
read them from JSON files for callers that want to keep data between runs.
"""

import json
import logging
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

SNAPSHOT_VERSION = 1


def save_snapshot(data: dict[str, Any], path: Path) -> Path:
    """Write a store snapshot to ``path`` as JSON, creating parent dirs."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    payload = {"version": SNAPSHOT_VERSION, **data}
    with open(path, "w", encoding="utf-8") as f:
        json.dump(payload, f, indent=2, ensure_ascii=False)
    logger.info(f"Saved snapshot with {len(data.get('children', []))} children to {path}")
    return path


def load_snapshot(path: Path) -> dict[str, Any]:
    """
    Read a snapshot written by save_snapshot.

    Raises:
        FileNotFoundError: If the file doesn't exist
        ValueError: If the snapshot version is not supported
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Snapshot not found: {path}")

    with open(path, "r", encoding="utf-8") as f:
        payload = json.load(f)

    version = payload.pop("version", None)
    if version != SNAPSHOT_VERSION:
        raise ValueError(f"Unsupported snapshot version: {version}")
    return payload
