"""
cssom_regression/snapshot/io.py

Persistence of snapshots as JSON fixtures.
"""

import json
from pathlib import Path

from pydantic import ValidationError

from cssom_regression.data_models.snapshot import Snapshot
from cssom_regression.utils.exceptions import SnapshotFormatError
from cssom_regression.utils.logger import get_logger

logger = get_logger(name=__name__)


def snapshot_to_dict(snapshot: Snapshot) -> dict:
    """Return the persisted (camelCase, None-free) form of a snapshot."""
    return snapshot.model_dump(mode="json", by_alias=True, exclude_none=True)


def snapshot_to_json(snapshot: Snapshot) -> str:
    """Serialize a snapshot to its persisted JSON text."""
    return json.dumps(snapshot_to_dict(snapshot), ensure_ascii=False, indent=2)


def snapshot_from_dict(data: dict) -> Snapshot:
    """
    Validate a persisted snapshot value.
    Raises:
        SnapshotFormatError: If the value does not match the snapshot shape.
    """
    try:
        return Snapshot.model_validate(data)
    except ValidationError as e:
        raise SnapshotFormatError(f"Invalid snapshot: {e}") from e


def save_snapshot(snapshot: Snapshot, path: str | Path) -> Path:
    """
    Write a snapshot to disk, creating parent directories.
    Returns:
        The written path.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, mode="w", encoding="utf-8") as f:
        f.write(snapshot_to_json(snapshot))
    logger.info("💾 Snapshot saved to: %s", path)
    return path


def load_snapshot(path: str | Path) -> Snapshot:
    """
    Read a snapshot from disk.
    Raises:
        FileNotFoundError: If the file does not exist.
        SnapshotFormatError: If the file is not a valid snapshot.
    """
    with open(path, mode="r", encoding="utf-8") as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise SnapshotFormatError(f"Snapshot file {path} is not valid JSON: {e}") from e
    return snapshot_from_dict(data)
