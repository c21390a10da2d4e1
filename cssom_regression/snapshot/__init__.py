"""
cssom_regression/snapshot/__init__.py

Snapshot capture, pseudo-state detection and persistence.
"""

from cssom_regression.snapshot.capture import capture_snapshot
from cssom_regression.snapshot.io import load_snapshot, save_snapshot, snapshot_to_json
from cssom_regression.snapshot.pseudo_states import PseudoStateDetector, PseudoStateLookup
from cssom_regression.snapshot.traversal import ElementTraverser, NodeLockRegistry

__all__ = [
    "ElementTraverser",
    "NodeLockRegistry",
    "PseudoStateDetector",
    "PseudoStateLookup",
    "capture_snapshot",
    "load_snapshot",
    "save_snapshot",
    "snapshot_to_json",
]
