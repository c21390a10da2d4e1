"""
cssom-regression - Structural and computed-style regression snapshots!

Usage:
    from cssom_regression import capture_snapshot, compare_snapshots, save_snapshot, load_snapshot

    # capture from a live page through an instrumentation session
    snapshot = (await capture_snapshot(session, selector="main", exclude_elements=["script"])).unwrap()
    save_snapshot(snapshot, "snapshots/main.json")

    # compare against the stored baseline
    result = compare_snapshots(load_snapshot("snapshots/main.json"), snapshot, exclude_attributes=["src"])
    assert result.is_equal, result.differences
"""

__version__ = "0.1.0"

# Public API
from .snapshot.capture import capture_snapshot
from .snapshot.io import load_snapshot, save_snapshot, snapshot_to_json
from .comparison.comparator import compare_snapshots, find_element_by_path

# Instrumentation sessions
from .cdp.instrumentation import AbstractInstrumentationSession, CDPInstrumentationSession
from .cdp.async_cdp_session import AsyncCDPSession

# Data models
from .data_models.snapshot import CaptureOptions, ElementNode, Snapshot
from .data_models.comparison import ComparisonOptions, ComparisonResult, Difference, DifferenceType
from .data_models.session import SessionResult

# Exceptions
from .utils.exceptions import (
    BrowserConnectionError,
    CDPCommandError,
    CSSOMRegressionError,
    SnapshotCaptureError,
    SnapshotFormatError,
)

__all__ = [
    # Public API
    "capture_snapshot",
    "compare_snapshots",
    "find_element_by_path",
    "load_snapshot",
    "save_snapshot",
    "snapshot_to_json",
    # Instrumentation sessions
    "AbstractInstrumentationSession",
    "AsyncCDPSession",
    "CDPInstrumentationSession",
    # Data models
    "CaptureOptions",
    "ComparisonOptions",
    "ComparisonResult",
    "Difference",
    "DifferenceType",
    "ElementNode",
    "SessionResult",
    "Snapshot",
    # Exceptions
    "BrowserConnectionError",
    "CDPCommandError",
    "CSSOMRegressionError",
    "SnapshotCaptureError",
    "SnapshotFormatError",
]
