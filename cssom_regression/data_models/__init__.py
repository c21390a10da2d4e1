"""
cssom_regression/data_models/__init__.py

Pydantic models shared by capture and comparison.
"""

from cssom_regression.data_models.comparison import (
    ComparisonOptions,
    ComparisonResult,
    Difference,
    DifferenceType,
)
from cssom_regression.data_models.session import (
    DOMNode,
    MatchedStyles,
    SessionResult,
)
from cssom_regression.data_models.snapshot import (
    CaptureOptions,
    ElementNode,
    Snapshot,
    StyleMap,
)

__all__ = [
    "CaptureOptions",
    "ComparisonOptions",
    "ComparisonResult",
    "DOMNode",
    "Difference",
    "DifferenceType",
    "ElementNode",
    "MatchedStyles",
    "SessionResult",
    "Snapshot",
    "StyleMap",
]
