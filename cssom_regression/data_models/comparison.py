"""
cssom_regression/data_models/comparison.py

Data models for snapshot comparison results and options.
"""

from enum import StrEnum
from typing import Any, Callable

from pydantic import BaseModel, ConfigDict, Field, computed_field
from pydantic.alias_generators import to_camel


class DifferenceType(StrEnum):
    """Kinds of differences reported by the comparator."""
    STRUCTURE = "structure"
    STYLE = "style"


class Difference(BaseModel):
    """
    A single path-addressed mismatch between two snapshots.
    """
    model_config = ConfigDict(frozen=True)

    type: DifferenceType = Field(
        ...,
        description="Whether the mismatch is structural or a style value",
    )
    path: str = Field(
        ...,
        description="Location of the mismatch",
        examples=["trees[0] > div.card@1.styles.color", "trees.length"],
    )
    expected: Any = Field(
        default=None,
        description="Value on the expected side (None when absent)",
    )
    actual: Any = Field(
        default=None,
        description="Value on the actual side (None when absent)",
    )
    description: str = Field(
        ...,
        description="Human-readable summary",
    )


class ComparisonResult(BaseModel):
    """
    Outcome of compare_snapshots.
    is_equal is derived from differences and never set independently.
    """
    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    differences: list[Difference] = Field(
        default_factory=list,
        description="Differences in discovery order",
    )

    @computed_field(alias="isEqual")
    @property
    def is_equal(self) -> bool:
        return len(self.differences) == 0


class ComparisonOptions(BaseModel):
    """
    Options for compare_snapshots.
    """
    model_config = ConfigDict(arbitrary_types_allowed=True, extra="forbid")

    ignore_class_names: bool = Field(
        default=False,
        description="Skip attribute comparison entirely",
    )
    ignore_inline_styles: bool = Field(
        default=False,
        description="Reserved; not evaluated by the comparator",
    )
    strict_structure_comparison: bool = Field(
        default=False,
        description="Also report children-count mismatches",
    )
    style_properties: list[str] | None = Field(
        default=None,
        description="Restrict style comparison to these properties (default: every key on the expected side)",
    )
    exclude_attributes: list[str] | Callable[[str], bool] = Field(
        default_factory=list,
        description="Attribute names (exact) or a predicate over an attribute name",
    )
    exclude_elements: list[str] | Callable[[str], bool] = Field(
        default_factory=list,
        description="Tag names (case-insensitive) or a predicate over a tag name",
    )
