"""
cssom_regression/data_models/snapshot.py

Data models for captured snapshots and capture options.
Snapshots persist as JSON with camelCase keys.
"""

from __future__ import annotations

from typing import Callable

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from cssom_regression.config import Config

StyleMap = dict[str, str]


class SnapshotModel(BaseModel):
    """
    Base for persisted, immutable snapshot models.
    Frozen is shallow: fields cannot be reassigned, but the lists and dicts they
    hold are plain containers. Derive changed copies with model_copy(update=...)
    instead of mutating them in place.
    """
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        extra="forbid",
    )


class ElementNode(SnapshotModel):
    """
    One rendered element with its resolved styles and retained children.
    """
    node_name: str = Field(
        ...,
        description="Uppercase tag name",
        examples=["DIV", "BUTTON"],
    )
    unique_selector: str = Field(
        ...,
        description="Sibling-local identity label: tag, first class, first id and retained sibling index",
        examples=["div.card#main@0", "span@2"],
    )
    computed_styles: StyleMap = Field(
        default_factory=dict,
        description="CSS property name -> resolved value (direct rules win over inherited ones)",
    )
    pseudo_states: dict[str, StyleMap] | None = Field(
        default=None,
        description="Pseudo-class name -> styles resolved while that pseudo-class was forced",
    )
    attributes: dict[str, str] = Field(
        default_factory=dict,
        description="Attribute name -> raw value, after the exclusion policy",
    )
    children: list[ElementNode] = Field(
        default_factory=list,
        description="Retained element children, document order",
    )
    text_content: str | None = Field(
        default=None,
        description="Raw node value when non-empty",
    )


class Snapshot(SnapshotModel):
    """
    Captured trees for every element matching the root selector.
    """
    url: str = Field(
        ...,
        description="URL of the document at capture time",
    )
    trees: list[ElementNode] = Field(
        default_factory=list,
        description="One tree per matched root element, document order",
    )


class CaptureOptions(BaseModel):
    """
    Options for capture_snapshot.
    """
    model_config = ConfigDict(arbitrary_types_allowed=True, extra="forbid")

    selector: str = Field(
        default="body",
        description="CSS selector for the root elements to capture",
    )
    include_children: bool = Field(
        default=True,
        description="When False only the matched roots are materialized",
    )
    include_pseudo_states: bool = Field(
        default=True,
        description="Detect interactive pseudo-class rules and capture their forced styles",
    )
    exclude_attributes: list[str] | Callable[[str], bool] = Field(
        default_factory=list,
        description="Attribute names (exact) or a predicate over an attribute name",
    )
    exclude_elements: list[str] | Callable[[str], bool] = Field(
        default_factory=list,
        description="Tag names (case-insensitive) or a predicate over a tag name",
    )
    pseudo_classes: list[str] = Field(
        default_factory=lambda: list(Config.PSEUDO_CLASSES),
        description="Interactive pseudo-classes considered by the detector",
    )
