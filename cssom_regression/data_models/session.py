"""
cssom_regression/data_models/session.py

Data models for the instrumentation-session boundary.
Every session operation answers with a SessionResult instead of raising.
"""

from __future__ import annotations

from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from cssom_regression.utils.exceptions import SnapshotCaptureError

T = TypeVar("T")

ELEMENT_NODE_TYPE = 1


## Tagged outcome

class SessionResult(BaseModel, Generic[T]):
    """
    Tagged success/failure outcome of a session operation.
    """
    model_config = ConfigDict(arbitrary_types_allowed=True)

    value: T | None = Field(
        default=None,
        description="The operation's value on success",
    )
    error: str | None = Field(
        default=None,
        description="Error message on failure, or None on success",
    )

    @property
    def ok(self) -> bool:
        """Whether the operation succeeded."""
        return self.error is None

    @classmethod
    def success(cls, value: Any = None) -> SessionResult:
        """Build a successful outcome."""
        return cls(value=value)

    @classmethod
    def failure(cls, error: str | BaseException) -> SessionResult:
        """Build a failed outcome from a message or an exception."""
        message = error if isinstance(error, str) else f"{type(error).__name__}: {error}"
        return cls(error=message or "Unknown error")

    @classmethod
    def aggregate(cls, context: str, failures: list[SessionResult]) -> SessionResult:
        """
        Merge several failures into one, keeping their order.
        Args:
            context: Prefix describing where the failures happened.
            failures: Failed outcomes to merge.
        Returns:
            A single failed outcome listing every underlying error.
        """
        details = "; ".join(failure.error for failure in failures if failure.error)
        return cls.failure(f"{context}: {details}")

    def unwrap(self) -> T:
        """
        Return the value, raising SnapshotCaptureError on failure.
        """
        if self.error is not None:
            raise SnapshotCaptureError(self.error)
        return self.value


## DOM models

class CDPModel(BaseModel):
    """
    Base for models parsed from CDP payloads (camelCase on the wire).
    """
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


class DOMNode(CDPModel):
    """
    A remote DOM node as described by the instrumentation session.
    """
    node_id: int = Field(
        default=0,
        description="Session-local node identifier",
    )
    node_type: int = Field(
        ...,
        description="DOM node type (1 = element, 3 = text, ...)",
    )
    node_name: str = Field(
        default="",
        description="Node name; uppercase tag name for HTML elements",
    )
    node_value: str = Field(
        default="",
        description="Node value (text for text nodes, empty for elements)",
    )
    attributes: list[str] = Field(
        default_factory=list,
        description="Flat list of interleaved attribute names and values",
    )
    children: list[DOMNode] = Field(
        default_factory=list,
        description="Child nodes, in document order",
    )

    @property
    def is_element(self) -> bool:
        return self.node_type == ELEMENT_NODE_TYPE

    def attribute_pairs(self) -> list[tuple[str, str]]:
        """Return (name, value) pairs in document order."""
        return [
            (self.attributes[i], self.attributes[i + 1] if i + 1 < len(self.attributes) else "")
            for i in range(0, len(self.attributes), 2)
        ]

    def get_attribute(self, name: str) -> str | None:
        """Return the first value of an attribute, or None when absent."""
        for attr_name, attr_value in self.attribute_pairs():
            if attr_name == name:
                return attr_value
        return None


## CSS models

class CSSProperty(CDPModel):
    """A single declaration inside a style rule."""
    name: str = ""
    value: str = ""


class CSSStyle(CDPModel):
    """Declarations of a rule."""
    css_properties: list[CSSProperty] = Field(default_factory=list)


class CSSRule(CDPModel):
    """A matched CSS rule."""
    style: CSSStyle | None = None


class CSSRuleMatch(CDPModel):
    """A rule that matches a node."""
    rule: CSSRule


class InheritedStyleEntry(CDPModel):
    """Rules matched by one ancestor."""
    matched_css_rules: list[CSSRuleMatch] = Field(
        default_factory=list,
        alias="matchedCSSRules",
    )


class MatchedStyles(CDPModel):
    """
    Directly matched and inherited rule sets for one node.
    """
    matched_css_rules: list[CSSRuleMatch] = Field(
        default_factory=list,
        alias="matchedCSSRules",
        description="Rules matching the node directly, in cascade order",
    )
    inherited: list[InheritedStyleEntry] = Field(
        default_factory=list,
        description="Rules matched by ancestors, nearest ancestor first",
    )
