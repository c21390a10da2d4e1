"""
tests/unit/data_models/test_snapshot_models.py

Tests for snapshot, capture option and comparison models.
"""

import pytest
from pydantic import ValidationError

from cssom_regression.config import DEFAULT_PSEUDO_CLASSES
from cssom_regression.data_models.comparison import ComparisonResult, Difference, DifferenceType
from cssom_regression.data_models.snapshot import CaptureOptions, ElementNode, Snapshot


class TestElementNode:
    """
    Tests for ElementNode.
    """

    def test_accepts_persisted_keys(self) -> None:
        """camelCase keys from stored fixtures are accepted."""
        node = ElementNode.model_validate({
            "nodeName": "DIV",
            "uniqueSelector": "div@0",
            "computedStyles": {"color": "red"},
            "pseudoStates": {"hover": {"color": "blue"}},
            "attributes": {},
            "children": [],
            "textContent": "hi",
        })
        assert node.pseudo_states == {"hover": {"color": "blue"}}
        assert node.text_content == "hi"

    def test_dump_uses_persisted_keys(self) -> None:
        """Dumping by alias produces camelCase keys and omits None fields."""
        node = ElementNode(node_name="DIV", unique_selector="div@0")
        assert node.model_dump(by_alias=True, exclude_none=True) == {
            "nodeName": "DIV",
            "uniqueSelector": "div@0",
            "computedStyles": {},
            "attributes": {},
            "children": [],
        }

    def test_frozen(self) -> None:
        """Nodes cannot be reassigned after construction."""
        node = ElementNode(node_name="DIV", unique_selector="div@0")
        with pytest.raises(ValidationError):
            node.node_name = "SPAN"

    def test_changes_derive_a_copy(self) -> None:
        """model_copy with an update leaves the original node untouched."""
        node = ElementNode(node_name="DIV", unique_selector="div@0", computed_styles={"color": "red"})
        changed = node.model_copy(update={"computed_styles": {"color": "blue"}})

        assert node.computed_styles == {"color": "red"}
        assert changed.computed_styles == {"color": "blue"}
        assert changed.unique_selector == "div@0"

    def test_unknown_keys_rejected(self) -> None:
        """Unknown keys are a format error, not silently dropped."""
        with pytest.raises(ValidationError):
            ElementNode.model_validate({"nodeName": "DIV", "uniqueSelector": "div@0", "nodeId": 3})


class TestCaptureOptions:
    """
    Tests for CaptureOptions defaults and policy shapes.
    """

    def test_defaults(self) -> None:
        """Defaults capture the body with children and pseudo-states."""
        options = CaptureOptions()
        assert options.selector == "body"
        assert options.include_children is True
        assert options.include_pseudo_states is True
        assert options.exclude_attributes == []
        assert options.exclude_elements == []
        assert options.pseudo_classes == list(DEFAULT_PSEUDO_CLASSES)

    def test_predicate_policies(self) -> None:
        """Predicates are accepted for both policies."""
        options = CaptureOptions(
            exclude_attributes=lambda name: name == "data-token",
            exclude_elements=lambda tag: tag == "SCRIPT",
        )
        assert callable(options.exclude_attributes)
        assert options.exclude_elements("SCRIPT") is True


class TestComparisonResult:
    """
    Tests for ComparisonResult.
    """

    def test_is_equal_derived_from_differences(self) -> None:
        """is_equal holds exactly when there are no differences."""
        assert ComparisonResult(differences=[]).is_equal is True
        difference = Difference(type=DifferenceType.STYLE, path="trees[0].styles.color", description="x")
        assert ComparisonResult(differences=[difference]).is_equal is False

    def test_dump_includes_is_equal(self) -> None:
        """The derived flag is serialized as isEqual."""
        dumped = ComparisonResult().model_dump(by_alias=True)
        assert dumped == {"differences": [], "isEqual": True}

    def test_snapshot_equality(self) -> None:
        """Snapshots compare by value."""
        first = Snapshot(url="u", trees=[ElementNode(node_name="BODY", unique_selector="body@0")])
        second = Snapshot(url="u", trees=[ElementNode(node_name="BODY", unique_selector="body@0")])
        assert first == second
