"""
tests/unit/comparison/test_comparator.py

Tests for lock-step snapshot comparison.
"""

import pytest
from pydantic import ValidationError

from cssom_regression.comparison.comparator import compare_snapshots, find_element_by_path
from cssom_regression.data_models.comparison import ComparisonOptions, ComparisonResult, DifferenceType
from cssom_regression.data_models.snapshot import ElementNode, Snapshot
from fakes import make_node


def _snapshot(*trees: ElementNode) -> Snapshot:
    return Snapshot(url="http://localhost:3000/", trees=list(trees))


def _paths(result: ComparisonResult) -> list[str]:
    return [difference.path for difference in result.differences]


class TestCompareBasics:
    """
    Tests for equality and result consistency.
    """

    def test_reflexive(self, sample_snapshot: Snapshot) -> None:
        """A snapshot compared with itself has no differences."""
        result = compare_snapshots(sample_snapshot, sample_snapshot)

        assert result.is_equal is True
        assert result.differences == []

    def test_is_equal_tracks_differences(self) -> None:
        """is_equal is exactly 'no differences', also in the dumped form."""
        result = compare_snapshots(
            _snapshot(make_node("body", styles={"color": "red"})),
            _snapshot(make_node("body", styles={"color": "blue"})),
        )
        dumped = result.model_dump(by_alias=True)

        assert result.is_equal is False
        assert dumped["isEqual"] is False
        assert len(dumped["differences"]) == 1

    def test_url_not_compared(self) -> None:
        """Snapshots from different URLs can still be equal."""
        expected = Snapshot(url="http://a/", trees=[make_node("body")])
        actual = Snapshot(url="http://b/", trees=[make_node("body")])

        assert compare_snapshots(expected, actual).is_equal


class TestCompareDifferences:
    """
    Tests for the differences reported at each level.
    """

    def test_style_difference(self) -> None:
        """A style mismatch is reported with both values."""
        result = compare_snapshots(
            _snapshot(make_node("body", make_node("div", styles={"color": "red"}))),
            _snapshot(make_node("body", make_node("div", styles={"color": "blue"}))),
        )

        (difference,) = result.differences
        assert difference.type == DifferenceType.STYLE
        assert difference.path == "trees[0] > div@0.styles.color"
        assert difference.expected == "red"
        assert difference.actual == "blue"

    def test_only_expected_style_keys(self) -> None:
        """Properties present only on the actual side are not compared."""
        result = compare_snapshots(
            _snapshot(make_node("body", styles={"color": "red"})),
            _snapshot(make_node("body", styles={"color": "red", "margin": "0"})),
        )
        assert result.is_equal

    def test_missing_style_is_none(self) -> None:
        """A property missing on the actual side reports None."""
        result = compare_snapshots(
            _snapshot(make_node("body", styles={"margin": "8px"})),
            _snapshot(make_node("body")),
        )

        (difference,) = result.differences
        assert difference.path == "trees[0].styles.margin"
        assert difference.actual is None

    def test_style_properties_restricts(self) -> None:
        """Only configured properties are compared, including ones absent on the expected side."""
        expected = _snapshot(make_node("body", styles={"color": "red", "margin": "8px"}))
        actual = _snapshot(make_node("body", styles={"color": "blue", "margin": "0", "padding": "1px"}))

        result = compare_snapshots(expected, actual, style_properties=["margin", "padding"])

        assert _paths(result) == ["trees[0].styles.margin", "trees[0].styles.padding"]
        assert result.differences[1].expected is None

    def test_node_name_difference(self) -> None:
        result = compare_snapshots(
            _snapshot(make_node("body", make_node("div"))),
            _snapshot(make_node("body", make_node("section"))),
        )

        assert result.differences[0].type == DifferenceType.STRUCTURE
        assert result.differences[0].path == "trees[0] > div@0.nodeName"
        assert (result.differences[0].expected, result.differences[0].actual) == ("DIV", "SECTION")

    def test_attribute_differences(self) -> None:
        """Changed, missing and unexpected attributes are all structure differences."""
        expected = _snapshot(make_node("body", attributes={"class": "a", "id": "x"}))
        actual = _snapshot(make_node("body", attributes={"class": "b", "role": "main"}))

        result = compare_snapshots(expected, actual)

        assert _paths(result) == [
            "trees[0].attributes.class",
            "trees[0].attributes.id",
            "trees[0].attributes.role",
        ]
        assert all(difference.type == DifferenceType.STRUCTURE for difference in result.differences)
        assert result.differences[1].actual is None
        assert result.differences[2].expected is None

    def test_ignore_class_names_skips_attributes(self) -> None:
        """ignore_class_names turns attribute comparison off entirely."""
        expected = _snapshot(make_node("body", attributes={"class": "a", "id": "x"}))
        actual = _snapshot(make_node("body", attributes={"class": "b"}))

        assert compare_snapshots(expected, actual, ignore_class_names=True).is_equal

    def test_root_count_mismatch(self) -> None:
        """Extra roots are reported once and the common prefix is still compared."""
        expected = _snapshot(make_node("main"), make_node("aside"), make_node("footer", styles={"color": "red"}))
        actual = _snapshot(make_node("main"), make_node("aside", styles={}))

        result = compare_snapshots(expected, actual)

        (difference,) = result.differences
        assert difference.path == "trees.length"
        assert (difference.expected, difference.actual) == (3, 2)
        assert difference.description == "Root elements count mismatch"

    def test_differences_in_second_tree(self) -> None:
        result = compare_snapshots(
            _snapshot(make_node("main"), make_node("aside", styles={"width": "10px"})),
            _snapshot(make_node("main"), make_node("aside", styles={"width": "20px"})),
        )
        assert _paths(result) == ["trees[1].styles.width"]


class TestCompareChildren:
    """
    Tests for lock-step child pairing.
    """

    def test_children_count_lenient_by_default(self) -> None:
        """Extra children are ignored unless strict mode is on."""
        expected = _snapshot(make_node("ul", make_node("li", index=0)))
        actual = _snapshot(make_node("ul", make_node("li", index=0), make_node("li", index=1)))

        assert compare_snapshots(expected, actual).is_equal

        strict = compare_snapshots(expected, actual, strict_structure_comparison=True)
        (difference,) = strict.differences
        assert difference.path == "trees[0].children.length"
        assert (difference.expected, difference.actual) == (1, 2)

    def test_lock_step_shift(self) -> None:
        """Inserting a sibling shifts every later pair; no re-alignment."""
        expected = _snapshot(make_node(
            "body",
            make_node("h1", index=0),
            make_node("p", index=1),
        ))
        actual = _snapshot(make_node(
            "body",
            make_node("nav", index=0),
            make_node("h1", index=1),
            make_node("p", index=2),
        ))

        result = compare_snapshots(expected, actual)

        assert _paths(result) == ["trees[0] > h1@0.nodeName", "trees[0] > p@1.nodeName"]

    def test_order_parent_before_children(self) -> None:
        """A node's own differences precede its descendants'."""
        expected = _snapshot(make_node(
            "body",
            make_node("div", make_node("span", styles={"color": "red"})),
            styles={"margin": "8px"},
            attributes={"id": "a"},
        ))
        actual = _snapshot(make_node(
            "body",
            make_node("div", make_node("span", styles={"color": "blue"})),
            styles={"margin": "0"},
            attributes={"id": "b"},
        ))

        assert _paths(compare_snapshots(expected, actual)) == [
            "trees[0].attributes.id",
            "trees[0].styles.margin",
            "trees[0] > div@0 > span@0.styles.color",
        ]

    def test_element_exclusion_at_compare_time(self) -> None:
        """Excluded children are filtered before pairing."""
        expected = _snapshot(make_node(
            "body",
            make_node("script", index=0, attributes={"src": "a.js"}),
            make_node("div", index=1, styles={"color": "red"}),
        ))
        actual = _snapshot(make_node(
            "body",
            make_node("div", index=1, styles={"color": "red"}),
        ))

        assert compare_snapshots(expected, actual).is_equal is False
        assert compare_snapshots(expected, actual, exclude_elements=["script"]).is_equal is True

    def test_excluded_elements_still_counted_in_strict_mode(self) -> None:
        """The strict count uses the unfiltered children."""
        expected = _snapshot(make_node("body", make_node("script"), make_node("div", index=1)))
        actual = _snapshot(make_node("body", make_node("div", index=1)))

        result = compare_snapshots(expected, actual, strict_structure_comparison=True, exclude_elements=["SCRIPT"])

        assert _paths(result) == ["trees[0].children.length"]


class TestCompareExclusion:
    """
    Tests for exclusion policies at compare time.
    """

    @pytest.mark.parametrize(
        "rule",
        [["data-session"], lambda name: name == "data-session"],
        ids=["list", "predicate"],
    )
    def test_attribute_exclusion_list_or_predicate(self, rule) -> None:
        """List and predicate policies behave the same."""
        expected = _snapshot(make_node("body", attributes={"data-session": "abc", "id": "x"}))
        actual = _snapshot(make_node("body", attributes={"data-session": "xyz", "id": "x"}))

        assert compare_snapshots(expected, actual, exclude_attributes=rule).is_equal

    def test_attribute_exclusion_keeps_style_signal(self) -> None:
        """Excluding attributes does not hide style differences."""
        expected = _snapshot(make_node("body", attributes={"data-session": "abc"}, styles={"color": "red"}))
        actual = _snapshot(make_node("body", attributes={"data-session": "xyz"}, styles={"color": "blue"}))

        result = compare_snapshots(expected, actual, exclude_attributes=["data-session"])

        assert _paths(result) == ["trees[0].styles.color"]

    def test_element_exclusion_predicate(self) -> None:
        expected = _snapshot(make_node("body", make_node("script"), make_node("div", index=1)))
        actual = _snapshot(make_node("body", make_node("div", index=1)))
        options = ComparisonOptions(exclude_elements=lambda tag: tag.lower() == "script")

        assert compare_snapshots(expected, actual, options).is_equal


class TestCompareOptionOverrides:
    """
    Tests for keyword overrides to compare_snapshots.
    """

    def test_string_policy_rejected(self) -> None:
        """A bare string is not a valid exclusion policy."""
        snapshot = _snapshot(make_node("body", make_node("script", styles={"x": "1"})))

        with pytest.raises(ValidationError):
            compare_snapshots(snapshot, snapshot, exclude_elements="script")

    def test_unknown_keyword_rejected(self) -> None:
        """A misspelled option raises instead of being ignored."""
        snapshot = _snapshot(make_node("body"))

        with pytest.raises(ValidationError):
            compare_snapshots(snapshot, snapshot, exclude_attribute=["data-session"])

    def test_overrides_merge_with_options(self) -> None:
        """Overrides replace only the named fields of the options object."""
        expected = _snapshot(make_node("body", make_node("script"), make_node("div", index=1), attributes={"id": "a"}))
        actual = _snapshot(make_node("body", make_node("div", index=1), attributes={"id": "b"}))
        options = ComparisonOptions(ignore_class_names=True)

        assert compare_snapshots(expected, actual, options).is_equal is False
        assert compare_snapshots(expected, actual, options, exclude_elements=["script"]).is_equal is True
        assert options.exclude_elements == []


class TestComparePseudoStates:
    """
    Tests for pseudo-state comparison.
    """

    def test_pseudo_state_style_difference(self) -> None:
        expected = _snapshot(make_node("a", pseudo_states={"hover": {"color": "navy"}}))
        actual = _snapshot(make_node("a", pseudo_states={"hover": {"color": "black"}}))

        (difference,) = compare_snapshots(expected, actual).differences
        assert difference.type == DifferenceType.STYLE
        assert difference.path == "trees[0]:hover.styles.color"

    def test_one_sided_pseudo_states(self) -> None:
        """A pseudo-state present on one side only is a structure difference."""
        expected = _snapshot(make_node("a", pseudo_states={"hover": {"color": "navy"}}))
        actual = _snapshot(make_node("a", pseudo_states={"focus": {"outline": "auto"}}))

        result = compare_snapshots(expected, actual)

        assert _paths(result) == ["trees[0]:hover", "trees[0]:focus"]
        assert all(difference.type == DifferenceType.STRUCTURE for difference in result.differences)
        assert (result.differences[0].expected, result.differences[0].actual) == ("present", None)
        assert (result.differences[1].expected, result.differences[1].actual) == (None, "present")

    def test_pseudo_states_absent_on_one_side(self) -> None:
        expected = _snapshot(make_node("a"))
        actual = _snapshot(make_node("a", pseudo_states={"hover": {}}))

        assert _paths(compare_snapshots(expected, actual)) == ["trees[0]:hover"]


class TestFindElementByPath:
    """
    Tests for resolving comparator paths.
    """

    def test_resolves_difference_paths(self) -> None:
        expected = _snapshot(make_node(
            "body",
            make_node("div", make_node("span", styles={"color": "red"}, index=0), index=0),
        ))
        actual = _snapshot(make_node(
            "body",
            make_node("div", make_node("span", styles={"color": "blue"}, index=0), index=0),
        ))
        (difference,) = compare_snapshots(expected, actual).differences

        node = find_element_by_path(actual, difference.path)

        assert node is actual.trees[0].children[0].children[0]

    def test_resolves_roots_and_suffixes(self, sample_snapshot: Snapshot) -> None:
        body = sample_snapshot.trees[0]

        assert find_element_by_path(sample_snapshot, "trees[0]") is body
        assert find_element_by_path(sample_snapshot, "trees[0].styles.margin") is body
        assert find_element_by_path(sample_snapshot, "trees[0] > a@1:hover.styles.color") is body.children[1]

    def test_unresolvable_paths(self, sample_snapshot: Snapshot) -> None:
        assert find_element_by_path(sample_snapshot, "trees[3]") is None
        assert find_element_by_path(sample_snapshot, "trees.length") is None
        assert find_element_by_path(sample_snapshot, "trees[0] > span@9") is None
