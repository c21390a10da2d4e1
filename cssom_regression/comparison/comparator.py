"""
cssom_regression/comparison/comparator.py

Lock-step comparison of two snapshots.

Children are paired strictly by index after element exclusion; there is no
re-alignment, so an inserted or removed sibling shifts every later pair.
Pure and synchronous: no I/O.
"""

import re

from cssom_regression.data_models.comparison import (
    ComparisonOptions,
    ComparisonResult,
    Difference,
    DifferenceType,
)
from cssom_regression.data_models.snapshot import ElementNode, Snapshot, StyleMap
from cssom_regression.utils.exclusion import should_exclude_attribute, should_exclude_element

CHILD_SEPARATOR = " > "

_TREE_SEGMENT = re.compile(r"^trees\[(\d+)\]")
_NODE_SEGMENT = re.compile(r"^(.*@\d+)")


def _compare_style_maps(
    expected: StyleMap,
    actual: StyleMap,
    path: str,
    style_properties: list[str] | None,
    pseudo_state: str | None = None,
) -> list[Difference]:
    """Diff two style maps by raw string equality over the configured properties."""
    differences: list[Difference] = []
    properties = style_properties if style_properties is not None else list(expected.keys())
    for prop in properties:
        expected_value = expected.get(prop)
        actual_value = actual.get(prop)
        if expected_value == actual_value:
            continue
        if pseudo_state is None:
            differences.append(Difference(
                type=DifferenceType.STYLE,
                path=f"{path}.styles.{prop}",
                expected=expected_value,
                actual=actual_value,
                description=f"Style property {prop} mismatch at {path}",
            ))
        else:
            differences.append(Difference(
                type=DifferenceType.STYLE,
                path=f"{path}:{pseudo_state}.styles.{prop}",
                expected=expected_value,
                actual=actual_value,
                description=f"Pseudo-state {pseudo_state} style property {prop} mismatch at {path}",
            ))
    return differences


def _compare_attributes(
    expected: ElementNode,
    actual: ElementNode,
    path: str,
    options: ComparisonOptions,
) -> list[Difference]:
    differences: list[Difference] = []
    for key, value in expected.attributes.items():
        if should_exclude_attribute(key, options.exclude_attributes):
            continue
        if actual.attributes.get(key) != value:
            differences.append(Difference(
                type=DifferenceType.STRUCTURE,
                path=f"{path}.attributes.{key}",
                expected=value,
                actual=actual.attributes.get(key),
                description=f"Attribute {key} mismatch at {path}",
            ))

    for key, value in actual.attributes.items():
        if key in expected.attributes or should_exclude_attribute(key, options.exclude_attributes):
            continue
        differences.append(Difference(
            type=DifferenceType.STRUCTURE,
            path=f"{path}.attributes.{key}",
            expected=None,
            actual=value,
            description=f"Unexpected attribute {key} at {path}",
        ))
    return differences


def _compare_pseudo_states(
    expected: ElementNode,
    actual: ElementNode,
    path: str,
    options: ComparisonOptions,
) -> list[Difference]:
    differences: list[Difference] = []
    expected_states = expected.pseudo_states or {}
    actual_states = actual.pseudo_states or {}
    all_states = list(expected_states) + [state for state in actual_states if state not in expected_states]

    for pseudo_state in all_states:
        expected_styles = expected_states.get(pseudo_state)
        actual_styles = actual_states.get(pseudo_state)
        if expected_styles is None:
            differences.append(Difference(
                type=DifferenceType.STRUCTURE,
                path=f"{path}:{pseudo_state}",
                expected=None,
                actual="present",
                description=f"Unexpected pseudo-state {pseudo_state} at {path}",
            ))
        elif actual_styles is None:
            differences.append(Difference(
                type=DifferenceType.STRUCTURE,
                path=f"{path}:{pseudo_state}",
                expected="present",
                actual=None,
                description=f"Missing pseudo-state {pseudo_state} at {path}",
            ))
        else:
            differences.extend(_compare_style_maps(
                expected_styles, actual_styles, path, options.style_properties, pseudo_state=pseudo_state,
            ))
    return differences


def compare_elements(
    expected: ElementNode,
    actual: ElementNode,
    path: str,
    options: ComparisonOptions,
) -> list[Difference]:
    """
    Compare two nodes at the same path, then their children by index.
    Own differences come before children's; order inside a node is
    nodeName, attributes, styles, pseudo-states, children count.
    """
    differences: list[Difference] = []

    if expected.node_name != actual.node_name:
        differences.append(Difference(
            type=DifferenceType.STRUCTURE,
            path=f"{path}.nodeName",
            expected=expected.node_name,
            actual=actual.node_name,
            description=f"Node name mismatch at {path}",
        ))

    if not options.ignore_class_names:
        differences.extend(_compare_attributes(expected, actual, path, options))

    differences.extend(_compare_style_maps(
        expected.computed_styles, actual.computed_styles, path, options.style_properties,
    ))
    differences.extend(_compare_pseudo_states(expected, actual, path, options))

    if options.strict_structure_comparison and len(expected.children) != len(actual.children):
        differences.append(Difference(
            type=DifferenceType.STRUCTURE,
            path=f"{path}.children.length",
            expected=len(expected.children),
            actual=len(actual.children),
            description=f"Children count mismatch at {path}",
        ))

    expected_children = [
        child for child in expected.children
        if not should_exclude_element(child.node_name, options.exclude_elements)
    ]
    actual_children = [
        child for child in actual.children
        if not should_exclude_element(child.node_name, options.exclude_elements)
    ]
    for expected_child, actual_child in zip(expected_children, actual_children):
        differences.extend(compare_elements(
            expected_child,
            actual_child,
            f"{path}{CHILD_SEPARATOR}{expected_child.unique_selector}",
            options,
        ))
    return differences


def compare_snapshots(
    expected: Snapshot,
    actual: Snapshot,
    options: ComparisonOptions | None = None,
    **option_overrides,
) -> ComparisonResult:
    """
    Compare two snapshots and list every difference in discovery order.
    Args:
        expected: The baseline snapshot.
        actual: The snapshot under test.
        options: Comparison options; keyword overrides are applied on top
            (e.g. `compare_snapshots(a, b, exclude_attributes=["src"])`).
    Returns:
        The comparison result; is_equal holds exactly when differences is empty.
    Raises:
        pydantic.ValidationError: If an override is unknown or has the wrong type.
    """
    options = options or ComparisonOptions()
    if option_overrides:
        options = ComparisonOptions.model_validate({**dict(options), **option_overrides})

    differences: list[Difference] = []
    if len(expected.trees) != len(actual.trees):
        differences.append(Difference(
            type=DifferenceType.STRUCTURE,
            path="trees.length",
            expected=len(expected.trees),
            actual=len(actual.trees),
            description="Root elements count mismatch",
        ))

    for index, (expected_tree, actual_tree) in enumerate(zip(expected.trees, actual.trees)):
        differences.extend(compare_elements(expected_tree, actual_tree, f"trees[{index}]", options))

    return ComparisonResult(differences=differences)


def find_element_by_path(snapshot: Snapshot, path: str) -> ElementNode | None:
    """
    Resolve a comparator path back to the node it addresses.
    Property suffixes (".styles.color", ":hover", ".attributes.id", ...) are ignored.
    Args:
        snapshot: The snapshot to search.
        path: A path such as "trees[0] > div.card@1 > span@0.styles.color".
    Returns:
        The node, or None when any segment does not resolve.
    """
    segments = path.split(CHILD_SEPARATOR)

    tree_match = _TREE_SEGMENT.match(segments[0])
    if not tree_match:
        return None
    tree_index = int(tree_match.group(1))
    if tree_index >= len(snapshot.trees):
        return None

    current = snapshot.trees[tree_index]
    for segment in segments[1:]:
        node_match = _NODE_SEGMENT.match(segment)
        if not node_match:
            return None
        segment = node_match.group(1)
        current = next((child for child in current.children if child.unique_selector == segment), None)
        if current is None:
            return None
    return current
