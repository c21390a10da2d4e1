"""
cssom_regression/utils/exclusion.py

Exclusion policy evaluation shared by capture and comparison.

A policy is either a list of names or a predicate over a raw name:
- attribute lists match names exactly
- element lists match tag names case-insensitively
- predicates receive the raw name and decide directly
"""

from typing import Callable

ExclusionRule = list[str] | Callable[[str], bool] | None


def should_exclude_attribute(attribute_name: str, rule: ExclusionRule) -> bool:
    """
    Check whether an attribute is excluded by the policy.
    Args:
        attribute_name: The raw attribute name.
        rule: List of exact names, a predicate, or None.
    Returns:
        True if the attribute must be dropped.
    """
    if not rule:
        return False
    if callable(rule):
        return bool(rule(attribute_name))
    return attribute_name in rule


def should_exclude_element(tag_name: str, rule: ExclusionRule) -> bool:
    """
    Check whether an element is excluded by the policy.
    Args:
        tag_name: The raw tag name as reported by the document (usually uppercase).
        rule: List of tag names (case-insensitive), a predicate, or None.
    Returns:
        True if the element and its subtree must be dropped.
    """
    if not rule:
        return False
    if callable(rule):
        return bool(rule(tag_name))
    upper = tag_name.upper()
    return any(tag.upper() == upper for tag in rule)
