"""
cssom_regression/snapshot/traversal.py

Recursive traversal of a live document into ElementNode trees.

Sibling subtrees are fetched concurrently and reassembled by child index, so
output order never depends on completion order. Forcing a pseudo-class,
reading styles and clearing the forced state run as one exclusive section
per node.
"""

from __future__ import annotations

import asyncio
from collections import defaultdict
from contextlib import asynccontextmanager
from typing import AsyncIterator

from cssom_regression.cdp.instrumentation import AbstractInstrumentationSession
from cssom_regression.data_models.session import DOMNode, MatchedStyles, SessionResult
from cssom_regression.data_models.snapshot import CaptureOptions, ElementNode, StyleMap
from cssom_regression.snapshot.pseudo_states import PseudoStateLookup, generate_element_identifier
from cssom_regression.utils.exclusion import should_exclude_attribute, should_exclude_element
from cssom_regression.utils.logger import get_logger

logger = get_logger(name=__name__)


def resolve_matched_styles(matched_styles: MatchedStyles) -> StyleMap:
    """
    Merge directly matched and inherited declarations into one style map.
    Later direct rules override earlier ones; an inherited declaration is only
    used when no direct rule set the property, and the first inherited source wins.
    Declarations with an empty name or value are ignored.
    """
    styles: StyleMap = {}
    for rule_match in matched_styles.matched_css_rules:
        if rule_match.rule.style is None:
            continue
        for css_property in rule_match.rule.style.css_properties:
            if css_property.name and css_property.value:
                styles[css_property.name] = css_property.value

    for inherited_entry in matched_styles.inherited:
        for rule_match in inherited_entry.matched_css_rules:
            if rule_match.rule.style is None:
                continue
            for css_property in rule_match.rule.style.css_properties:
                if css_property.name and css_property.value and css_property.name not in styles:
                    styles[css_property.name] = css_property.value
    return styles


def generate_unique_selector(node: DOMNode, sibling_index: int) -> str:
    """
    Build the sibling-local identity label of a node.
    Format: lowercase tag, then `.<class attribute>` and `#<id>` when present, then `@<index>`.
    """
    parts: list[str] = []
    if node.node_name:
        parts.append(node.node_name.lower())
    class_name = node.get_attribute("class")
    if class_name is not None:
        parts.append(f".{class_name}")
    element_id = node.get_attribute("id")
    if element_id is not None:
        parts.append(f"#{element_id}")
    parts.append(f"@{sibling_index}")
    return "".join(parts)


class NodeLockRegistry:
    """
    One asyncio.Lock per remote node id.
    Holding a node's lock makes its forced pseudo-state exclusive; different nodes never block each other.
    """

    def __init__(self) -> None:
        self._locks: defaultdict[int, asyncio.Lock] = defaultdict(asyncio.Lock)

    @asynccontextmanager
    async def hold(self, node_id: int) -> AsyncIterator[None]:
        async with self._locks[node_id]:
            yield


class ElementTraverser:
    """
    Walks the live document below a node and materializes ElementNode trees.

    Usage:
        traverser = ElementTraverser(session=session, options=CaptureOptions(), pseudo_lookup=lookup)
        result = await traverser.traverse(node_id=42, sibling_index=0, identifier="body@1")
    """

    # Magic methods ________________________________________________________________________________________________________

    def __init__(
        self,
        session: AbstractInstrumentationSession,
        options: CaptureOptions,
        pseudo_lookup: PseudoStateLookup | None = None,
        locks: NodeLockRegistry | None = None,
    ) -> None:
        """
        Initialize ElementTraverser.
        Args:
            session: Instrumentation session for the live document.
            options: Capture options (children, exclusion policies).
            pseudo_lookup: Detector output; None disables pseudo-state capture.
            locks: Per-node lock registry shared by every traversal of one capture.
        """
        self.session = session
        self.options = options
        self.pseudo_lookup = pseudo_lookup
        self.locks = locks or NodeLockRegistry()


    # Private methods ______________________________________________________________________________________________________

    def _build_attributes(self, node: DOMNode) -> dict[str, str]:
        """Collect attributes, dropping excluded names before they reach the tree."""
        attributes: dict[str, str] = {}
        for name, value in node.attribute_pairs():
            if should_exclude_attribute(name, self.options.exclude_attributes):
                continue
            attributes.setdefault(name, value)
        return attributes

    async def _get_styles(self, node_id: int) -> SessionResult[StyleMap]:
        matched = await self.session.get_matched_styles(node_id)
        if not matched.ok:
            return matched
        return SessionResult.success(resolve_matched_styles(matched.value))

    async def _get_forced_styles(self, node_id: int, pseudo_class: str) -> SessionResult[StyleMap]:
        """
        Force one pseudo-class, read styles, then clear the forced state.
        A force failure falls back to un-forced styles; a clear failure is only logged.
        """
        async with self.locks.hold(node_id):
            try:
                forced = await self.session.force_pseudo_state(node_id, [pseudo_class])
                if not forced.ok:
                    logger.warning(
                        "⚠️ Failed to force pseudo-state %s on node %s: %s", pseudo_class, node_id, forced.error
                    )
                return await self._get_styles(node_id)
            finally:
                cleared = await self.session.force_pseudo_state(node_id, [])
                if not cleared.ok:
                    logger.warning("⚠️ Failed to clear forced pseudo-state on node %s: %s", node_id, cleared.error)

    async def _capture_pseudo_states(self, node_id: int, identifier: str | None) -> dict[str, StyleMap]:
        pseudo_states: dict[str, StyleMap] = {}
        if self.pseudo_lookup is None:
            return pseudo_states
        for pseudo_class in self.pseudo_lookup.pseudo_classes_for(identifier):
            styles = await self._get_forced_styles(node_id, pseudo_class)
            if styles.ok:
                pseudo_states[pseudo_class] = styles.value
            else:
                logger.debug("⏭️ Pseudo-state %s skipped for node %s: %s", pseudo_class, node_id, styles.error)
        return pseudo_states

    async def _traverse_children(self, node: DOMNode, unique_selector: str) -> SessionResult[list[ElementNode]]:
        """Fan out over retained element children and reassemble them by index."""
        pending: list[tuple[DOMNode, int, str]] = []
        element_index = 0
        for child in node.children:
            if not child.is_element:
                continue
            identifier = generate_element_identifier(child, element_index)
            element_index += 1
            if should_exclude_element(child.node_name, self.options.exclude_elements):
                logger.debug("⏭️ Excluding <%s> under %s", child.node_name.lower(), unique_selector)
                continue
            pending.append((child, len(pending), identifier))

        results = await asyncio.gather(*(
            self.traverse(node_id=child.node_id, sibling_index=retained_index, identifier=identifier)
            for child, retained_index, identifier in pending
        ))

        failures = [result for result in results if not result.ok]
        if failures:
            return SessionResult.aggregate(f"Failed to traverse children of {unique_selector}", failures)
        return SessionResult.success([result.value for result in results if result.value is not None])


    # Public methods _______________________________________________________________________________________________________

    async def traverse(
        self,
        node_id: int,
        sibling_index: int,
        identifier: str | None = None,
    ) -> SessionResult[ElementNode | None]:
        """
        Materialize the subtree rooted at a remote node.
        Args:
            node_id: Remote node id.
            sibling_index: Index among retained element siblings (used for the unique selector).
            identifier: Detection-pass identifier used to look up pseudo-classes.
        Returns:
            The ElementNode, None for non-element nodes, or a failure.
        """
        described = await self.session.describe_node(node_id)
        if not described.ok:
            return described
        node: DOMNode = described.value
        if not node.is_element:
            return SessionResult.success(None)

        unique_selector = generate_unique_selector(node, sibling_index)
        attributes = self._build_attributes(node)

        styles = await self._get_styles(node_id)
        if not styles.ok:
            return SessionResult.failure(f"Failed to get styles for {unique_selector}: {styles.error}")

        pseudo_states = await self._capture_pseudo_states(node_id, identifier)

        children: list[ElementNode] = []
        if self.options.include_children:
            children_result = await self._traverse_children(node, unique_selector)
            if not children_result.ok:
                return children_result
            children = children_result.value

        return SessionResult.success(ElementNode(
            node_name=node.node_name,
            unique_selector=unique_selector,
            computed_styles=styles.value,
            pseudo_states=pseudo_states or None,
            attributes=attributes,
            children=children,
            text_content=node.node_value or None,
        ))
