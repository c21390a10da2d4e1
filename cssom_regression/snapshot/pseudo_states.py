"""
cssom_regression/snapshot/pseudo_states.py

Detection of elements participating in interactive pseudo-class rules.

Detection is best-effort: cross-origin style sheets and selectors the page
cannot parse are skipped. Selector text processing happens here; selector
matching is delegated to the page.
"""

from __future__ import annotations

import re

from pydantic import BaseModel, Field

from cssom_regression.cdp.instrumentation import AbstractInstrumentationSession
from cssom_regression.config import Config
from cssom_regression.data_models.session import DOMNode, SessionResult
from cssom_regression.utils.js_utils import generate_collect_style_rules_js, generate_match_selectors_js
from cssom_regression.utils.logger import get_logger

logger = get_logger(name=__name__)

_OTHER_PSEUDO_TOKEN = re.compile(r"::?[a-zA-Z-]+")
_COMBINATOR_EDGE = re.compile(r"^[+~>]|[+~>]$")


class PseudoStateLookup(BaseModel):
    """
    Result of a detection pass.
    """
    states: dict[str, list[str]] = Field(
        default_factory=dict,
        description="Element identifier -> pseudo-classes with at least one matching rule, discovery order",
    )
    root_identifiers: list[str] = Field(
        default_factory=list,
        description="Identifiers of the scope roots, document order",
    )

    def pseudo_classes_for(self, identifier: str | None) -> list[str]:
        """Return the pseudo-classes recorded for an identifier (empty when unknown)."""
        if identifier is None:
            return []
        return list(self.states.get(identifier, []))

    def root_identifier(self, index: int) -> str | None:
        """Return the identifier of the index-th scope root, if known."""
        if 0 <= index < len(self.root_identifiers):
            return self.root_identifiers[index]
        return None


def _pseudo_class_token(pseudo_class: str) -> re.Pattern[str]:
    """Match `:pseudo` as a whole token (`:focus` does not match `:focus-within`)."""
    return re.compile(rf"(?<!:):{re.escape(pseudo_class)}(?![\w-])(\([^)]*\))?")


def selector_has_pseudo_class(selector_text: str, pseudo_class: str) -> bool:
    """Check whether a selector uses the pseudo-class."""
    return _pseudo_class_token(pseudo_class).search(selector_text) is not None


def extract_base_selectors(selector_text: str, pseudo_class: str) -> list[str]:
    """
    Strip a pseudo-class from a selector list and return the base selectors.
    Other pseudo-class and pseudo-element tokens are removed too; parts that
    begin or end with a combinator, or still contain a colon, are dropped.
    Args:
        selector_text: Selector text of a style rule, e.g. "a:hover, .btn:hover > span".
        pseudo_class: Pseudo-class name without the colon, e.g. "hover".
    Returns:
        Base selectors, e.g. ["a", ".btn > span"].
    """
    stripped = _pseudo_class_token(pseudo_class).sub("", selector_text)
    stripped = _OTHER_PSEUDO_TOKEN.sub("", stripped)

    base_selectors: list[str] = []
    for part in stripped.split(","):
        base = " ".join(part.split())
        if not base or _COMBINATOR_EDGE.search(base) or ":" in base:
            continue
        if base not in base_selectors:
            base_selectors.append(base)
    return base_selectors


def generate_element_identifier(node: DOMNode, element_index: int) -> str:
    """
    Build the detection-pass identifier for a described node.
    Mirrors the identifier computed in the page: tag, #id, .classes, @index
    among the parent's element children.
    Args:
        node: The described element.
        element_index: Index among the parent's element children.
    Returns:
        The identifier, e.g. "button#save.btn.primary@2".
    """
    parts = [node.node_name.lower()]
    element_id = node.get_attribute("id")
    if element_id:
        parts.append(f"#{element_id}")
    classes = (node.get_attribute("class") or "").split()
    if classes:
        parts.append("." + ".".join(classes))
    parts.append(f"@{element_index}")
    return "".join(parts)


class PseudoStateDetector:
    """
    Finds elements in a scope that participate in interactive pseudo-class rules.

    Usage:
        detector = PseudoStateDetector(session=session)
        lookup = (await detector.detect("nav")).unwrap()
        lookup.pseudo_classes_for("a.link@0")  # ["hover", "focus"]
    """

    def __init__(
        self,
        session: AbstractInstrumentationSession,
        pseudo_classes: list[str] | None = None,
    ) -> None:
        """
        Initialize PseudoStateDetector.
        Args:
            session: Instrumentation session for the live document.
            pseudo_classes: Pseudo-classes to look for (defaults to Config.PSEUDO_CLASSES).
        """
        self.session = session
        self.pseudo_classes = list(pseudo_classes) if pseudo_classes is not None else list(Config.PSEUDO_CLASSES)

    def collect_base_selectors(self, selector_texts: list[str]) -> list[tuple[str, str]]:
        """
        Turn rule selector texts into (base selector, pseudo-class) pairs, discovery order.
        """
        pairs: list[tuple[str, str]] = []
        for selector_text in selector_texts:
            for pseudo_class in self.pseudo_classes:
                if not selector_has_pseudo_class(selector_text, pseudo_class):
                    continue
                for base in extract_base_selectors(selector_text, pseudo_class):
                    if (base, pseudo_class) not in pairs:
                        pairs.append((base, pseudo_class))
        return pairs

    async def detect(self, scope_selector: str) -> SessionResult[PseudoStateLookup]:
        """
        Detect pseudo-class participation for every element in the scope.
        Args:
            scope_selector: CSS selector of the scope roots; descendants are included.
        Returns:
            The lookup, or a failure if the page could not be evaluated.
        """
        collected = await self.session.evaluate(generate_collect_style_rules_js(scope_selector))
        if not collected.ok:
            return SessionResult.failure(f"Pseudo-state detection failed: {collected.error}")

        payload = collected.value or {}
        root_identifiers = [str(identifier) for identifier in payload.get("rootIdentifiers", [])]
        pairs = self.collect_base_selectors([str(text) for text in payload.get("selectorTexts", [])])
        logger.debug("🔍 %d base selectors with pseudo-class rules in scope %s", len(pairs), scope_selector)

        if not pairs:
            return SessionResult.success(PseudoStateLookup(root_identifiers=root_identifiers))

        base_selectors: list[str] = []
        for base, _ in pairs:
            if base not in base_selectors:
                base_selectors.append(base)

        matched = await self.session.evaluate(generate_match_selectors_js(scope_selector, base_selectors))
        if not matched.ok:
            return SessionResult.failure(f"Pseudo-state detection failed: {matched.error}")

        matches: dict[str, list[str]] = matched.value or {}
        states: dict[str, list[str]] = {}
        for base, pseudo_class in pairs:
            for identifier in matches.get(base, []):
                recorded = states.setdefault(identifier, [])
                if pseudo_class not in recorded:
                    recorded.append(pseudo_class)

        logger.info("🎯 Detected pseudo-states on %d elements", len(states))
        return SessionResult.success(PseudoStateLookup(states=states, root_identifiers=root_identifiers))
