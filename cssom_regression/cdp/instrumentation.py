"""
cssom_regression/cdp/instrumentation.py

The instrumentation-session seam used by capture.

AbstractInstrumentationSession names the capabilities capture needs from a
live document. CDPInstrumentationSession implements them over an
AsyncCDPSession and converts every client exception into a failed
SessionResult.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from cssom_regression.cdp.async_cdp_session import AsyncCDPSession
from cssom_regression.data_models.session import DOMNode, MatchedStyles, SessionResult
from cssom_regression.utils.logger import get_logger

logger = get_logger(name=__name__)


class AbstractInstrumentationSession(ABC):
    """
    Capabilities capture needs from a live document.
    Implementations never raise for boundary failures; they return a failed SessionResult.
    """

    @abstractmethod
    async def get_document_root(self) -> SessionResult[DOMNode]:
        """Return the document root node."""

    @abstractmethod
    async def query_selector_all(self, root_id: int, selector: str) -> SessionResult[list[int]]:
        """Return node ids matching selector under root_id, document order."""

    @abstractmethod
    async def describe_node(self, node_id: int) -> SessionResult[DOMNode]:
        """Return the node with one level of children."""

    @abstractmethod
    async def get_matched_styles(self, node_id: int) -> SessionResult[MatchedStyles]:
        """Return directly matched and inherited rules for the node."""

    @abstractmethod
    async def force_pseudo_state(self, node_id: int, active_classes: list[str]) -> SessionResult[None]:
        """Force the given pseudo-classes on the node; an empty list clears them."""

    @abstractmethod
    async def evaluate(self, expression: str) -> SessionResult[Any]:
        """Evaluate a JavaScript expression in the page and return its value."""

    @abstractmethod
    async def get_url(self) -> SessionResult[str]:
        """Return the URL of the current document."""


class CDPInstrumentationSession(AbstractInstrumentationSession):
    """
    Instrumentation session backed by the Chrome DevTools Protocol.
    """

    # Magic methods ________________________________________________________________________________________________________

    def __init__(self, cdp_session: AsyncCDPSession) -> None:
        """
        Initialize CDPInstrumentationSession.
        Args:
            cdp_session: A connected AsyncCDPSession attached to the page.
        """
        self.cdp_session = cdp_session


    # Private methods ______________________________________________________________________________________________________

    async def _call(self, method: str, params: dict | None = None) -> SessionResult[dict]:
        """Send a command after enabling DOM and CSS, converting exceptions into failures."""
        try:
            await self.cdp_session.enable_domain("DOM")
            await self.cdp_session.enable_domain("CSS")
            result = await self.cdp_session.send_and_wait(method=method, params=params)
        except Exception as e:
            logger.debug("❌ %s failed: %s", method, e)
            return SessionResult.failure(f"{method} failed: {e}")
        return SessionResult.success(result or {})


    # Public methods _______________________________________________________________________________________________________

    async def get_document_root(self) -> SessionResult[DOMNode]:
        result = await self._call("DOM.getDocument", {"depth": -1, "pierce": True})
        if not result.ok:
            return result
        try:
            return SessionResult.success(DOMNode.model_validate(result.value["root"]))
        except (KeyError, ValueError) as e:
            return SessionResult.failure(f"DOM.getDocument returned an unexpected payload: {e}")

    async def query_selector_all(self, root_id: int, selector: str) -> SessionResult[list[int]]:
        result = await self._call("DOM.querySelectorAll", {"nodeId": root_id, "selector": selector})
        if not result.ok:
            return result
        return SessionResult.success(list(result.value.get("nodeIds", [])))

    async def describe_node(self, node_id: int) -> SessionResult[DOMNode]:
        result = await self._call("DOM.describeNode", {"nodeId": node_id, "depth": 1, "pierce": True})
        if not result.ok:
            return result
        try:
            node = DOMNode.model_validate(result.value["node"])
        except (KeyError, ValueError) as e:
            return SessionResult.failure(f"DOM.describeNode returned an unexpected payload: {e}")
        # describeNode answers with nodeId 0; keep the id the caller asked for
        return SessionResult.success(node.model_copy(update={"node_id": node_id}))

    async def get_matched_styles(self, node_id: int) -> SessionResult[MatchedStyles]:
        result = await self._call("CSS.getMatchedStylesForNode", {"nodeId": node_id})
        if not result.ok:
            return result
        try:
            return SessionResult.success(MatchedStyles.model_validate(result.value))
        except ValueError as e:
            return SessionResult.failure(f"CSS.getMatchedStylesForNode returned an unexpected payload: {e}")

    async def force_pseudo_state(self, node_id: int, active_classes: list[str]) -> SessionResult[None]:
        result = await self._call(
            "CSS.forcePseudoState",
            {"nodeId": node_id, "forcedPseudoClasses": list(active_classes)},
        )
        if not result.ok:
            return result
        return SessionResult.success(None)

    async def evaluate(self, expression: str) -> SessionResult[Any]:
        try:
            result = await self.cdp_session.send_and_wait(
                method="Runtime.evaluate",
                params={
                    "expression": expression,
                    "returnByValue": True,
                    "awaitPromise": True,
                },
            )
        except Exception as e:
            return SessionResult.failure(f"Runtime.evaluate failed: {e}")

        result = result or {}
        if "exceptionDetails" in result:
            details = result["exceptionDetails"]
            message = details.get("exception", {}).get("description") or details.get("text", "unknown exception")
            return SessionResult.failure(f"Runtime.evaluate raised: {message}")
        return SessionResult.success(result.get("result", {}).get("value"))

    async def get_url(self) -> SessionResult[str]:
        try:
            url = await self.cdp_session.get_current_url()
        except Exception as e:
            return SessionResult.failure(f"Failed to get current URL: {e}")
        if not url:
            return SessionResult.failure("Current URL is not available")
        return SessionResult.success(url)
