"""
cssom_regression/snapshot/capture.py

Snapshot capture entry point.
"""

import asyncio
from typing import Any

from cssom_regression.cdp.instrumentation import AbstractInstrumentationSession
from cssom_regression.data_models.session import SessionResult
from cssom_regression.data_models.snapshot import CaptureOptions, Snapshot
from cssom_regression.snapshot.pseudo_states import PseudoStateDetector, PseudoStateLookup
from cssom_regression.snapshot.traversal import ElementTraverser, NodeLockRegistry
from cssom_regression.utils.logger import get_logger

logger = get_logger(name=__name__)


async def capture_snapshot(
    session: AbstractInstrumentationSession,
    options: CaptureOptions | None = None,
    **option_overrides: Any,
) -> SessionResult[Snapshot]:
    """
    Capture a structural and style snapshot of every element matching the selector.

    Any failure anywhere in the traversal fails the whole capture; partial trees
    are never returned. A selector matching nothing is a failure too.

    Args:
        session: Instrumentation session for the live document.
        options: Capture options; keyword overrides are applied on top
            (e.g. `capture_snapshot(session, selector="nav", include_pseudo_states=False)`).
    Returns:
        The snapshot, or a failure describing every error encountered.
    Raises:
        pydantic.ValidationError: If an override is unknown or has the wrong type.
    """
    options = options or CaptureOptions()
    if option_overrides:
        options = CaptureOptions.model_validate({**dict(options), **option_overrides})
    logger.info("📸 Capturing snapshot for selector: %s", options.selector)

    # 1. pseudo-state detection over the whole scope, before exclusion
    pseudo_lookup: PseudoStateLookup | None = None
    if options.include_pseudo_states:
        detector = PseudoStateDetector(session=session, pseudo_classes=options.pseudo_classes)
        detected = await detector.detect(options.selector)
        if not detected.ok:
            return detected
        pseudo_lookup = detected.value

    # 2. resolve the roots
    document_root = await session.get_document_root()
    if not document_root.ok:
        return document_root

    queried = await session.query_selector_all(document_root.value.node_id, options.selector)
    if not queried.ok:
        return queried
    node_ids: list[int] = queried.value
    if not node_ids:
        logger.error("❌ No elements found for selector: %s", options.selector)
        return SessionResult.failure(f"No elements found for selector: {options.selector}")

    # 3. traverse every root concurrently
    traverser = ElementTraverser(
        session=session,
        options=options,
        pseudo_lookup=pseudo_lookup,
        locks=NodeLockRegistry(),
    )
    results = await asyncio.gather(*(
        traverser.traverse(
            node_id=node_id,
            sibling_index=0,
            identifier=pseudo_lookup.root_identifier(index) if pseudo_lookup else None,
        )
        for index, node_id in enumerate(node_ids)
    ))

    # 4. all-or-nothing
    failures = [result for result in results if not result.ok]
    if failures:
        logger.error("❌ Snapshot capture failed for %d of %d roots", len(failures), len(results))
        return SessionResult.aggregate("Failed to traverse elements", failures)

    url = await session.get_url()
    if not url.ok:
        return url

    trees = [result.value for result in results if result.value is not None]
    logger.info("✅ Snapshot captured: %d trees from %s", len(trees), url.value)
    return SessionResult.success(Snapshot(url=url.value, trees=trees))
