"""
cssom_regression/scripts/capture_snapshot.py

Script for capturing a snapshot of the current page of a running Chrome.
"""

import asyncio
import sys
from argparse import ArgumentParser, Namespace

from cssom_regression.cdp.async_cdp_session import AsyncCDPSession
from cssom_regression.cdp.connection import get_browser_websocket_url
from cssom_regression.cdp.instrumentation import CDPInstrumentationSession
from cssom_regression.config import Config
from cssom_regression.data_models.snapshot import CaptureOptions
from cssom_regression.snapshot.capture import capture_snapshot
from cssom_regression.snapshot.io import save_snapshot
from cssom_regression.utils.exceptions import CSSOMRegressionError
from cssom_regression.utils.logger import get_logger

logger = get_logger(__name__)


def build_parser() -> ArgumentParser:
    parser = ArgumentParser(description="Capture a computed-style snapshot of the current page.")
    parser.add_argument("--selector", type=str, default="body", help="CSS selector of the root elements.")
    parser.add_argument("--output", type=str, required=True, help="Path of the snapshot JSON to write.")
    parser.add_argument("--exclude-attribute", action="append", default=[], help="Attribute name to drop (repeatable).")
    parser.add_argument("--exclude-element", action="append", default=[], help="Tag name to prune (repeatable).")
    parser.add_argument("--no-children", action="store_true", help="Capture only the matched roots.")
    parser.add_argument("--no-pseudo-states", action="store_true", help="Skip pseudo-state detection.")
    parser.add_argument(
        "--remote-debugging-address",
        type=str,
        default=Config.REMOTE_DEBUGGING_ADDRESS,
        help="Chrome DevTools address.",
    )
    return parser


def build_capture_options(args: Namespace) -> CaptureOptions:
    return CaptureOptions(
        selector=args.selector,
        include_children=not args.no_children,
        include_pseudo_states=not args.no_pseudo_states,
        exclude_attributes=args.exclude_attribute,
        exclude_elements=args.exclude_element,
    )


async def run(args: Namespace) -> int:
    try:
        ws_url = get_browser_websocket_url(args.remote_debugging_address)
        async with AsyncCDPSession(ws_url=ws_url) as cdp_session:
            result = await capture_snapshot(CDPInstrumentationSession(cdp_session), build_capture_options(args))
    except (CSSOMRegressionError, TimeoutError) as e:
        logger.error("❌ Browser session failed: %s", e)
        return 1

    if not result.ok:
        logger.error("❌ Capture failed: %s", result.error)
        return 1

    save_snapshot(result.value, args.output)
    return 0


def main() -> None:
    args = build_parser().parse_args()
    sys.exit(asyncio.run(run(args)))


if __name__ == "__main__":
    main()
