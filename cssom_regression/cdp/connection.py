"""
cssom_regression/cdp/connection.py

Browser WebSocket URL discovery over the DevTools HTTP endpoint.
"""

from urllib.parse import urlparse, urlunparse

import requests

from cssom_regression.utils.exceptions import BrowserConnectionError
from cssom_regression.utils.logger import get_logger

logger = get_logger(name=__name__)


def get_browser_websocket_url(remote_debugging_address: str) -> str:
    """Get the normalized WebSocket URL for browser connection.

    Args:
        remote_debugging_address: The Chrome debugging server address (e.g., 'http://127.0.0.1:9222').

    Returns:
        The WebSocket URL for connecting to the browser.

    Raises:
        BrowserConnectionError: If unable to get the WebSocket URL from the browser.
    """
    base = remote_debugging_address.rstrip("/")
    try:
        ver = requests.get(f"{base}/json/version", timeout=5)
        ver.raise_for_status()
        data = ver.json()
    except (requests.RequestException, ValueError) as e:
        raise BrowserConnectionError(f"Failed to get browser WebSocket URL: {e}") from e

    raw_ws = data.get("webSocketDebuggerUrl")
    if not raw_ws:
        raise BrowserConnectionError("/json/version missing webSocketDebuggerUrl")

    # normalize netloc to our reachable hostname:port
    parsed = urlparse(raw_ws)
    base_parsed = urlparse(base)
    fixed_netloc = f"{base_parsed.hostname}:{base_parsed.port}" if base_parsed.port else base_parsed.hostname
    ws_url = urlunparse(parsed._replace(netloc=fixed_netloc))

    logger.debug("Raw WebSocket URL: %s", raw_ws)
    logger.debug("Normalized WebSocket URL: %s", ws_url)
    return ws_url
