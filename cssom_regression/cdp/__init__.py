"""
cssom_regression/cdp/__init__.py

Chrome DevTools Protocol client and the instrumentation-session seam.
"""

from cssom_regression.cdp.async_cdp_session import AsyncCDPSession
from cssom_regression.cdp.connection import get_browser_websocket_url
from cssom_regression.cdp.instrumentation import (
    AbstractInstrumentationSession,
    CDPInstrumentationSession,
)

__all__ = [
    "AbstractInstrumentationSession",
    "AsyncCDPSession",
    "CDPInstrumentationSession",
    "get_browser_websocket_url",
]
