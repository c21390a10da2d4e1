"""
cssom_regression/utils/exceptions.py

Custom exceptions for cssom-regression.

Contains:
- CSSOMRegressionError: Base exception
- SnapshotCaptureError: Capture failed (raised by SessionResult.unwrap)
- SnapshotFormatError: Persisted snapshot could not be parsed
- CDPCommandError: CDP error reply inside the websocket client
- BrowserConnectionError: DevTools endpoint or page target unreachable
"""


class CSSOMRegressionError(Exception):
    """
    Base exception for all cssom-regression errors.
    """


class SnapshotCaptureError(CSSOMRegressionError):
    """
    Raised when a failed capture outcome is unwrapped.
    """


class SnapshotFormatError(CSSOMRegressionError):
    """
    Raised when a persisted snapshot does not match the snapshot shape.
    """


class CDPCommandError(CSSOMRegressionError):
    """
    Raised by the CDP client when the browser answers a command with an error.
    """

    def __init__(self, method: str, error: dict) -> None:
        self.method = method
        self.error = error
        super().__init__(f"CDP command {method} failed: {error.get('message', error)}")


class BrowserConnectionError(CSSOMRegressionError):
    """
    Raised when unable to reach the browser's DevTools endpoint or find a page target.
    """
