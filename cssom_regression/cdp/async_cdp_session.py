"""
cssom_regression/cdp/async_cdp_session.py

Asynchronous CDP client over a single browser WebSocket connection.
"""

import asyncio
import json
from typing import Any

from websockets.asyncio.client import connect, ClientConnection

from cssom_regression.config import Config
from cssom_regression.utils.exceptions import BrowserConnectionError, CDPCommandError
from cssom_regression.utils.logger import get_logger

logger = get_logger(name=__name__)


class AsyncCDPSession:
    """
    Asynchronous CDP client.
    Connects to the browser WebSocket, attaches to the first page target and
    routes command replies back to their callers.

    Usage:
        async with AsyncCDPSession(ws_url=ws_url) as cdp:
            result = await cdp.send_and_wait("DOM.getDocument", {"depth": -1})
    """

    # Magic methods ________________________________________________________________________________________________________

    def __init__(
        self,
        ws_url: str,
        command_timeout: float | None = None,
    ) -> None:
        """
        Initialize AsyncCDPSession.
        Args:
            ws_url: Browser-level WebSocket URL (from /json/version).
            command_timeout: Default timeout in seconds for send_and_wait.
        """
        self.ws_url = ws_url
        self.command_timeout = command_timeout if command_timeout is not None else Config.CDP_COMMAND_TIMEOUT
        self.ws: ClientConnection | None = None
        self.seq = 0  # sequence ID for CDP commands

        # response tracking for CDP commands
        self.pending_responses: dict[int, asyncio.Future] = {}  # command ID -> future
        self.pending_methods: dict[int, str] = {}  # command ID -> method name

        # track enabled CDP domains to avoid duplicate enables
        self._enabled_domains: set[str] = set()

        # page-level session ID obtained via Target.attachToTarget (flatten mode)
        self.page_session_id: str | None = None

        self._receiver_task: asyncio.Task | None = None

    async def __aenter__(self) -> "AsyncCDPSession":
        await self.connect()
        return self

    async def __aexit__(self, exc_type: Any, exc: Any, tb: Any) -> None:
        await self.close()


    # Private methods ______________________________________________________________________________________________________

    async def _attach_to_page(self) -> None:
        """
        Find the first page target and attach to it to get a page-level sessionId.
        """
        targets_result = await self.send_and_wait(method="Target.getTargets", timeout=5.0)
        cdp_target_id: str | None = None
        for target_info in (targets_result or {}).get("targetInfos", []):
            if target_info.get("type") == "page":
                cdp_target_id = target_info.get("targetId")
                logger.info("✅ Found page targetId: %s (url: %s)", cdp_target_id, target_info.get("url", "unknown"))
                break

        if not cdp_target_id:
            raise BrowserConnectionError("No page target found")

        attach_result = await self.send_and_wait(
            method="Target.attachToTarget",
            params={"targetId": cdp_target_id, "flatten": True},
            timeout=5.0,
        )
        if not attach_result or "sessionId" not in attach_result:
            raise BrowserConnectionError("No sessionId in Target.attachToTarget response")
        self.page_session_id = attach_result["sessionId"]
        logger.debug("✅ Attached to page target, sessionId: %s", self.page_session_id)

    def _handle_command_reply(self, msg: dict) -> None:
        """Resolve the pending future of a command reply."""
        cmd_id = msg.get("id")
        future = self.pending_responses.pop(cmd_id, None)
        method = self.pending_methods.pop(cmd_id, "unknown")
        if future is None or future.done():
            logger.debug("📥 Command reply not handled: id=%s", cmd_id)
            return

        if "error" in msg:
            future.set_exception(CDPCommandError(method=method, error=msg["error"]))
        else:
            future.set_result(msg.get("result"))

    async def _message_receiver(self) -> None:
        """Receive and dispatch WebSocket messages until the connection closes."""
        assert self.ws is not None
        try:
            async for message in self.ws:
                try:
                    msg = json.loads(message)
                except json.JSONDecodeError:
                    logger.debug("⚠️ Skipping non-JSON frame")
                    continue
                if "id" in msg:
                    self._handle_command_reply(msg)
        except asyncio.CancelledError:
            raise
        except Exception as e:
            logger.error("❌ Error in message receiver: %s", e, exc_info=True)
        finally:
            # fail everything still waiting; the socket is gone
            for future in self.pending_responses.values():
                if not future.done():
                    future.set_exception(BrowserConnectionError("CDP connection closed"))
            self.pending_responses.clear()
            self.pending_methods.clear()


    # Public methods _______________________________________________________________________________________________________

    async def connect(self) -> None:
        """Open the WebSocket, start the receiver and attach to the page target."""
        logger.info("🔌 Connecting to CDP: %s", self.ws_url)
        try:
            self.ws = await connect(uri=self.ws_url, max_size=None)
        except OSError as e:
            raise BrowserConnectionError(f"Failed to connect to {self.ws_url}: {e}") from e
        self._receiver_task = asyncio.create_task(self._message_receiver())
        await self._attach_to_page()
        logger.info("✅ CDP session ready")

    async def close(self) -> None:
        """Stop the receiver and close the WebSocket."""
        if self._receiver_task is not None:
            self._receiver_task.cancel()
            try:
                await self._receiver_task
            except asyncio.CancelledError:
                pass
            self._receiver_task = None
        if self.ws is not None:
            await self.ws.close()
            self.ws = None
        self._enabled_domains.clear()
        logger.info("🔌 CDP connection closed")

    async def enable_domain(self, domain: str, params: dict | None = None) -> None:
        """
        Enable a CDP domain idempotently (skip if already enabled).
        Args:
            domain: The CDP domain name (e.g., "DOM", "CSS").
            params: Optional parameters for the enable command.
        """
        if domain in self._enabled_domains:
            logger.debug("⏭️ Domain %s already enabled, skipping", domain)
            return
        await self.send_and_wait(method=f"{domain}.enable", params=params)
        self._enabled_domains.add(domain)
        logger.debug("✅ Domain %s enabled", domain)

    async def send(
        self,
        method: str,
        params: dict | None = None,
        future: asyncio.Future | None = None,
    ) -> int:
        """
        Send CDP command and return sequence ID.
        Args:
            method (str): The CDP method to send. For example, "DOM.describeNode".
            params (dict | None): The parameters to send with the command.
            future (asyncio.Future | None): Registered for the reply before the frame is sent.
        Returns:
            int: The sequence ID of the command.
        """
        if not self.ws:
            raise BrowserConnectionError("WebSocket not connected")

        self.seq += 1
        cmd_id = self.seq
        msg: dict[str, Any] = {
            "id": cmd_id,
            "method": method,
            "params": params or {},
        }
        # Target domain commands are browser-level; everything else goes to the attached page
        if self.page_session_id and not method.startswith("Target."):
            msg["sessionId"] = self.page_session_id

        if future is not None:
            self.pending_responses[cmd_id] = future
            self.pending_methods[cmd_id] = method

        await self.ws.send(json.dumps(msg))
        return cmd_id

    async def send_and_wait(
        self,
        method: str,
        params: dict | None = None,
        timeout: float | None = None,
    ) -> dict | None:
        """
        Send CDP command and wait for its reply.
        Args:
            method: The CDP method to send.
            params: The parameters to send with the command.
            timeout: Timeout in seconds (defaults to the session's command timeout).
        Returns:
            The result from the CDP command.
        Raises:
            CDPCommandError: If the browser answers with an error.
            TimeoutError: If no reply arrives in time.
        """
        timeout = timeout if timeout is not None else self.command_timeout
        future: asyncio.Future = asyncio.get_running_loop().create_future()
        cmd_id: int | None = None
        try:
            cmd_id = await self.send(method, params, future=future)
            return await asyncio.wait_for(fut=future, timeout=timeout)
        except asyncio.TimeoutError:
            raise TimeoutError(f"CDP command {method} timed out after {timeout} seconds")
        finally:
            if cmd_id is not None:
                self.pending_responses.pop(cmd_id, None)
                self.pending_methods.pop(cmd_id, None)

    async def get_current_url(self) -> str | None:
        """
        Return the current page URL. Uses navigation history first, then JS evaluation.
        """
        browser_history = await self.send_and_wait(method="Page.getNavigationHistory")
        current_url: str | None = None
        if browser_history:
            current_index = browser_history.get("currentIndex", 0)
            entries = browser_history.get("entries", [])
            if 0 <= current_index < len(entries):
                current_url = entries[current_index].get("url")
        if not current_url:
            eval_result = await self.send_and_wait(
                method="Runtime.evaluate",
                params={"expression": "window.location.href", "returnByValue": True},
            )
            if isinstance(eval_result, dict):
                current_url = eval_result.get("result", {}).get("value")
        return current_url
