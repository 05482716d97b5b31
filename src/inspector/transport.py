# src/inspector/transport.py
import asyncio
import json
import logging
import platform
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Callable, Dict, Optional

import aiohttp

logger = logging.getLogger(__name__)

MAX_RETRY_ATTEMPTS = 5
RETRY_DELAY = 2.0
NORMAL_CLOSURE = 1000

StatusCallback = Callable[[bool, Optional[int]], None]
MessageCallback = Callable[[Dict[str, Any]], None]


class LinkState(str, Enum):
    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    CONNECTED = "connected"


class ServerLink:
    """
    WebSocket link from the inspector to the relay server.

    Lifecycle: DISCONNECTED -> CONNECTING -> CONNECTED -> DISCONNECTED.
    Connection attempts are bounded by `max_retry_attempts`; the counter resets
    once a connection is established. An abnormal close (code != 1000)
    triggers a reconnect while attempts remain.
    """

    def __init__(
            self,
            server_url: str,
            max_retry_attempts: int = MAX_RETRY_ATTEMPTS,
            retry_delay: float = RETRY_DELAY,
            on_status: Optional[StatusCallback] = None,
            on_message: Optional[MessageCallback] = None
    ):
        self.server_url = server_url
        self.max_retry_attempts = max_retry_attempts
        self.retry_delay = retry_delay
        self.on_status = on_status
        self.on_message = on_message

        self.state = LinkState.DISCONNECTED
        self.attempts = 0
        self.session: Optional[aiohttp.ClientSession] = None
        self.ws: Optional[aiohttp.ClientWebSocketResponse] = None
        self._reader: Optional[asyncio.Task] = None
        self._closing = False

    async def __aenter__(self):
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    @property
    def connected(self) -> bool:
        return self.state is LinkState.CONNECTED and self.ws is not None and not self.ws.closed

    def _update_status(self, connected: bool, attempt: Optional[int] = None) -> None:
        if not self.on_status:
            return
        try:
            self.on_status(connected, attempt)
        except Exception as e:
            logger.debug(f"Status callback failed: {e}")

    async def _ensure_session(self) -> aiohttp.ClientSession:
        if not self.session or self.session.closed:
            self.session = aiohttp.ClientSession()
        return self.session

    # --- CONNECTION ---

    def reset_attempts(self) -> None:
        """Explicit (re)connect request from the user."""
        self.attempts = 0

    async def connect(self) -> bool:
        """
        Explicit connect request: re-arms a closed link, then tries until it
        succeeds or the attempt budget is spent.
        """
        self._closing = False
        return await self._connect()

    async def _connect(self) -> bool:
        if self.connected:
            return True

        while self.attempts < self.max_retry_attempts and not self._closing:
            self.attempts += 1
            self.state = LinkState.CONNECTING
            logger.info(f"Attempting to connect ({self.attempts}/{self.max_retry_attempts})")
            self._update_status(False, self.attempts)

            try:
                session = await self._ensure_session()
                self.ws = await session.ws_connect(self.server_url)
            except (aiohttp.ClientError, OSError, asyncio.TimeoutError) as e:
                logger.warning(f"Connection to {self.server_url} failed: {e}")
                self.state = LinkState.DISCONNECTED
                self._update_status(False)
                if self.attempts < self.max_retry_attempts:
                    await asyncio.sleep(self.retry_delay)
                continue

            if self._closing:
                # close() ran while the handshake was in flight
                await self.ws.close()
                break

            logger.info("Connected to relay server")
            self.attempts = 0
            self.state = LinkState.CONNECTED
            self._update_status(True)
            self._reader = asyncio.create_task(self._read_loop(self.ws))
            return True

        self.state = LinkState.DISCONNECTED
        if not self._closing:
            logger.warning("Max connection attempts reached")
        self._update_status(False)
        return False

    async def _read_loop(self, ws: aiohttp.ClientWebSocketResponse) -> None:
        async for msg in ws:
            if msg.type == aiohttp.WSMsgType.TEXT:
                try:
                    message = json.loads(msg.data)
                except json.JSONDecodeError:
                    logger.warning("Ignoring malformed message from server")
                    continue
                if self.on_message:
                    try:
                        self.on_message(message)
                    except Exception as e:
                        logger.error(f"Error processing server message: {e}", exc_info=True)
            elif msg.type == aiohttp.WSMsgType.ERROR:
                logger.error(f"WebSocket error: {ws.exception()}")
                break

        code = ws.close_code
        logger.info(f"Disconnected from server: {code}")
        self.state = LinkState.DISCONNECTED
        self._update_status(False)

        if self._closing or code == NORMAL_CLOSURE or self.attempts >= self.max_retry_attempts:
            return
        await asyncio.sleep(self.retry_delay)
        if not self._closing:
            await self._connect()

    async def close(self) -> None:
        """Shuts the link down for good; a reconnect already scheduled is cancelled."""
        self._closing = True
        reader, self._reader = self._reader, None
        if reader is not None and reader is not asyncio.current_task() and not reader.done():
            reader.cancel()
            try:
                await reader
            except asyncio.CancelledError:
                pass
        if self.ws is not None and not self.ws.closed:
            await self.ws.close()
        if self.session and not self.session.closed:
            await self.session.close()
        self.state = LinkState.DISCONNECTED

    # --- MESSAGING ---

    async def send(self, action: str, data: Dict[str, Any]) -> bool:
        """Sends an {action, data} envelope. Returns False when not connected."""
        if not self.connected:
            logger.warning("WebSocket not connected")
            return False
        message = {
            "action": action,
            "data": {**data, "timestamp": datetime.now(timezone.utc).isoformat()},
        }
        try:
            await self.ws.send_str(json.dumps(message))
            return True
        except (aiohttp.ClientError, ConnectionResetError, RuntimeError) as e:
            logger.error(f"Error sending to server: {e}")
            return False

    async def send_element_selected(self, element_info: Dict[str, Any]) -> bool:
        return await self.send("elementSelected", process_element_data(element_info))

    async def check_connectivity(self, http_url: str, client: Optional[Dict[str, Any]] = None) -> bool:
        """POSTs to the server's /api/connect endpoint."""
        session = await self._ensure_session()
        try:
            async with session.post(f"{http_url.rstrip('/')}/api/connect", json=client or {}) as resp:
                if resp.status != 200:
                    return False
                body = await resp.json()
                return bool(body.get("success"))
        except (aiohttp.ClientError, OSError, asyncio.TimeoutError) as e:
            logger.warning(f"Connectivity check failed: {e}")
            return False


def process_element_data(element_info: Dict[str, Any]) -> Dict[str, Any]:
    """Adds the sending client's details to a selected element's payload."""
    return {
        **element_info,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "browserInfo": {
            "userAgent": f"elementscope aiohttp/{aiohttp.__version__}",
            "platform": platform.platform(),
        },
    }
