import logging
from contextlib import AsyncExitStack
from typing import Optional

import httpx
from httpx_ws import (
    AsyncWebSocketSession,
    HTTPXWSException,
    WebSocketInvalidTypeReceived,
    aconnect_ws,
)

from .errors import ProtocolDecodeError, TransportError

logger = logging.getLogger(__name__)

DEFAULT_CONNECT_TIMEOUT = 10.0


class WebSocketTransport:
    """
    A text-frame channel over a WebSocket connection, built on httpx-ws.

    Use ``WebSocketTransport.connect`` to create one; the transport owns both
    the HTTP client and the WebSocket session and releases them on ``close``.
    """

    def __init__(self, ws: AsyncWebSocketSession, exit_stack: AsyncExitStack):
        self._ws = ws
        self._exit_stack = exit_stack
        self._closed = False

    @classmethod
    async def connect(
        cls, url: str, timeout: Optional[float] = None
    ) -> "WebSocketTransport":
        """
        Open a WebSocket connection to ``url``.

        Args:
            url: A ws:// or wss:// endpoint.
            timeout: Seconds allowed for the connection to be established.

        Raises:
            TransportError: If the connection or the upgrade fails.
        """
        connect_timeout = DEFAULT_CONNECT_TIMEOUT if timeout is None else timeout
        exit_stack = AsyncExitStack()
        try:
            client = await exit_stack.enter_async_context(
                httpx.AsyncClient(timeout=httpx.Timeout(connect_timeout, read=None))
            )
            ws = await exit_stack.enter_async_context(aconnect_ws(url, client))
        except (httpx.HTTPError, HTTPXWSException, OSError) as e:
            logger.exception(f"WebSocket connection to {url} failed")
            await exit_stack.aclose()
            raise TransportError(f"Could not connect to {url}: {e}") from e

        logger.debug(f"Connected to {url}")
        return cls(ws, exit_stack)

    @property
    def closed(self) -> bool:
        return self._closed

    def _ensure_open(self) -> None:
        if self._closed:
            raise TransportError("The WebSocket connection is closed")

    async def send_text(self, data: str) -> None:
        self._ensure_open()
        try:
            await self._ws.send_text(data)
        except (HTTPXWSException, OSError) as e:
            raise TransportError(f"Failed to send frame: {e}") from e

    async def receive_text(self) -> str:
        self._ensure_open()
        try:
            return await self._ws.receive_text()
        except WebSocketInvalidTypeReceived as e:
            raise ProtocolDecodeError(f"Expected a text frame: {e}") from e
        except (HTTPXWSException, OSError) as e:
            raise TransportError(f"Failed to receive frame: {e}") from e

    async def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        try:
            await self._exit_stack.aclose()
        except (httpx.HTTPError, HTTPXWSException, OSError) as e:
            raise TransportError(f"Failed to close the connection: {e}") from e
