"""
Loop API — Realtime Connection
================================

What:  The one persistent socket.io connection this process keeps to the
       realtime server, plus its observable connection state.
How:   Wraps a socketio.AsyncClient. open() connects over the websocket
       transport; the client's connect/disconnect events drive the state.
Who:   Created by create_app(), opened and closed by the lifespan, handed to
       route handlers through the get_realtime dependency.

Lifecycle:
    constructed ──open()──▶ open (connected | disconnected) ──close()──▶ closed

    Only the "open" phase is a valid scope. Reading the state, the client
    handle, or emitting/subscribing before open() or after close() raises
    RealtimeScopeError. A missing connection is never reported as a quiet
    "disconnected".

Reconnection is left to the socket.io client (reconnection_attempts).
"""

import logging
from enum import Enum
from typing import Any, Callable, Optional

import socketio
from socketio.exceptions import ConnectionError as SocketConnectionError

logger = logging.getLogger(__name__)


class ConnectionState(str, Enum):
    CONNECTED = "connected"
    DISCONNECTED = "disconnected"


class RealtimeScopeError(RuntimeError):
    """Realtime connection used outside its open()/close() scope."""


class RealtimeConnection:
    """
    Shared duplex connection to the realtime server.

    Args:
        url:    socket.io endpoint to connect to
        client: socket.io client handle; built from reconnection_attempts
                when omitted
        reconnection_attempts: passed to socketio.AsyncClient (0 = forever)

    Usage:
        async with RealtimeConnection("http://localhost:3001") as conn:
            if conn.is_connected:
                await conn.emit("message:reaction", {...})
    """

    def __init__(
        self,
        url: str,
        client: Optional[socketio.AsyncClient] = None,
        reconnection_attempts: int = 5,
    ):
        self.url = url
        self._client = client if client is not None else socketio.AsyncClient(
            reconnection=True,
            reconnection_attempts=reconnection_attempts,
        )
        self._state = ConnectionState.DISCONNECTED
        self._opened = False
        self._closed = False

        self._client.on("connect", self._on_connect)
        self._client.on("disconnect", self._on_disconnect)

    # ── Event handlers ────────────────────────────────────────────────────

    async def _on_connect(self) -> None:
        self._state = ConnectionState.CONNECTED
        logger.info("Realtime connected to %s", self.url)

    async def _on_disconnect(self, *args: Any) -> None:
        # newer socket.io clients pass a disconnect reason
        self._state = ConnectionState.DISCONNECTED
        logger.info("Realtime disconnected from %s %s", self.url, args[0] if args else "")

    # ── Scope ─────────────────────────────────────────────────────────────

    def _require_scope(self) -> None:
        if not self._opened:
            raise RealtimeScopeError("Realtime connection used before open()")
        if self._closed:
            raise RealtimeScopeError("Realtime connection used after close()")

    @property
    def is_open(self) -> bool:
        """True between open() and close(); safe to call at any time."""
        return self._opened and not self._closed

    async def open(self) -> None:
        """
        Connect to the realtime server.

        An unreachable server is logged and leaves the connection open but
        disconnected; startup is never blocked on it.
        """
        if self._opened:
            raise RealtimeScopeError("Realtime connection already opened")
        self._opened = True
        try:
            await self._client.connect(self.url, transports=["websocket"])
        except SocketConnectionError as exc:
            self._state = ConnectionState.DISCONNECTED
            logger.warning("Realtime server %s unreachable: %s", self.url, exc)

    async def close(self) -> None:
        """Disconnect and end the scope. Safe to call more than once."""
        if not self._opened or self._closed:
            self._closed = True
            return
        self._closed = True
        if self._client.connected:
            await self._client.disconnect()
        self._state = ConnectionState.DISCONNECTED

    async def __aenter__(self) -> "RealtimeConnection":
        await self.open()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    # ── Consumer API ──────────────────────────────────────────────────────

    @property
    def state(self) -> ConnectionState:
        self._require_scope()
        return self._state

    @property
    def is_connected(self) -> bool:
        return self.state is ConnectionState.CONNECTED

    @property
    def client(self) -> socketio.AsyncClient:
        """The underlying socket.io handle, for consumers that need it raw."""
        self._require_scope()
        return self._client

    def on(self, event: str, handler: Callable[..., Any]) -> None:
        self._require_scope()
        self._client.on(event, handler)

    async def emit(self, event: str, data: Any = None) -> bool:
        """
        Send an event to the realtime server.

        Returns False, without sending, while disconnected.
        """
        self._require_scope()
        if self._state is not ConnectionState.CONNECTED:
            logger.debug("Realtime disconnected; dropping %s event", event)
            return False
        await self._client.emit(event, data)
        return True
