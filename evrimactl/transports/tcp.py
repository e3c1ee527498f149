"""TCP transport implementation using asyncio streams."""

from __future__ import annotations

import asyncio
import logging

from evrimactl.core.errors import (
    ConnectionFailedError,
    NotConnectedError,
    RconTimeoutError,
    SocketError,
)
from evrimactl.core.model import ConnectionState
from evrimactl.core.protocol import decode_response

_READ_CHUNK = 65536
LOGGER = logging.getLogger(__name__)


class ProtocolSocket:
    """One stream connection with timeout-bounded operations.

    Every blocking call races ``asyncio.wait_for`` against the configured
    timeout. A timed out or failed connection is torn down before the error is
    raised, so nothing is left half-open.
    """

    def __init__(self, timeout_ms: int = 10000) -> None:
        self.timeout_ms = timeout_ms
        self._reader: asyncio.StreamReader | None = None
        self._writer: asyncio.StreamWriter | None = None
        self._state = ConnectionState.DISCONNECTED

    @property
    def _timeout_s(self) -> float:
        return self.timeout_ms / 1000

    @property
    def connection_state(self) -> ConnectionState:
        return self._state

    @property
    def is_connected(self) -> bool:
        return (
            self._state is ConnectionState.CONNECTED
            and self._writer is not None
            and self._reader is not None
            and not self._writer.is_closing()
            and not self._reader.at_eof()
        )

    async def connect(self, host: str, port: int) -> None:
        if self.is_connected:
            return

        self._cleanup()
        self._state = ConnectionState.CONNECTING
        try:
            reader, writer = await asyncio.wait_for(
                asyncio.open_connection(host, port),
                timeout=self._timeout_s,
            )
        except asyncio.TimeoutError as exc:
            self._cleanup()
            raise RconTimeoutError(f"Connection timeout after {self.timeout_ms}ms") from exc
        except OSError as exc:
            self._cleanup()
            self._state = ConnectionState.ERROR
            raise ConnectionFailedError(f"Connection failed: {exc}", exc) from exc

        self._reader, self._writer = reader, writer
        self._state = ConnectionState.CONNECTED
        LOGGER.debug("TCP connection established to %s:%s", host, port)

    async def send(self, data: bytes) -> None:
        if not self.is_connected or self._writer is None:
            raise NotConnectedError("Socket is not connected")

        try:
            self._writer.write(data)
            await asyncio.wait_for(self._writer.drain(), timeout=self._timeout_s)
        except asyncio.TimeoutError as exc:
            raise RconTimeoutError(f"Send timeout after {self.timeout_ms}ms") from exc
        except OSError as exc:
            raise SocketError(f"Failed to send data: {exc}", exc) from exc

    async def receive(self) -> str:
        if not self.is_connected or self._reader is None:
            raise NotConnectedError("Socket is not connected")

        try:
            data = await asyncio.wait_for(self._reader.read(_READ_CHUNK), timeout=self._timeout_s)
        except asyncio.TimeoutError as exc:
            raise RconTimeoutError(f"Response timeout after {self.timeout_ms}ms") from exc
        except OSError as exc:
            self._cleanup()
            raise SocketError(f"Failed to receive data: {exc}", exc) from exc

        if not data:
            self._cleanup()
            raise SocketError("Connection closed by server")
        return decode_response(data)

    async def send_and_receive(self, data: bytes) -> str:
        await self.send(data)
        return await self.receive()

    def disconnect(self) -> None:
        self._cleanup()

    def _cleanup(self) -> None:
        if self._writer is not None:
            self._writer.close()
        self._reader = None
        self._writer = None
        self._state = ConnectionState.DISCONNECTED
