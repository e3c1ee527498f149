"""Transport interfaces."""

from __future__ import annotations

from typing import Protocol

from evrimactl.core.model import ConnectionState


class Transport(Protocol):
    @property
    def connection_state(self) -> ConnectionState: ...

    @property
    def is_connected(self) -> bool: ...

    async def connect(self, host: str, port: int) -> None:
        """Open the stream connection, bounded by the transport timeout."""

    async def send(self, data: bytes) -> None: ...

    async def receive(self) -> str:
        """Return exactly one inbound delivery decoded as latin-1."""

    async def send_and_receive(self, data: bytes) -> str: ...

    def disconnect(self) -> None: ...
