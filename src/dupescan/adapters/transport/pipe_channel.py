# Licensed under the Apache License, Version 2.0
from __future__ import annotations

from multiprocessing.connection import Connection

from ...domain.errors import TransportError
from ...ports.transport import ChannelPort


class PipeChannel(ChannelPort):
    """
    ChannelPort over one end of a `multiprocessing.Pipe`.

    Connection errors are surfaced as TransportError; a peer that closed its
    end (or died) shows up as EOF on the next recv.
    """

    def __init__(self, conn: Connection, peer: str = "peer") -> None:
        self._conn = conn
        self._peer = peer

    def send(self, payload: bytes) -> None:
        try:
            self._conn.send_bytes(payload)
        except (OSError, ValueError) as e:
            raise TransportError(f"Send to {self._peer} failed: {e}") from e

    def recv(self) -> bytes:
        try:
            return self._conn.recv_bytes()
        except EOFError as e:
            raise TransportError(f"Channel to {self._peer} closed unexpectedly") from e
        except (OSError, ValueError) as e:
            raise TransportError(f"Receive from {self._peer} failed: {e}") from e

    def close(self) -> None:
        if not self._conn.closed:
            self._conn.close()

    def __enter__(self) -> PipeChannel:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
