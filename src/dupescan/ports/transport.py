# Licensed under the Apache License, Version 2.0
from __future__ import annotations

from typing import Protocol


class ChannelPort(Protocol):
    """
    Point-to-point, message-oriented link between the coordinator and one worker.
    Each `send` is delivered as exactly one `recv`, in order.
    """

    def send(self, payload: bytes) -> None: ...

    def recv(self) -> bytes: ...

    def close(self) -> None: ...
