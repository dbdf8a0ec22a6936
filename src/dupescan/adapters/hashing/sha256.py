# Licensed under the Apache License, Version 2.0
from __future__ import annotations

import hashlib
from typing import BinaryIO

from ...ports.hasher import HasherPort

DEFAULT_CHUNK_SIZE = 4096


class SHA256Hasher(HasherPort):
    """Cryptographic content fingerprint (full-file SHA-256, lowercase hex)."""

    def __init__(self, chunk_size: int = DEFAULT_CHUNK_SIZE) -> None:
        if chunk_size <= 0:
            raise ValueError("chunk_size must be positive")
        self._chunk_size = int(chunk_size)

    @property
    def name(self) -> str:
        return "sha256"

    def hash_stream(self, stream: BinaryIO) -> str:
        h = hashlib.sha256()
        while True:
            chunk = stream.read(self._chunk_size)
            if not chunk:
                break
            h.update(chunk)
        return h.hexdigest()
