# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""
Length-prefixed frames exchanged between workers and the coordinator.

Every integer is an unsigned 32-bit big-endian value. Layouts:

    count   := u32 n
    entry   := u32 len, fingerprint[len], u32 k, k * (u32 len, path[len])
    config  := u32 len, root[len], u32 len, destination[len]

Fingerprints are ASCII hex; paths go through os.fsencode/os.fsdecode so
names that are not valid UTF-8 survive the trip. A frame must be consumed
exactly: short reads and trailing bytes both raise ProtocolError.
"""

from __future__ import annotations

import os
import struct
from typing import List, Sequence, Tuple

from ...domain.errors import ProtocolError
from ...domain.models import ScanConfig

_U32 = struct.Struct(">I")
MAX_U32 = 0xFFFFFFFF


class _Reader:
    def __init__(self, payload: bytes, what: str) -> None:
        self._buf = memoryview(payload)
        self._pos = 0
        self._what = what

    def u32(self) -> int:
        end = self._pos + _U32.size
        if end > len(self._buf):
            raise ProtocolError(
                f"Truncated {self._what} frame: need {_U32.size} bytes at offset "
                f"{self._pos}, have {len(self._buf) - self._pos}"
            )
        (value,) = _U32.unpack_from(self._buf, self._pos)
        self._pos = end
        return value

    def blob(self) -> bytes:
        n = self.u32()
        end = self._pos + n
        if end > len(self._buf):
            raise ProtocolError(
                f"Truncated {self._what} frame: length prefix {n} at offset "
                f"{self._pos} exceeds remaining {len(self._buf) - self._pos} bytes"
            )
        data = bytes(self._buf[self._pos : end])
        self._pos = end
        return data

    def remaining(self) -> int:
        return len(self._buf) - self._pos

    def finish(self) -> None:
        if self._pos != len(self._buf):
            raise ProtocolError(
                f"Malformed {self._what} frame: {self.remaining()} trailing bytes"
            )


def _u32(n: int) -> bytes:
    if not 0 <= n <= MAX_U32:
        raise ProtocolError(f"Value {n} does not fit a u32 length field")
    return _U32.pack(n)


def _blob(data: bytes) -> bytes:
    return _u32(len(data)) + data


# --- count ------------------------------------------------------------------


def encode_count(n: int) -> bytes:
    return _u32(n)


def decode_count(payload: bytes) -> int:
    r = _Reader(payload, "count")
    n = r.u32()
    r.finish()
    return n


# --- entry ------------------------------------------------------------------


def encode_entry(fingerprint: str, paths: Sequence[str]) -> bytes:
    parts = [_blob(fingerprint.encode("ascii")), _u32(len(paths))]
    parts.extend(_blob(os.fsencode(p)) for p in paths)
    return b"".join(parts)


def decode_entry(payload: bytes) -> Tuple[str, List[str]]:
    r = _Reader(payload, "entry")
    try:
        fingerprint = r.blob().decode("ascii")
    except UnicodeDecodeError as e:
        raise ProtocolError(f"Fingerprint is not ASCII: {e}") from e
    if not fingerprint:
        raise ProtocolError("Empty fingerprint in entry frame")

    k = r.u32()
    # each path needs at least its own length prefix
    if k * _U32.size > r.remaining():
        raise ProtocolError(
            f"Truncated entry frame: {k} paths announced, "
            f"only {r.remaining()} bytes left"
        )
    paths = [os.fsdecode(r.blob()) for _ in range(k)]
    r.finish()
    return fingerprint, paths


# --- config -----------------------------------------------------------------


def encode_config(config: ScanConfig) -> bytes:
    return _blob(os.fsencode(config.root)) + _blob(os.fsencode(config.destination))


def decode_config(payload: bytes) -> ScanConfig:
    r = _Reader(payload, "config")
    root = os.fsdecode(r.blob())
    destination = os.fsdecode(r.blob())
    r.finish()
    return ScanConfig(root=root, destination=destination)
