# tests/unit/test_frames.py
import os
import struct
import sys

import pytest

from dupescan.adapters.transport.frames import (
    decode_config,
    decode_count,
    decode_entry,
    encode_config,
    encode_count,
    encode_entry,
)
from dupescan.domain.errors import ProtocolError
from dupescan.domain.models import ScanConfig

FP = "ab" * 32


def test_entry_layout_is_length_prefixed():
    frame = encode_entry(FP, ["/x/a.txt", "/y/b"])
    expected = (
        struct.pack(">I", 64)
        + FP.encode()
        + struct.pack(">I", 2)
        + struct.pack(">I", 8)
        + b"/x/a.txt"
        + struct.pack(">I", 4)
        + b"/y/b"
    )
    assert frame == expected
    assert decode_entry(frame) == (FP, ["/x/a.txt", "/y/b"])


def test_entry_keeps_unicode_paths():
    paths = ["/data/résumé.txt", "/data/日本.bin"]
    assert decode_entry(encode_entry(FP, paths)) == (FP, paths)


@pytest.mark.skipif(sys.platform == "win32", reason="POSIX byte file names")
def test_entry_keeps_undecodable_paths():
    odd = os.fsdecode(b"/data/\xff\xfe.bin")
    assert decode_entry(encode_entry(FP, [odd]))[1] == [odd]


def test_truncated_entry_is_a_protocol_error():
    frame = encode_entry(FP, ["/x/a.txt", "/y/b"])
    for cut in (2, 10, len(frame) - 1):
        with pytest.raises(ProtocolError):
            decode_entry(frame[:cut])


def test_entry_with_trailing_bytes_is_a_protocol_error():
    with pytest.raises(ProtocolError) as excinfo:
        decode_entry(encode_entry(FP, ["/a"]) + b"\x00")
    assert "trailing" in str(excinfo.value)


def test_entry_announcing_too_many_paths_is_rejected():
    frame = struct.pack(">I", 2) + b"ff" + struct.pack(">I", 1_000_000)
    with pytest.raises(ProtocolError):
        decode_entry(frame)


def test_empty_fingerprint_is_rejected():
    with pytest.raises(ProtocolError):
        decode_entry(struct.pack(">I", 0) + struct.pack(">I", 0))


def test_count_frame():
    assert decode_count(encode_count(7)) == 7
    with pytest.raises(ProtocolError):
        decode_count(b"\x00\x01")
    with pytest.raises(ProtocolError):
        decode_count(encode_count(1) + b"\x00")
    with pytest.raises(ProtocolError):
        encode_count(-1)


def test_config_frame():
    cfg = ScanConfig(root="/srv/photos", destination="/srv/dupes")
    assert decode_config(encode_config(cfg)) == cfg
    with pytest.raises(ProtocolError):
        decode_config(encode_config(cfg)[:-3])
