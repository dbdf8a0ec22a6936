# tests/services/test_scan_service_errors.py
import multiprocessing
from pathlib import Path

import pytest

from dupescan.adapters.filesystem.local_fs import LocalFS
from dupescan.adapters.hashing.sha256 import SHA256Hasher
from dupescan.adapters.transport.pipe_channel import PipeChannel
from dupescan.domain.errors import ConfigurationError, ProtocolError, TransportError
from dupescan.services.scan_service import ScanService, run_worker

HAS_FORK = "fork" in multiprocessing.get_all_start_methods()


class ExplodingHasher(SHA256Hasher):
    """Crashes (non-I/O error) on b.txt, which lands on rank 1 of 2."""

    def hash_stream(self, stream) -> str:
        if str(getattr(stream, "name", "")).endswith("b.txt"):
            raise RuntimeError("boom")
        return super().hash_stream(stream)


def test_missing_root_is_rejected(tmp_path: Path):
    with pytest.raises(ConfigurationError):
        ScanService(LocalFS(), SHA256Hasher()).run(tmp_path / "nope")


def test_file_root_is_rejected(tmp_path: Path):
    f = tmp_path / "file.txt"
    f.write_text("x")
    with pytest.raises(ConfigurationError):
        ScanService(LocalFS(), SHA256Hasher(), workers=3).run(f)


def test_worker_count_must_be_positive():
    with pytest.raises(ConfigurationError):
        ScanService(LocalFS(), SHA256Hasher(), workers=0)


@pytest.mark.skipif(not HAS_FORK, reason="needs the fork start method")
def test_crashed_worker_fails_the_whole_run(tmp_path: Path):
    (tmp_path / "a.txt").write_text("same")
    (tmp_path / "b.txt").write_text("same")
    svc = ScanService(LocalFS(), ExplodingHasher(), workers=2, start_method="fork")
    with pytest.raises(TransportError):
        svc.run(tmp_path)


def test_worker_rejects_malformed_config(tmp_path: Path):
    coord_end, worker_end = multiprocessing.Pipe()
    coord = PipeChannel(coord_end, "rank 1")
    coord.send(b"\x00\x00\x00\x09/tmp")  # length says 9, carries 4
    with pytest.raises(ProtocolError):
        run_worker(1, 2, worker_end, LocalFS(), SHA256Hasher())
    coord.close()


def test_worker_streams_its_shard(tmp_path: Path):
    from dupescan.adapters.transport.frames import (
        decode_count,
        decode_entry,
        encode_config,
    )
    from dupescan.domain.models import ScanConfig

    for name in ("a.txt", "b.txt", "c.txt", "d.txt"):
        (tmp_path / name).write_text("same")

    coord_end, worker_end = multiprocessing.Pipe()
    coord = PipeChannel(coord_end, "rank 1")
    coord.send(encode_config(ScanConfig(str(tmp_path), str(tmp_path / "dest"))))
    run_worker(1, 2, worker_end, LocalFS(), SHA256Hasher())

    assert decode_count(coord.recv()) == 1
    _, paths = decode_entry(coord.recv())
    assert paths == [str(tmp_path / "b.txt"), str(tmp_path / "d.txt")]
    coord.close()


class SlowExitProcess:
    """Stands in for a worker that delivered everything but exits late."""

    def __init__(self, exitcode: int):
        self.join_calls = []
        self._exitcode = exitcode
        self.exitcode = None

    def join(self, timeout=None):
        self.join_calls.append(timeout)
        self.exitcode = self._exitcode


def test_join_waits_for_slow_workers_without_a_deadline():
    procs = [SlowExitProcess(0), SlowExitProcess(0)]
    ScanService(LocalFS(), SHA256Hasher(), workers=3)._join(procs)
    assert [p.join_calls for p in procs] == [[None], [None]]


def test_join_reports_non_zero_worker_exit():
    procs = [SlowExitProcess(0), SlowExitProcess(3)]
    with pytest.raises(TransportError) as excinfo:
        ScanService(LocalFS(), SHA256Hasher(), workers=3)._join(procs)
    assert "rank 2" in str(excinfo.value)
    assert "status 3" in str(excinfo.value)
