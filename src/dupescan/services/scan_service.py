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

import logging
import multiprocessing
import time
from multiprocessing.connection import Connection
from multiprocessing.process import BaseProcess
from pathlib import Path
from typing import List, Optional, Union

from ..adapters.transport.frames import decode_config, encode_config
from ..adapters.transport.pipe_channel import PipeChannel
from ..domain.errors import ConfigurationError, TransportError
from ..domain.models import ScanConfig, ScanResult
from ..logging_config import setup_logging
from ..ports.filesystem import FilesystemPort
from ..ports.hasher import HasherPort
from .aggregate_service import LocalAggregator
from .duplicate_service import DuplicateService
from .fingerprint_service import Fingerprinter
from .merge_service import MergeService
from .partition_service import Partitioner

logger = logging.getLogger(__name__)

JOIN_TIMEOUT = 5.0


def scan_shard(
    root: Path, rank: int, size: int, fs: FilesystemPort, hasher: HasherPort
) -> LocalAggregator:
    """Fingerprint the files owned by `rank` and index them locally."""
    partitioner = Partitioner(fs, size)
    fingerprinter = Fingerprinter(hasher)
    aggregator = LocalAggregator()
    aggregator.build(
        fingerprinter.fingerprint(p) for p in partitioner.shard(root, rank)
    )
    logger.debug(
        "rank %d: hashed %d files, skipped %d, %d distinct fingerprints",
        rank,
        aggregator.hashed,
        aggregator.skipped,
        len(aggregator.index),
    )
    return aggregator


def run_worker(
    rank: int, size: int, conn: Connection, fs: FilesystemPort, hasher: HasherPort
) -> None:
    """
    Entry point of a non-coordinator worker process.

    Waits for the broadcast config, scans its shard and streams the local
    index back over the same channel.
    """
    setup_logging()
    with PipeChannel(conn, peer="coordinator") as channel:
        try:
            config = decode_config(channel.recv())
            aggregator = scan_shard(Path(config.root), rank, size, fs, hasher)
            MergeService().send(aggregator.index, channel)
        except Exception:
            logger.exception("Worker rank %d failed", rank)
            raise


class ScanService:
    """
    Orchestrates a distributed duplicate scan:
      - validates the root before any process is started
      - starts `workers - 1` processes; the calling process is rank 0
      - broadcasts the scan config, scans rank 0's shard locally
      - gathers every worker's index and selects duplicate groups

    Note:
      * With one worker nothing is spawned; the merge is an identity copy.
      * A worker that dies or sends a malformed frame fails the whole run.
    """

    def __init__(
        self,
        fs: FilesystemPort,
        hasher: HasherPort,
        *,
        workers: int = 1,
        start_method: Optional[str] = None,
    ) -> None:
        if workers < 1:
            raise ConfigurationError(f"workers must be >= 1, got {workers}")
        self._fs = fs
        self._hasher = hasher
        self._workers = int(workers)
        self._start_method = start_method
        self._merger = MergeService()
        self._selector = DuplicateService()

    def run(
        self, root: Union[str, Path], destination: Union[str, Path] = ""
    ) -> ScanResult:
        root = Path(root)
        if not root.exists():
            raise ConfigurationError(f"Root path does not exist: {root}")
        if not root.is_dir():
            raise ConfigurationError(f"Root path is not a directory: {root}")

        config = ScanConfig(root=str(root), destination=str(destination))
        logger.info("Scanning %s with %d worker(s)", root, self._workers)

        start = time.perf_counter()
        if self._workers == 1:
            local = scan_shard(root, 0, 1, self._fs, self._hasher)
            global_index = self._merger.gather(local.index, [])
        else:
            global_index = self._run_distributed(config)
        elapsed = time.perf_counter() - start

        groups = self._selector.select(global_index)
        files_hashed = sum(len(paths) for paths in global_index.values())
        logger.info(
            "Time taken: %.4f seconds (%d files hashed, %d duplicate groups)",
            elapsed,
            files_hashed,
            len(groups),
        )
        return ScanResult(
            groups=groups,
            elapsed=elapsed,
            workers=self._workers,
            files_hashed=files_hashed,
        )

    # --- helpers ------------------------------------------------------------

    def _run_distributed(self, config: ScanConfig):
        ctx = multiprocessing.get_context(self._start_method)
        size = self._workers
        procs: List[BaseProcess] = []
        channels: List[PipeChannel] = []
        try:
            for rank in range(1, size):
                parent_conn, child_conn = ctx.Pipe(duplex=True)
                proc = ctx.Process(
                    target=run_worker,
                    args=(rank, size, child_conn, self._fs, self._hasher),
                    name=f"dupescan-worker-{rank}",
                    daemon=True,
                )
                proc.start()
                # only the child may hold this end, so its exit reads as EOF here
                child_conn.close()
                procs.append(proc)
                channels.append(PipeChannel(parent_conn, peer=f"rank {rank}"))

            payload = encode_config(config)
            for channel in channels:
                channel.send(payload)

            local = scan_shard(Path(config.root), 0, size, self._fs, self._hasher)
            global_index = self._merger.gather(local.index, channels)
            self._join(procs)
            return global_index
        except BaseException:
            for proc in procs:
                if proc.is_alive():
                    proc.terminate()
            raise
        finally:
            for channel in channels:
                channel.close()
            for proc in procs:
                proc.join(JOIN_TIMEOUT)

    def _join(self, procs: List[BaseProcess]) -> None:
        # every worker has delivered its frames by now; wait for a clean exit
        for rank, proc in enumerate(procs, start=1):
            proc.join()
            if proc.exitcode != 0:
                raise TransportError(
                    f"Worker rank {rank} exited with status {proc.exitcode}"
                )
