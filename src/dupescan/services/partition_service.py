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
from pathlib import Path
from typing import Iterator

from ..domain.errors import ConfigurationError
from ..ports.filesystem import FilesystemPort

logger = logging.getLogger(__name__)


def assign(file_index: int, worker_count: int) -> int:
    """Rank that owns the file discovered at position `file_index`."""
    return file_index % worker_count


class Partitioner:
    """
    Splits the regular files under a root across `worker_count` ranks.

    Every rank walks the whole tree and keeps only the files at positions
    `i` with `i % worker_count == rank`. Walks agree because the filesystem
    adapter yields a stable order, so no listing has to be exchanged.
    """

    def __init__(self, fs: FilesystemPort, worker_count: int = 1) -> None:
        if worker_count < 1:
            raise ConfigurationError(f"worker count must be >= 1, got {worker_count}")
        self._fs = fs
        self._worker_count = int(worker_count)

    def shard(self, root: Path, rank: int) -> Iterator[Path]:
        if not 0 <= rank < self._worker_count:
            raise ConfigurationError(
                f"rank {rank} outside [0, {self._worker_count})"
            )
        seen = 0
        for index, path in enumerate(self._fs.walk(Path(root))):
            seen = index + 1
            if assign(index, self._worker_count) == rank:
                yield path
        logger.debug(
            "rank %d/%d walked %d files under %s", rank, self._worker_count, seen, root
        )
