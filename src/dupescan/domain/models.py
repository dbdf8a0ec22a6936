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

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional, Tuple

# fingerprint -> paths, in discovery order
LocalIndex = Dict[str, List[str]]
GlobalIndex = Dict[str, List[str]]


@dataclass(frozen=True)
class FileRecord:
    """A path together with the fingerprint of its content."""

    path: str
    fingerprint: str


@dataclass(frozen=True)
class HashOutcome:
    """
    Result of fingerprinting one file.

    Exactly one of `fingerprint` / `error` is set. Failed outcomes are kept as
    values so the aggregator can skip them without unwinding the scan.
    """

    path: str
    fingerprint: Optional[str] = None
    error: Optional[str] = None

    def __post_init__(self) -> None:
        if bool(self.fingerprint) == bool(self.error):
            raise ValueError(
                f"Outcome for {self.path!r} needs exactly one of fingerprint or error"
            )

    @property
    def ok(self) -> bool:
        return self.fingerprint is not None

    def record(self) -> FileRecord:
        if self.fingerprint is None:
            raise ValueError(f"No fingerprint for {self.path}: {self.error}")
        return FileRecord(self.path, self.fingerprint)


@dataclass(frozen=True)
class DuplicateGroup:
    """Two or more paths known to share one fingerprint."""

    fingerprint: str
    paths: Tuple[str, ...]

    def __post_init__(self) -> None:
        if len(self.paths) < 2:
            raise ValueError("A duplicate group needs at least two paths")

    def __len__(self) -> int:
        return len(self.paths)

    def __iter__(self) -> Iterator[str]:
        return iter(self.paths)

    def __getitem__(self, i: int) -> str:
        return self.paths[i]


@dataclass(frozen=True)
class ScanConfig:
    """Parameters the coordinator broadcasts to every worker before scanning."""

    root: str
    destination: str


@dataclass(frozen=True)
class ScanResult:
    groups: List[DuplicateGroup]
    elapsed: float
    workers: int
    files_hashed: int = 0
