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

import logging
import shutil
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Iterable, List, Tuple, Union

from ..domain.models import DuplicateGroup

logger = logging.getLogger(__name__)

# Returns 0 to skip the group, or the 1-based index of the path to keep.
Chooser = Callable[[DuplicateGroup], int]
Mover = Callable[[str, str], object]


@dataclass
class ResolveSummary:
    moved: List[Tuple[str, str]] = field(default_factory=list)
    skipped_groups: int = 0
    failed: List[Tuple[str, str]] = field(default_factory=list)


class ResolveService:
    """
    Applies the operator's keep/skip decisions to duplicate groups.

    For every resolved group, each path other than the kept one is moved into
    the destination directory under its own base name. Names already taken in
    the destination get a " (n)" suffix so nothing is overwritten.
    """

    def __init__(
        self, destination: Union[str, Path], mover: Mover = shutil.move
    ) -> None:
        self._destination = Path(destination)
        self._mover = mover

    def resolve(
        self, groups: Iterable[DuplicateGroup], choose: Chooser
    ) -> ResolveSummary:
        summary = ResolveSummary()
        for group in groups:
            choice = choose(group)
            if choice == 0:
                summary.skipped_groups += 1
                continue
            if not 1 <= choice <= len(group):
                raise ValueError(
                    f"Choice {choice} out of range 1..{len(group)} (0 skips)"
                )
            self._destination.mkdir(parents=True, exist_ok=True)
            for i, path in enumerate(group, start=1):
                if i == choice:
                    continue
                target = self._free_target(Path(path).name)
                try:
                    self._mover(path, str(target))
                except OSError as e:
                    logger.error("Could not move file %s: %s", path, e)
                    summary.failed.append((path, str(e)))
                    continue
                logger.info("Moved %s to %s", path, target)
                summary.moved.append((path, str(target)))
        return summary

    def _free_target(self, name: str) -> Path:
        target = self._destination / name
        if not target.exists():
            return target
        stem, suffix = Path(name).stem, Path(name).suffix
        n = 1
        while True:
            candidate = self._destination / f"{stem} ({n}){suffix}"
            if not candidate.exists():
                return candidate
            n += 1
