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
import os
import stat
from pathlib import Path
from typing import Iterator

from ...ports.filesystem import FilesystemPort

logger = logging.getLogger(__name__)


class LocalFS(FilesystemPort):
    """
    Local filesystem adapter.

    - Entries are visited in sorted name order so that independent walks of
      the same tree agree on every file's position.
    - Only regular files are yielded; symlinks, FIFOs, sockets and device
      nodes are skipped, and directory symlinks are not followed.
    - Directories that cannot be listed are logged and left out.
    """

    def walk(self, root: Path) -> Iterator[Path]:
        root = Path(root)
        if _is_regular(root):
            yield root
            return
        for dirpath, dirnames, filenames in os.walk(
            root, onerror=_warn_unlistable, followlinks=False
        ):
            dirnames.sort()
            d = Path(dirpath)
            for name in sorted(filenames):
                p = d / name
                if _is_regular(p):
                    yield p


def _warn_unlistable(e: OSError) -> None:
    logger.warning("Could not list directory %s: %s", e.filename, e.strerror or e)


def _is_regular(path: Path) -> bool:
    try:
        return stat.S_ISREG(os.lstat(path).st_mode)
    except OSError:
        # vanished between listing and lstat
        return False
