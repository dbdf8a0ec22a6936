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
from typing import Union

from ..domain.models import HashOutcome
from ..ports.hasher import HasherPort

logger = logging.getLogger(__name__)


class Fingerprinter:
    """
    Computes the content fingerprint of one file.

    Failures (cannot open, vanished mid-read, I/O error) are returned as a
    failed HashOutcome and logged; they never abort the scan.
    """

    def __init__(self, hasher: HasherPort) -> None:
        self._hasher = hasher

    @property
    def algorithm(self) -> str:
        return self._hasher.name

    def fingerprint(self, path: Union[str, Path]) -> HashOutcome:
        p = str(path)
        try:
            with open(p, "rb") as fh:
                digest = self._hasher.hash_stream(fh)
        except OSError as e:
            logger.warning("Could not read file %s: %s", p, e)
            return HashOutcome(path=p, error=str(e) or type(e).__name__)
        return HashOutcome(path=p, fingerprint=digest)
