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
from typing import Sequence

from ..adapters.transport.frames import (
    decode_count,
    decode_entry,
    encode_count,
    encode_entry,
)
from ..domain.models import GlobalIndex, LocalIndex
from ..ports.transport import ChannelPort

logger = logging.getLogger(__name__)


class MergeService:
    """
    Combines per-worker LocalIndex instances into one GlobalIndex on rank 0.

    Protocol per worker channel, in order:
      1. one count frame: number of distinct fingerprints the worker holds
      2. that many entry frames (fingerprint, paths)

    The coordinator drains ranks 1..N-1 in rank order, so a fingerprint seen
    by several workers lists the coordinator's paths first, then rank 1's,
    and so on. Any transport or framing error propagates: a partial merge
    would under-report duplicates.
    """

    def send(self, local_index: LocalIndex, channel: ChannelPort) -> int:
        """Worker side: stream the local index to the coordinator."""
        channel.send(encode_count(len(local_index)))
        for fingerprint, paths in local_index.items():
            channel.send(encode_entry(fingerprint, paths))
        return len(local_index)

    def gather(
        self, local_index: LocalIndex, channels: Sequence[ChannelPort]
    ) -> GlobalIndex:
        """
        Coordinator side: merge its own index with every worker's.

        `channels[i]` is the link to rank i + 1. With no channels the result
        is a copy of `local_index`.
        """
        merged: GlobalIndex = {fp: list(paths) for fp, paths in local_index.items()}

        counts = [decode_count(ch.recv()) for ch in channels]

        for rank, (channel, count) in enumerate(zip(channels, counts), start=1):
            logger.debug("Receiving %d fingerprints from rank %d", count, rank)
            for _ in range(count):
                fingerprint, paths = decode_entry(channel.recv())
                merged.setdefault(fingerprint, []).extend(paths)

        return merged
