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

from typing import Iterable, List

from ..domain.models import DuplicateGroup, GlobalIndex


class DuplicateService:
    """
    Produces exact-duplicate groups from the merged fingerprint index.
    """

    def select(self, global_index: GlobalIndex) -> List[DuplicateGroup]:
        return list(self.groups(global_index))

    def groups(self, global_index: GlobalIndex) -> Iterable[DuplicateGroup]:
        """
        Yield one group per fingerprint shared by two or more paths.

        Notes:
          * Group order follows the index's iteration order and carries no meaning.
          * Path order inside a group is kept as merged (coordinator first).
        """
        for fingerprint, paths in global_index.items():
            if len(paths) > 1:
                yield DuplicateGroup(fingerprint=fingerprint, paths=tuple(paths))
