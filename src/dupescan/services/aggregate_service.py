# Licensed under the Apache License, Version 2.0
from __future__ import annotations

from typing import Iterable

from ..domain.models import HashOutcome, LocalIndex


class LocalAggregator:
    """
    Builds one worker's fingerprint -> paths index.

    Failed outcomes are dropped (the fingerprinter already reported them);
    they are only counted.
    """

    def __init__(self) -> None:
        self._index: LocalIndex = {}
        self.hashed = 0
        self.skipped = 0

    def add(self, outcome: HashOutcome) -> None:
        if not outcome.ok:
            self.skipped += 1
            return
        record = outcome.record()
        self._index.setdefault(record.fingerprint, []).append(record.path)
        self.hashed += 1

    def build(self, outcomes: Iterable[HashOutcome]) -> LocalIndex:
        for outcome in outcomes:
            self.add(outcome)
        return self._index

    @property
    def index(self) -> LocalIndex:
        return self._index
