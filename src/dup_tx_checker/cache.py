"""
Bounded membership cache of transaction hashes.

Each hash maps to the height it was first recorded at. When the cache is
full it is cleared wholesale before the next insert, so a duplicate whose
first occurrence was dropped by a clear goes unnoticed. That loss is
accepted in exchange for a hard memory ceiling and O(1) eviction.
"""

import logging
from dataclasses import dataclass
from typing import Dict, Union

from dup_tx_checker.settings import ConfigError

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class Recorded:
    tx_hash: str
    height: int


@dataclass(frozen=True)
class DuplicateFound:
    tx_hash: str
    first_seen_height: int
    current_height: int


RecordResult = Union[Recorded, DuplicateFound]


class TxHashCache:
    def __init__(self, max_entries: int):
        if max_entries <= 0:
            raise ConfigError(f"max cache entries must be > 0, got {max_entries}")
        self.max_entries = max_entries
        self.clear_count = 0
        self._seen: Dict[str, int] = {}

    def __len__(self) -> int:
        return len(self._seen)

    def __contains__(self, tx_hash: str) -> bool:
        return tx_hash in self._seen

    def record_and_check(self, tx_hash: str, height: int) -> RecordResult:
        """Record `tx_hash` at `height`, or report where it was first seen.

        A duplicate leaves the cache untouched: the earlier height stays the
        canonical first sighting.
        """
        if height < 0:
            raise ValueError(f"height must be >= 0, got {height}")

        if len(self._seen) >= self.max_entries:
            self._seen.clear()
            self.clear_count += 1
            log.info(f"tx cache reached {self.max_entries} entries at #{height}, cleared (#{self.clear_count})")

        first_seen = self._seen.get(tx_hash)
        if first_seen is not None:
            return DuplicateFound(tx_hash, first_seen, height)

        self._seen[tx_hash] = height
        return Recorded(tx_hash, height)
