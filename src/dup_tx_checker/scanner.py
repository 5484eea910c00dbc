"""
Height-by-height duplicate transaction scan.

One height is fetched, checked and recorded before the next fetch starts.
Heights only move forward by one, and only after a block was processed in
full. Every failed fetch (block not produced yet, unusable response,
transport error) waits a fixed backoff and retries the same height,
without limit. A duplicate hash is the one fatal outcome: it is reported
and raised as DuplicateTxError, which the caller turns into a process exit.
"""

import logging
import math
import time
from dataclasses import dataclass
from typing import Callable, Optional, Sequence

from dup_tx_checker.blocks import BlockOk, BlockResult, Malformed, NotYetProduced, TransportError
from dup_tx_checker.cache import DuplicateFound, TxHashCache
from dup_tx_checker.muta_client import ChainClientError
from dup_tx_checker.reporting import StatusReporter
from dup_tx_checker.settings import ConfigError

log = logging.getLogger(__name__)


class DuplicateTxError(RuntimeError):
    def __init__(self, tx_hash: str, first_seen_height: int, current_height: int):
        super().__init__(
            f"duplicate tx {tx_hash} in block #{first_seen_height} and #{current_height}"
        )
        self.tx_hash = tx_hash
        self.first_seen_height = first_seen_height
        self.current_height = current_height


@dataclass
class ScanState:
    current_height: int
    total_tx_seen: int = 0
    known_tip: Optional[int] = None


class DupChecker:
    def __init__(
        self,
        client,
        cache: TxHashCache,
        reporter: Optional[StatusReporter] = None,
        start_height: int = 1,
        backoff_interval: float = 0.5,
        sleep: Callable[[float], None] = time.sleep,
    ):
        if start_height < 0:
            raise ConfigError(f"start height must be >= 0, got {start_height}")
        if not math.isfinite(backoff_interval) or backoff_interval < 0:
            raise ConfigError(f"backoff must be a finite number >= 0, got {backoff_interval}")
        self.client = client
        self.cache = cache
        self.reporter = reporter or StatusReporter()
        self.backoff_interval = backoff_interval
        self._sleep = sleep
        self.state = ScanState(current_height=start_height)

    def refresh_tip(self) -> None:
        try:
            self.state.known_tip = self.client.fetch_latest_height()
        except ChainClientError as e:
            self.reporter.tip_error(str(e))

    def print_status(self) -> None:
        s = self.state
        self.reporter.status(s.current_height, s.known_tip, s.total_tx_seen)

    def _backoff(self) -> None:
        self._sleep(self.backoff_interval)

    def process_block(self, height: int, tx_hashes: Sequence[str]) -> None:
        """Record every hash of the block in order; raise on the first duplicate."""
        for tx_hash in tx_hashes:
            result = self.cache.record_and_check(tx_hash, height)
            if isinstance(result, DuplicateFound):
                self.reporter.duplicate(result.tx_hash, result.first_seen_height, result.current_height)
                raise DuplicateTxError(result.tx_hash, result.first_seen_height, result.current_height)
            self.state.total_tx_seen += 1

    def scan_once(self) -> bool:
        """One fetch attempt at the current height. Returns True when the height advanced."""
        height = self.state.current_height
        block: BlockResult = self.client.fetch_block(height)

        if isinstance(block, BlockOk):
            self.process_block(height, block.ordered_tx_hashes)
            self.print_status()
            self.state.current_height = height + 1
            return True

        if isinstance(block, NotYetProduced):
            self.print_status()
            self.reporter.waiting(height, self.state.known_tip)
            self.refresh_tip()
        elif isinstance(block, Malformed):
            self.reporter.malformed(height, block.reason)
        elif isinstance(block, TransportError):
            self.reporter.fetch_error(height, block.message)
        else:
            self.reporter.fetch_error(height, f"unexpected fetch result {block!r}")

        self._backoff()
        return False

    def run(self) -> None:
        """Scan forever. Only DuplicateTxError (or an outside interrupt) ends it."""
        self.refresh_tip()
        log.info(
            f"scanning from #{self.state.current_height}, tip {self.state.known_tip}, "
            f"cache limit {self.cache.max_entries}"
        )
        while True:
            self.scan_once()
