import logging
from typing import Optional

log = logging.getLogger(__name__)


def _fmt_tip(known_tip: Optional[int]) -> str:
    return "?" if known_tip is None else str(known_tip)


class StatusReporter:
    """Write-only sink for scan progress and errors."""

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.log = logger or log

    def status(self, height: int, known_tip: Optional[int], total_tx_seen: int) -> None:
        self.log.info(f"#{height}/{_fmt_tip(known_tip)}: tx count {total_tx_seen}")

    def waiting(self, height: int, known_tip: Optional[int]) -> None:
        self.log.debug(f"#{height} not produced yet (tip {_fmt_tip(known_tip)}), waiting")

    def malformed(self, height: int, reason: str) -> None:
        self.log.warning(f"#{height}: unusable block response ({reason}), retrying")

    def fetch_error(self, height: int, message: str) -> None:
        self.log.error(f"#{height}: fetch failed: {message}")

    def tip_error(self, message: str) -> None:
        self.log.warning(f"could not refresh latest height: {message}")

    def duplicate(self, tx_hash: str, first_seen_height: int, current_height: int) -> None:
        self.log.critical(
            f"found duplicate in block #{first_seen_height} and #{current_height}: tx {tx_hash}"
        )
