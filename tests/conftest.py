import pytest

from dup_tx_checker.muta_client import ChainClientError


class ScriptExhausted(Exception):
    """Raised by ScriptedClient once it runs out of canned responses."""


class ScriptedClient:
    """Stand-in for MutaClient that replays canned block results in order."""

    def __init__(self, blocks=None, tips=None):
        self.blocks = list(blocks or [])
        self.tips = list(tips or [])
        self.fetched_heights = []
        self.tip_calls = 0

    def fetch_block(self, height):
        self.fetched_heights.append(height)
        if not self.blocks:
            raise ScriptExhausted(height)
        result = self.blocks.pop(0)
        if callable(result):
            return result(height)
        return result

    def fetch_latest_height(self):
        self.tip_calls += 1
        if not self.tips:
            raise ChainClientError("no tip scripted")
        tip = self.tips.pop(0) if len(self.tips) > 1 else self.tips[0]
        if isinstance(tip, Exception):
            raise tip
        return tip


class RecordingReporter:
    """Collects every reporter call as (kind, args) tuples."""

    def __init__(self):
        self.events = []

    def _add(self, kind, *args):
        self.events.append((kind, args))

    def status(self, height, known_tip, total_tx_seen):
        self._add("status", height, known_tip, total_tx_seen)

    def waiting(self, height, known_tip):
        self._add("waiting", height, known_tip)

    def malformed(self, height, reason):
        self._add("malformed", height, reason)

    def fetch_error(self, height, message):
        self._add("fetch_error", height, message)

    def tip_error(self, message):
        self._add("tip_error", message)

    def duplicate(self, tx_hash, first_seen_height, current_height):
        self._add("duplicate", tx_hash, first_seen_height, current_height)

    def of_kind(self, kind):
        return [args for k, args in self.events if k == kind]


@pytest.fixture
def reporter():
    return RecordingReporter()


@pytest.fixture
def sleeps():
    """List that a fake sleep appends each requested delay to."""
    return []
