from dup_tx_checker.cache import DuplicateFound, Recorded, TxHashCache
from dup_tx_checker.scanner import DupChecker, DuplicateTxError, ScanState

__version__ = "0.1.0"
