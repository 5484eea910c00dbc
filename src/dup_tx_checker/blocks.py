# Outcomes of a single block fetch. The scan loop branches on the type.
from dataclasses import dataclass
from typing import Tuple, Union


@dataclass(frozen=True)
class BlockOk:
    height: int
    ordered_tx_hashes: Tuple[str, ...] = ()


@dataclass(frozen=True)
class NotYetProduced:
    height: int


@dataclass(frozen=True)
class Malformed:
    height: int
    reason: str = ""


@dataclass(frozen=True)
class TransportError:
    height: int
    message: str


BlockResult = Union[BlockOk, NotYetProduced, Malformed, TransportError]
