"""
Read-only GraphQL client for a Muta node.

Only the two calls the scanner needs are implemented:
  - fetch_block(height)      -> BlockResult (never raises on network/protocol failure)
  - fetch_latest_height()    -> int         (raises ChainClientError)

Heights travel as 0x-prefixed hex strings (Muta Uint64 scalar).
A block the node has not produced yet comes back as a GraphQL error whose
message contains "GetNone".

Retries are not done here: one call is one HTTP request. The scan loop owns
the fixed backoff between attempts.
"""

import logging
from typing import Any, Dict, List, Optional

import requests
from requests.adapters import HTTPAdapter
from eth_utils import to_hex, to_int

from dup_tx_checker.blocks import BlockOk, BlockResult, Malformed, NotYetProduced, TransportError
from dup_tx_checker.settings import Settings

log = logging.getLogger(__name__)

NOT_FOUND_MARKER = "GetNone"

GET_BLOCK_QUERY = """
query getBlock($height: Uint64) {
  getBlock(height: $height) {
    header {
      height
    }
    orderedTxHashes
  }
}
"""

GET_LATEST_HEIGHT_QUERY = """
query getLatestBlockHeight {
  getBlock {
    header {
      height
    }
  }
}
"""


class ChainClientError(RuntimeError):
    pass


def _error_message(errors: List[Any]) -> str:
    parts = []
    for err in errors:
        if isinstance(err, dict):
            parts.append(str(err.get("message", err)))
        else:
            parts.append(str(err))
    return "; ".join(parts)


class MutaClient:
    def __init__(
        self,
        host: str,
        port: int,
        chain_id: str,
        timeout: float = 10.0,
        session: Optional[requests.Session] = None,
    ):
        self.endpoint = f"http://{host}:{port}/graphql"
        # Only needed for signing writes; reads carry it for log context.
        self.chain_id = chain_id
        self.timeout = timeout
        if session is None:
            # --------- HTTP session (Keep-Alive, pooling) ---------
            session = requests.Session()
            adapter = HTTPAdapter(pool_connections=4, pool_maxsize=4)
            session.mount("http://", adapter)
            session.mount("https://", adapter)
        self._session = session

    @classmethod
    def from_settings(cls, settings: Settings) -> "MutaClient":
        return cls(settings.host, settings.port, settings.chain_id, timeout=settings.request_timeout)

    def close(self) -> None:
        self._session.close()

    def _query(self, query: str, variables: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """POST one GraphQL query and return the decoded envelope ({"data":..., "errors":...}).

        Raises requests.exceptions.RequestException on transport/HTTP/JSON failure
        and ChainClientError when the body is not a JSON object.
        """
        payload = {"query": query, "variables": variables or {}}
        r = self._session.post(self.endpoint, json=payload, timeout=self.timeout)
        r.raise_for_status()
        resp = r.json()
        if not isinstance(resp, dict):
            raise ChainClientError(f"unexpected GraphQL response type: {type(resp).__name__}")
        return resp

    # ---------- Block by height ----------
    def fetch_block(self, height: int) -> BlockResult:
        try:
            resp = self._query(GET_BLOCK_QUERY, {"height": to_hex(height)})
        except (requests.exceptions.RequestException, ChainClientError) as e:
            return TransportError(height, str(e))

        errors = resp.get("errors")
        if errors:
            msg = _error_message(errors if isinstance(errors, list) else [errors])
            if NOT_FOUND_MARKER in msg:
                return NotYetProduced(height)
            return TransportError(height, msg)

        data = resp.get("data")
        if data is None:
            return Malformed(height, "response carries no data")
        if not isinstance(data, dict):
            return Malformed(height, "response data is not an object")
        block = data.get("getBlock")
        if not isinstance(block, dict):
            return Malformed(height, "response carries no getBlock object")
        hashes = block.get("orderedTxHashes")
        if not isinstance(hashes, list):
            return Malformed(height, "block has no orderedTxHashes list")
        if not all(isinstance(h, str) for h in hashes):
            return Malformed(height, "orderedTxHashes contains a non-string entry")

        log.debug(f"fetched #{height}: {len(hashes)} tx")
        return BlockOk(height, tuple(hashes))

    # ---------- Chain tip ----------
    def fetch_latest_height(self) -> int:
        try:
            resp = self._query(GET_LATEST_HEIGHT_QUERY)
        except requests.exceptions.RequestException as e:
            raise ChainClientError(f"latest height request failed: {e}") from e

        errors = resp.get("errors")
        if errors:
            raise ChainClientError(_error_message(errors if isinstance(errors, list) else [errors]))
        try:
            raw = resp["data"]["getBlock"]["header"]["height"]
        except (KeyError, TypeError):
            raise ChainClientError("latest block response has no header.height") from None

        if isinstance(raw, int):
            return raw
        try:
            return to_int(hexstr=raw)
        except (TypeError, ValueError):
            raise ChainClientError(f"unparseable block height: {raw!r}") from None
