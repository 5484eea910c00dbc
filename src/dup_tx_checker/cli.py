# Entry point: parse options, configure logging, run the scan until a duplicate shows up.
import argparse
import logging
import sys
from dataclasses import replace
from typing import List, Optional

from dup_tx_checker.cache import TxHashCache
from dup_tx_checker.muta_client import MutaClient
from dup_tx_checker.reporting import StatusReporter
from dup_tx_checker.scanner import DupChecker, DuplicateTxError
from dup_tx_checker.settings import ConfigError, Settings

EXIT_INTERNAL = 1
EXIT_CONFIG = 2
EXIT_DUPLICATE = 3
EXIT_INTERRUPTED = 130

log = logging.getLogger("dup_tx_checker")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="dup-tx-checker",
        description="Scan Muta blocks from a start height and stop on the first duplicate tx hash.",
    )
    parser.add_argument("-H", "--host", help="node host (default 127.0.0.1)")
    parser.add_argument("-p", "--port", type=int, help="node GraphQL port (default 8000)")
    parser.add_argument("--chain-id", help="chain id passed to the node client")
    parser.add_argument("-s", "--start", type=int, dest="start_height", help="first block height (default 1)")
    parser.add_argument(
        "-m", "--max-size", type=int, dest="max_cache_entries",
        help="clear the tx cache when it holds this many hashes (default 5000000)",
    )
    parser.add_argument("--backoff", type=float, dest="backoff_interval", help="seconds between failed fetches (default 0.5)")
    parser.add_argument("--timeout", type=float, dest="request_timeout", help="HTTP timeout in seconds (default 10)")
    parser.add_argument("--verbose", action="store_true", default=None, help="verbose info for debug")
    parser.add_argument("--log-file", help="append logs to this file instead of stderr")
    return parser


def load_settings(args: argparse.Namespace) -> Settings:
    """Environment defaults with command line values layered on top."""
    settings = Settings.from_env()
    overrides = {
        name: value
        for name, value in vars(args).items()
        if value is not None and name in Settings.__dataclass_fields__
    }
    return replace(settings, **overrides).validate()


def setup_logging(settings: Settings) -> None:
    kwargs = {}
    if settings.log_file:
        kwargs = {"filename": settings.log_file, "filemode": "a"}
    logging.basicConfig(
        level=logging.DEBUG if settings.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(message)s",
        **kwargs,
    )


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        settings = load_settings(args)
        setup_logging(settings)
        cache = TxHashCache(settings.max_cache_entries)
    except ConfigError as e:
        logging.basicConfig(format="%(levelname)s %(message)s")
        log.error(f"configuration error: {e}")
        return EXIT_CONFIG

    client = MutaClient.from_settings(settings)
    log.info(f"connecting to {client.endpoint} (chain {settings.chain_id})")
    checker = DupChecker(
        client,
        cache,
        StatusReporter(),
        start_height=settings.start_height,
        backoff_interval=settings.backoff_interval,
    )
    try:
        checker.run()
    except DuplicateTxError as e:
        log.critical(f"stopping: {e}")
        return EXIT_DUPLICATE
    except KeyboardInterrupt:
        log.warning(f"interrupted at #{checker.state.current_height}")
        return EXIT_INTERRUPTED
    except Exception:
        log.exception(f"scanner crashed at #{checker.state.current_height}")
        return EXIT_INTERNAL
    finally:
        client.close()
    # run() only returns by raising
    return EXIT_INTERNAL


if __name__ == "__main__":
    sys.exit(main())
