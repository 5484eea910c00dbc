import math
import os
from dataclasses import dataclass
from typing import Optional

DEFAULT_CHAIN_ID = "0xb6a4d7da21443f5e816e8700eea87610e6d769657d6b8ec73028457bf2ca4036"


class ConfigError(ValueError):
    """Raised at startup when an option cannot be used; the scan never begins."""


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw.strip(), 0)
    except ValueError:
        raise ConfigError(f"{name} must be an integer, got {raw!r}") from None


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        raise ConfigError(f"{name} must be a number, got {raw!r}") from None


@dataclass(frozen=True)
class Settings:
    host: str = "127.0.0.1"
    port: int = 8000
    chain_id: str = DEFAULT_CHAIN_ID
    start_height: int = 1
    max_cache_entries: int = 5_000_000
    backoff_interval: float = 0.5  # seconds between failed fetches
    request_timeout: float = 10.0
    verbose: bool = False
    log_file: Optional[str] = None

    @classmethod
    def from_env(cls) -> "Settings":
        """Defaults, overridden by DUP_CHECK_* environment variables."""
        return cls(
            host=os.getenv("DUP_CHECK_HOST", cls.host),
            port=_env_int("DUP_CHECK_PORT", cls.port),
            chain_id=os.getenv("DUP_CHECK_CHAIN_ID", cls.chain_id),
            start_height=_env_int("DUP_CHECK_START", cls.start_height),
            max_cache_entries=_env_int("DUP_CHECK_MAX_SIZE", cls.max_cache_entries),
            backoff_interval=_env_float("DUP_CHECK_BACKOFF", cls.backoff_interval),
            request_timeout=_env_float("DUP_CHECK_TIMEOUT", cls.request_timeout),
        )

    @property
    def endpoint(self) -> str:
        return f"http://{self.host}:{self.port}/graphql"

    def validate(self) -> "Settings":
        if not self.host:
            raise ConfigError("host must not be empty")
        if not 0 < self.port < 65536:
            raise ConfigError(f"port out of range: {self.port}")
        if self.start_height < 0:
            raise ConfigError(f"start height must be >= 0, got {self.start_height}")
        if self.max_cache_entries <= 0:
            raise ConfigError(f"max cache size must be > 0, got {self.max_cache_entries}")
        if not math.isfinite(self.backoff_interval) or self.backoff_interval < 0:
            raise ConfigError(f"backoff must be a finite number >= 0, got {self.backoff_interval}")
        if not math.isfinite(self.request_timeout) or self.request_timeout <= 0:
            raise ConfigError(f"timeout must be a finite number > 0, got {self.request_timeout}")
        return self
