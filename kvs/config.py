"""
Settings - Runtime configuration read from environment variables.
"""

import os
from collections.abc import Mapping
from dataclasses import dataclass

DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 12345
DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_MAP_SIZE = 64 * 1024 * 1024


@dataclass(frozen=True)
class Settings:
    """
    Process configuration.

    Environment variables:
    - HOST: listen host (default 127.0.0.1)
    - PORT: listen port (default 12345)
    - LOG_LEVEL: logging level name (default INFO)
    - KVS_MAP_SIZE: LMDB memory map size in bytes (default 64MB)
    """

    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    log_level: str = DEFAULT_LOG_LEVEL
    map_size: int = DEFAULT_MAP_SIZE

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "Settings":
        """
        Build settings from environment variables.

        Empty variables fall back to their defaults.

        Raises:
            ValueError: If a numeric variable is malformed or out of range.
        """
        if environ is None:
            environ = os.environ

        port = _int_var(environ, "PORT", DEFAULT_PORT)
        if not 0 <= port <= 65535:
            raise ValueError(f"PORT must be between 0 and 65535, got {port}")

        map_size = _int_var(environ, "KVS_MAP_SIZE", DEFAULT_MAP_SIZE)
        if map_size <= 0:
            raise ValueError(f"KVS_MAP_SIZE must be positive, got {map_size}")

        return cls(
            host=environ.get("HOST") or DEFAULT_HOST,
            port=port,
            log_level=(environ.get("LOG_LEVEL") or DEFAULT_LOG_LEVEL).upper(),
            map_size=map_size,
        )

    @property
    def listen_addr(self) -> str:
        return f"{self.host}:{self.port}"


def _int_var(environ: Mapping[str, str], name: str, default: int) -> int:
    raw = environ.get(name)
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None
