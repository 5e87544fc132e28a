from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import ClassVar


@dataclass(frozen=True)
class BrokerConfig:
    """Runtime configuration for the broker HTTP server.

    `granular_errors` switches the error status mapping from the single
    generic client error (400) to per-kind statuses (404, 409, 422, 502).
    """

    _DEFAULT_HOST: ClassVar[str] = "0.0.0.0"
    _DEFAULT_PORT: ClassVar[int] = 8005
    _TRUTHY: ClassVar[frozenset[str]] = frozenset({"1", "true", "yes", "on"})
    # Names understood by both `logging` and uvicorn.
    _LOG_LEVELS: ClassVar[frozenset[str]] = frozenset({"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"})

    host: str = _DEFAULT_HOST
    port: int = _DEFAULT_PORT
    log_level: str = "INFO"
    granular_errors: bool = False

    @property
    def log_level_number(self) -> int:
        return logging.getLevelName(self.log_level)

    @staticmethod
    def _parse_port(raw: str) -> int:
        try:
            port = int(raw)
        except ValueError as exc:
            raise ValueError("Invalid BROKER_PORT; must be an integer") from exc
        if not 0 < port < 65536:
            raise ValueError(f"Invalid BROKER_PORT; {port} is outside 1-65535")
        return port

    @staticmethod
    def _parse_log_level(raw: str) -> str:
        level = raw.strip().upper()
        if level not in BrokerConfig._LOG_LEVELS:
            raise ValueError(f"Invalid BROKER_LOG_LEVEL: {raw!r}")
        return level

    @staticmethod
    def from_env() -> "BrokerConfig":
        host = os.getenv("BROKER_HOST") or BrokerConfig._DEFAULT_HOST

        port_raw = os.getenv("BROKER_PORT")
        port = BrokerConfig._parse_port(port_raw) if port_raw else BrokerConfig._DEFAULT_PORT

        level_raw = os.getenv("BROKER_LOG_LEVEL")
        log_level = BrokerConfig._parse_log_level(level_raw) if level_raw else "INFO"

        granular_raw = os.getenv("BROKER_GRANULAR_ERRORS", "")
        granular_errors = granular_raw.strip().lower() in BrokerConfig._TRUTHY

        return BrokerConfig(
            host=host,
            port=port,
            log_level=log_level,
            granular_errors=granular_errors,
        )
