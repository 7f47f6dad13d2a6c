"""Environment-driven runtime settings."""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

DEFAULT_PORT = 4242
DEFAULT_STORE_NAME = "Seattle Trading"
DEFAULT_PROCESSOR_TIMEOUT = 20.0


def parse_allowed_origins(raw: str | None) -> frozenset[str]:
    """Convert a comma-separated environment value into a set of origins."""

    if not raw:
        return frozenset()

    return frozenset(origin.strip() for origin in raw.split(",") if origin.strip())


def _parse_positive_number(value: str | None, *, env: str, default: float) -> float:
    if value is None or not value.strip():
        return default
    try:
        parsed = float(value)
    except ValueError:
        logger.warning("Ignoring invalid value for %s: %s", env, value)
        return default
    if parsed <= 0:
        logger.warning("Ignoring non-positive value for %s: %s", env, value)
        return default
    return parsed


@dataclass(frozen=True)
class Settings:
    """Process-wide configuration, read once at startup."""

    stripe_secret_key: str = ""
    port: int = DEFAULT_PORT
    allowed_origins: frozenset[str] = field(default_factory=frozenset)
    store_name: str = DEFAULT_STORE_NAME
    processor_timeout: float = DEFAULT_PROCESSOR_TIMEOUT
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> Settings:
        """Build settings from ``environ`` (defaults to ``os.environ``)."""

        env = os.environ if environ is None else environ
        return cls(
            stripe_secret_key=env.get("STRIPE_SECRET_KEY", "").strip(),
            port=int(
                _parse_positive_number(env.get("PORT"), env="PORT", default=DEFAULT_PORT)
            ),
            allowed_origins=parse_allowed_origins(env.get("ALLOWED_ORIGIN")),
            store_name=env.get("STORE_NAME", "").strip() or DEFAULT_STORE_NAME,
            processor_timeout=_parse_positive_number(
                env.get("STRIPE_TIMEOUT_SECONDS"),
                env="STRIPE_TIMEOUT_SECONDS",
                default=DEFAULT_PROCESSOR_TIMEOUT,
            ),
            log_level=env.get("LOG_LEVEL", "INFO").strip().upper() or "INFO",
        )


def load_settings(dotenv_path: Path | None = None) -> Settings:
    """Load an optional ``.env`` file, then read settings from the environment."""

    load_dotenv(dotenv_path)
    return Settings.from_env()


__all__ = ["Settings", "load_settings", "parse_allowed_origins"]
