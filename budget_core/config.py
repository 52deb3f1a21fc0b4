"""Application configuration.

Settings come from environment variables, optionally seeded from a ``.env``
file in the working directory.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from typing import List, Mapping, Optional

from dotenv import load_dotenv

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

DEFAULT_DATABASE_URI = "file://data"
DEFAULT_API_URL = "http://localhost:5000/api"


def _split_origins(raw: Optional[str]) -> List[str]:
    if not raw:
        return []
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


@dataclass(frozen=True)
class Settings:
    host: str = "127.0.0.1"
    port: int = 5000
    database_uri: str = DEFAULT_DATABASE_URI
    environment: str = "prod"
    allowed_origins: List[str] = field(default_factory=list)
    log_level: str = "INFO"
    api_url: str = DEFAULT_API_URL

    @property
    def is_development(self) -> bool:
        return self.environment in {"dev", "development"}

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        """Build settings from ``environ`` (the process environment by default)."""
        if environ is None:
            load_dotenv()
            environ = os.environ
        port_text = environ.get("PORT", "5000")
        try:
            port = int(port_text)
        except ValueError as exc:
            raise ValueError(f"PORT must be an integer, got {port_text!r}") from exc
        return cls(
            host=environ.get("HOST", "127.0.0.1"),
            port=port,
            database_uri=environ.get("EXPENSE_TRACKER_DATABASE_URI", DEFAULT_DATABASE_URI),
            environment=environ.get("EXPENSE_TRACKER_ENV", "prod").lower(),
            allowed_origins=_split_origins(environ.get("EXPENSE_TRACKER_ALLOWED_ORIGINS")),
            log_level=environ.get("EXPENSE_TRACKER_LOG_LEVEL", "INFO").upper(),
            api_url=environ.get("EXPENSE_TRACKER_API_URL", DEFAULT_API_URL),
        )


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(level=getattr(logging, level.upper(), logging.INFO), format=LOG_FORMAT)
