"""Centralised settings for linkcheck.

All runtime configuration is resolved here in one place.  Values can be
overridden via environment variables or a `.env` file in the project root
(loaded automatically when this module is imported).  Command-line options
take precedence over both for a single run.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

# Load .env from the project root (one level up from this package)
_env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(_env_path, override=False)


def _env_bool(name: str, default: str) -> bool:
    return os.environ.get(name, default).strip().lower() in {"1", "true", "yes", "on"}


@dataclass
class Settings:
    # ------------------------------------------------------------------
    # Concurrency
    # ------------------------------------------------------------------
    max_concurrency: int = field(
        default_factory=lambda: int(os.environ.get("LINKCHECK_MAX_CONCURRENCY", "32"))
    )

    # ------------------------------------------------------------------
    # HTTP client
    # ------------------------------------------------------------------
    request_timeout: float = field(
        default_factory=lambda: float(os.environ.get("LINKCHECK_REQUEST_TIMEOUT", "30.0"))
    )
    user_agent: str = field(
        default_factory=lambda: os.environ.get("LINKCHECK_USER_AGENT", "linkcheck/1.0")
    )
    follow_redirects: bool = field(
        default_factory=lambda: _env_bool("LINKCHECK_FOLLOW_REDIRECTS", "true")
    )

    # ------------------------------------------------------------------
    # Report
    # ------------------------------------------------------------------
    no_title_placeholder: str = field(
        default_factory=lambda: os.environ.get(
            "LINKCHECK_NO_TITLE_PLACEHOLDER", "No title found"
        )
    )


# Module-level singleton; import this everywhere:
#   from linkcheck.config import settings
settings = Settings()
