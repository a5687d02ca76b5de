"""Centralised settings for the dictionary scraper.

All runtime configuration is resolved here in one place.  Values can be
overridden via environment variables or a `.env` file in the project root
(loaded automatically when this module is imported).
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

# Load .env from the project root (one level up from this package)
_env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(_env_path, override=False)


@dataclass
class Settings:
    # ------------------------------------------------------------------
    # Remote site
    # ------------------------------------------------------------------
    bootstrap_url: str = field(
        default_factory=lambda: os.environ.get(
            "ESWIL_BOOTSTRAP_URL",
            "https://eswil.ijp.pan.pl/index.php?str=otworz-slownik",
        )
    )
    endpoint_url: str = field(
        default_factory=lambda: os.environ.get(
            "ESWIL_ENDPOINT_URL", "https://eswil.ijp.pan.pl/index.php"
        )
    )
    user_agent: str = field(
        default_factory=lambda: os.environ.get(
            "ESWIL_USER_AGENT",
            "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
            "AppleWebKit/537.36 (KHTML, like Gecko) "
            "Chrome/64.0.3247.0 Safari/537.36",
        )
    )
    request_timeout: float = field(
        default_factory=lambda: float(os.environ.get("REQUEST_TIMEOUT", "30.0"))
    )

    # ------------------------------------------------------------------
    # Concurrency (simultaneous requests per phase)
    # ------------------------------------------------------------------
    count_concurrency: int = field(
        default_factory=lambda: int(os.environ.get("COUNT_CONCURRENCY", "32"))
    )
    listing_concurrency: int = field(
        default_factory=lambda: int(os.environ.get("LISTING_CONCURRENCY", "32"))
    )
    definition_concurrency: int = field(
        default_factory=lambda: int(os.environ.get("DEFINITION_CONCURRENCY", "16"))
    )

    # ------------------------------------------------------------------
    # Retry / backoff
    # ------------------------------------------------------------------
    retry_max_attempts: int = field(
        default_factory=lambda: int(os.environ.get("RETRY_MAX_ATTEMPTS", "20"))
    )
    retry_initial_delay: float = field(
        default_factory=lambda: float(os.environ.get("RETRY_INITIAL_DELAY", "0.5"))
    )
    retry_multiplier: float = field(
        default_factory=lambda: float(os.environ.get("RETRY_MULTIPLIER", "1.5"))
    )
    retry_max_delay: float = field(
        default_factory=lambda: float(os.environ.get("RETRY_MAX_DELAY", "60.0"))
    )
    retry_max_elapsed: float = field(
        default_factory=lambda: float(os.environ.get("RETRY_MAX_ELAPSED", "900.0"))
    )
    retry_jitter: float = field(
        default_factory=lambda: float(os.environ.get("RETRY_JITTER", "0.5"))
    )

    # ------------------------------------------------------------------
    # Stores
    # ------------------------------------------------------------------
    words_path: Path = field(
        default_factory=lambda: Path(os.environ.get("ESWIL_WORDS_PATH", "words"))
    )
    definitions_path: Path = field(
        default_factory=lambda: Path(os.environ.get("ESWIL_DEFINITIONS_PATH", "output"))
    )
    sync_every: int = field(
        default_factory=lambda: int(os.environ.get("SYNC_EVERY", "16"))
    )

    # ------------------------------------------------------------------
    # Logging
    # ------------------------------------------------------------------
    log_level: str = field(
        default_factory=lambda: os.environ.get("LOG_LEVEL", "INFO").upper()
    )


# Module-level singleton: import this everywhere:
#   from eswil.config import settings
settings = Settings()
