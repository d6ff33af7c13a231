"""Centralised settings for the dump preprocessor.

All runtime configuration is resolved here in one place.  Values can be
overridden via environment variables or a `.env` file in the project root
(loaded automatically when this module is imported).
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

# Load .env from the project root (two levels up from this file)
_env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(_env_path, override=False)


def _env_flag(name: str, default: str) -> bool:
    return os.environ.get(name, default).strip().lower() not in ("0", "false", "no", "off")


def _env_list(name: str, default: str) -> frozenset[str]:
    raw = os.environ.get(name, default)
    return frozenset(p.strip() for p in raw.split(",") if p.strip())


@dataclass
class Settings:
    # ------------------------------------------------------------------
    # Concurrency
    # ------------------------------------------------------------------
    workers: int = field(
        default_factory=lambda: int(
            os.environ.get("DUMPPREP_WORKERS", "0") or 0
        ) or (os.cpu_count() or 1)
    )

    # ------------------------------------------------------------------
    # Link extraction
    # ------------------------------------------------------------------
    main_namespace: int = field(
        default_factory=lambda: int(os.environ.get("DUMPPREP_MAIN_NAMESPACE", "0"))
    )
    ignored_link_prefixes: frozenset[str] = field(
        default_factory=lambda: _env_list("DUMPPREP_IGNORED_LINK_PREFIXES", "Bild:")
    )
    max_link_length: int = field(
        default_factory=lambda: int(os.environ.get("DUMPPREP_MAX_LINK_LENGTH", "300"))
    )
    # 0 disables the cap and strips until the text stops shrinking.
    max_strip_passes: int = field(
        default_factory=lambda: int(os.environ.get("DUMPPREP_MAX_STRIP_PASSES", "100"))
    )

    # ------------------------------------------------------------------
    # Output
    # ------------------------------------------------------------------
    preview_chars: int = field(
        default_factory=lambda: int(os.environ.get("DUMPPREP_PREVIEW_CHARS", "100"))
    )
    show_progress: bool = field(
        default_factory=lambda: _env_flag("DUMPPREP_PROGRESS", "1")
    )
    log_level: str = field(
        default_factory=lambda: os.environ.get("DUMPPREP_LOG_LEVEL", "INFO").upper()
    )


# Module-level singleton. Import this everywhere:
#   from dumpprep.config import settings
settings = Settings()
