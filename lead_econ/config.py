# lead_econ/config.py
"""
Application settings, read once from the environment.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Tuple

from .currencies import CURRENCIES, DEFAULT_CURRENCY

PROJECT_ROOT = Path(__file__).resolve().parents[1]

APP_TITLE = "Lead Economics API"
APP_VERSION = "1.0"


@dataclass(frozen=True)
class Settings:
    default_currency: str
    log_level: str
    output_dir: Path
    allow_origins: Tuple[str, ...]


def _read_currency() -> str:
    raw = os.getenv("LEAD_ECON_DEFAULT_CURRENCY", DEFAULT_CURRENCY)
    code = raw.strip().upper()
    if code not in CURRENCIES:
        raise RuntimeError(
            f"LEAD_ECON_DEFAULT_CURRENCY '{raw.strip()}' is not valid. "
            f"Allowed values: {sorted(CURRENCIES)}."
        )
    return code


def _read_output_dir() -> Path:
    out = Path(os.getenv("LEAD_ECON_OUTPUT_DIR", "outputs/tables"))
    if not out.is_absolute():
        out = (PROJECT_ROOT / out).resolve()
    return out


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    origins = os.getenv("LEAD_ECON_ALLOW_ORIGINS", "*")
    return Settings(
        default_currency=_read_currency(),
        log_level=os.getenv("LEAD_ECON_LOG_LEVEL", "INFO").strip().upper(),
        output_dir=_read_output_dir(),
        allow_origins=tuple(o.strip() for o in origins.split(",") if o.strip()),
    )
