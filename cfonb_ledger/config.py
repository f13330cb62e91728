"""Central configuration for the CFONB ledger package."""
from __future__ import annotations

import os
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Mapping

from cfonb_ledger.domain.services import BALANCE_TOLERANCE, DuplicateCriteria
from cfonb_ledger.logging_config import get_logger

logger = get_logger(__name__)

ACCEPTED_LINE_LENGTHS = (120, 121)
CENTURY_PIVOT = 49
DEFAULT_ENCODING = "latin-1"
DEFAULT_MAX_WORKERS = 1


@dataclass(slots=True, frozen=True)
class Settings:
    encoding: str
    accepted_lengths: tuple[int, ...]
    century_pivot: int
    balance_tolerance: Decimal
    default_criteria: DuplicateCriteria
    max_workers: int
    log_level: str


def _env_int(env: Mapping[str, str], name: str, default: int) -> int:
    raw = env.get(name)
    if raw is None:
        return default
    try:
        value = int(raw)
    except ValueError:
        value = 0
    if value < 1:
        logger.warning("Ignoring invalid setting", variable=name, value=raw, default=default)
        return default
    return value


def _env_decimal(env: Mapping[str, str], name: str, default: Decimal) -> Decimal:
    raw = env.get(name)
    if raw is None:
        return default
    try:
        value = Decimal(raw)
    except InvalidOperation:
        value = Decimal("NaN")
    if not value.is_finite() or value < 0:
        logger.warning("Ignoring invalid setting", variable=name, value=raw, default=str(default))
        return default
    return value


def load_settings(environ: Mapping[str, str] | None = None) -> Settings:
    """Build settings from ``CFONB_*`` environment variables.

    Malformed numeric values fall back to their defaults with a warning so the
    package stays importable.
    """
    env = os.environ if environ is None else environ
    return Settings(
        encoding=env.get("CFONB_ENCODING", DEFAULT_ENCODING),
        accepted_lengths=ACCEPTED_LINE_LENGTHS,
        century_pivot=CENTURY_PIVOT,
        balance_tolerance=_env_decimal(env, "CFONB_BALANCE_TOLERANCE", BALANCE_TOLERANCE),
        default_criteria=DuplicateCriteria(),
        max_workers=_env_int(env, "CFONB_MAX_WORKERS", DEFAULT_MAX_WORKERS),
        log_level=env.get("CFONB_LOG_LEVEL", "INFO"),
    )


SETTINGS = load_settings()
