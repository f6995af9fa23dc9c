"""
SDR runtime helpers
-------------------
Process-wide logging setup, clock and timestamp helpers, phone matching
keys and a small backoff retry used by the Airtable mirror.
"""

from __future__ import annotations

import logging
import os
import re
import time
from datetime import datetime, timezone
from typing import Callable, Iterable, Optional, TypeVar

T = TypeVar("T")

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

_logging_ready = False
_DIGITS = re.compile(r"\d+")


# ────────────────────────────────────────────────
# LOGGING
# ────────────────────────────────────────────────
def mask_env_value(value: Optional[str]) -> str:
    """Printable form of a credential: head and tail only."""
    if not value:
        return "<missing>"
    secret = value.strip()
    if len(secret) <= 4:
        return "*" * len(secret)
    if len(secret) <= 8:
        return f"{secret[:2]}...{secret[-2:]}"
    return f"{secret[:4]}...{secret[-4:]}"


def _level_from(value: int | str | None) -> int:
    if value is None:
        value = os.getenv("SDR_LOG_LEVEL") or logging.INFO
    if isinstance(value, int):
        return value
    level = logging.getLevelName(value.upper())
    return level if isinstance(level, int) else logging.INFO


def configure_logging(level: int | str | None = None) -> None:
    """basicConfig once per process; later calls are no-ops."""
    global _logging_ready
    if _logging_ready:
        return
    logging.basicConfig(level=_level_from(level), format=LOG_FORMAT)
    _logging_ready = True


def get_logger(name: str = "sdr") -> logging.Logger:
    if not _logging_ready:
        configure_logging()
    return logging.getLogger(name)


# ────────────────────────────────────────────────
# TIME
# ────────────────────────────────────────────────
def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def iso_now() -> str:
    return iso_format(utc_now())


def iso_format(value: datetime) -> str:
    """Second-precision UTC ISO8601 with a Z suffix. Naive values are taken as UTC."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat(timespec="seconds").replace("+00:00", "Z")


# ────────────────────────────────────────────────
# PHONES
# ────────────────────────────────────────────────
def only_digits(value: str | None) -> str:
    if value is None:
        return ""
    return "".join(_DIGITS.findall(str(value)))


def last_10_digits(value: str | None) -> Optional[str]:
    """Lookup key for a phone in any format: its last ten digits, or None if shorter."""
    digits = only_digits(value)
    return digits[-10:] if len(digits) >= 10 else None


# ────────────────────────────────────────────────
# RETRY
# ────────────────────────────────────────────────
def retry(
    func: Callable[[], T],
    *,
    retries: int = 3,
    base_delay: float = 0.5,
    backoff: float = 2.0,
    exceptions: Iterable[type[BaseException]] = (Exception,),
    logger: Optional[logging.Logger] = None,
) -> T:
    """Call ``func`` until it succeeds, sleeping ``base_delay * backoff**n`` between tries.

    Only ``exceptions`` are retried. After ``retries`` extra attempts the last
    error is re-raised.
    """
    log = logger or get_logger(__name__)
    retryable = tuple(exceptions)
    for attempt in range(retries + 1):
        try:
            return func()
        except retryable as exc:
            if attempt == retries:
                log.error("Giving up after %s attempt(s): %s", attempt + 1, exc, exc_info=exc)
                raise
            delay = base_delay * (backoff**attempt)
            log.warning("Attempt %s/%s failed: %s; retrying in %.2fs", attempt + 1, retries + 1, exc, delay)
            time.sleep(delay)
    raise RuntimeError("unreachable")
