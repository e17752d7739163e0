import re
import time
from datetime import datetime, timedelta, timezone

from s3link.core.exceptions import InvalidExpirationError
from s3link.schemas import Expiration

_UNIT_SECONDS = {
    "second": 1,
    "sec": 1,
    "minute": 60,
    "min": 60,
    "hour": 3600,
    "day": 86400,
    "week": 604800,
}

_RELATIVE_RE = re.compile(r"^\+?\s*(\d+)\s*([a-z]+?)s?$")
_NUMERIC_RE = re.compile(r"^\d+(\.\d+)?$")


def _relative_seconds(value: str) -> int:
    match = _RELATIVE_RE.match(value)
    if not match:
        raise InvalidExpirationError(f"Unrecognised expiration: {value!r}")
    amount, unit = match.groups()
    if unit not in _UNIT_SECONDS:
        raise InvalidExpirationError(f"Unknown expiration unit: {unit!r}")
    return int(amount) * _UNIT_SECONDS[unit]


def expires_in_seconds(expiration: Expiration, now: float | None = None) -> int:
    """Convert an expiration into the number of seconds a signature stays valid.

    Numbers (and numeric strings) are absolute Unix timestamps, ``datetime``
    values are absolute instants (naive ones are taken as UTC), ``timedelta``
    values and strings such as ``"+15 minutes"`` are relative to now. Instants
    already in the past give zero or negative windows, which sign into URLs
    that are expired on arrival.
    """
    now = time.time() if now is None else now

    if isinstance(expiration, bool):
        raise InvalidExpirationError("Expiration must not be a boolean")

    if isinstance(expiration, timedelta):
        seconds = int(expiration.total_seconds())
    elif isinstance(expiration, datetime):
        if expiration.tzinfo is None:
            expiration = expiration.replace(tzinfo=timezone.utc)
        seconds = int(expiration.timestamp() - now)
    elif isinstance(expiration, (int, float)):
        seconds = int(expiration - now)
    elif isinstance(expiration, str):
        value = expiration.strip().lower()
        if _NUMERIC_RE.match(value):
            seconds = int(float(value) - now)
        elif value == "now":
            seconds = 0
        else:
            seconds = _relative_seconds(value)
    else:
        raise InvalidExpirationError(
            f"Unsupported expiration type: {type(expiration).__name__}"
        )

    return seconds
