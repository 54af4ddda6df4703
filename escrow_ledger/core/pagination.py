"""
Limit/offset normalization shared by the donation listings.

Bad values are corrected, never rejected: a missing or non-numeric limit falls
back to the default, anything above the maximum is clamped, and a missing,
negative or non-numeric offset becomes 0.
"""
from __future__ import annotations

from typing import Any, Optional

from escrow_ledger.config import settings


def _to_int(value: Any) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    try:
        return int(str(value).strip())
    except ValueError:
        return None


def effective_limit(limit: Any = None) -> int:
    parsed = _to_int(limit)
    if parsed is None:
        return settings.PAGE_LIMIT_DEFAULT
    if parsed < 1:
        # zero or negative: same as missing
        return settings.PAGE_LIMIT_DEFAULT
    return min(parsed, settings.PAGE_LIMIT_MAX)


def effective_offset(offset: Any = None) -> int:
    parsed = _to_int(offset)
    if parsed is None or parsed < 0:
        return 0
    return parsed
