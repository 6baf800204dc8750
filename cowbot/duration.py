"""Conversion between compact duration strings ("1h30m") and milliseconds."""

from __future__ import annotations

_DIGITS = "0123456789"

_UNIT_MS = {
    "s": 1000,
    "m": 60 * 1000,
    "h": 60 * 60 * 1000,
    "d": 24 * 60 * 60 * 1000,
}


def _as_i32(value: int) -> int:
    value &= 0xFFFFFFFF
    return value - 0x100000000 if value >= 0x80000000 else value


def to_ms(s: str) -> int | None:
    """Parse a string like ``"1d2h3m4s"`` into milliseconds.

    Digits not followed by a unit are ignored. Returns ``None`` when an
    unknown unit character is found.
    """
    total = 0
    digits = 0
    for ch in str(s):
        if ch in _DIGITS:
            digits = digits * 10 + int(ch)
            continue
        factor = _UNIT_MS.get(ch)
        if factor is None:
            return None
        total += digits * factor
        digits = 0
    return _as_i32(total)


def from_ms(ms: int) -> str:
    """Render milliseconds as ``"Xd Xh Xm Xs"``, dropping leading zero units."""
    if ms < 0:
        raise ValueError("duration must not be negative")
    days, rest = divmod(ms // 1000, 24 * 3600)
    hours, rest = divmod(rest, 3600)
    mins, secs = divmod(rest, 60)

    if days:
        return f"{days}d {hours}h {mins}m {secs}s"
    if hours:
        return f"{hours}h {mins}m {secs}s"
    if mins:
        return f"{mins}m {secs}s"
    return f"{secs}s"