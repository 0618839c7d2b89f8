from __future__ import annotations

import math
from typing import Dict, Union

from ..core.types import HourResult, NoSolution, TimeFormat, coerce_enum
from ..reference.angles import fix_hour
from .hijri_format import to_arabic_numerals

INVALID_TIME = "-----"

TimeValue = Union[HourResult, float]


def _hours(value: TimeValue) -> float:
    if isinstance(value, NoSolution):
        return math.nan
    if isinstance(value, (int, float)):
        return float(value)
    return value.value


def _clock(t: float):
    # round to the nearest minute before splitting
    t = fix_hour(t + 0.5 / 60.0)
    h = int(math.floor(t))
    m = int(math.floor((t - h) * 60.0))
    return h, m


def format_hours(value: TimeValue, fmt: Union[str, TimeFormat] = TimeFormat.H24) -> str:
    """HH:MM, H:MM AM/PM, four-decimal hours, or ----- when unavailable."""
    fmt = coerce_enum(TimeFormat, fmt, "time format")
    t = _hours(value)
    if not math.isfinite(t):
        return INVALID_TIME
    if fmt is TimeFormat.FLOAT:
        return f"{t:.4f}"
    h, m = _clock(t)
    if fmt is TimeFormat.H12:
        suffix = "AM" if h < 12 else "PM"
        return f"{(h + 11) % 12 + 1}:{m:02d} {suffix}"
    return f"{h:02d}:{m:02d}"


def to_arabic_time(value: TimeValue, use_12h: bool = False) -> str:
    out = format_hours(value, TimeFormat.H12 if use_12h else TimeFormat.H24)
    out = to_arabic_numerals(out)
    if use_12h:
        out = out.replace("AM", "ص").replace("PM", "م")
    return out


def to_decimal(text: str) -> float:
    """'HH:MM[:SS]' with an optional AM/PM suffix, to decimal hours."""
    s = text.strip().upper()
    suffix = None
    if s.endswith(("AM", "PM")):
        s, suffix = s[:-2].strip(), s[-2:]
    parts = s.split(":")
    if len(parts) < 2:
        raise ValueError(f"Not a clock time: '{text}'")
    h, m = int(parts[0]), int(parts[1])
    sec = int(parts[2]) if len(parts) > 2 else 0
    if suffix is not None:
        h = h % 12 + (12 if suffix == "PM" else 0)
    return h + m / 60.0 + sec / 3600.0


def add_minutes(t: float, minutes: float) -> float:
    return fix_hour(t + minutes / 60.0)


def diff_in_minutes(t1: float, t2: float) -> int:
    """Minutes from t1 forward to t2, wrapping past midnight."""
    diff = t2 - t1
    if diff < 0:
        diff += 24.0
    return int(round(diff * 60.0))


def split_minutes(total_minutes: int) -> Dict[str, int]:
    return {
        "hours": total_minutes // 60,
        "minutes": total_minutes % 60,
        "total_minutes": total_minutes,
    }
