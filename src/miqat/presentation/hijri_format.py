"""Hijri date formatting and parsing.

Token grammar (one character per token, anything else is copied literally):

  d  day, two digits          j  day, no padding
  D  day name, abbreviated    l  day name, full
  m  month, two digits        n  month, no padding
  F  month name, full         M  month name, abbreviated
  Y  year                     y  year, last two digits
"""
from __future__ import annotations

import re
from typing import Callable, Dict, List, Optional, Union

from ..core.errors import InvalidDateError
from ..core.types import HijriDate, Locale, resolve_locale
from .names import DAYS, MONTHS, day_name, month_name

DEFAULT_FORMAT = "j F Y"

_WESTERN = "0123456789"
_ARABIC_INDIC = "٠١٢٣٤٥٦٧٨٩"
_TO_ARABIC = str.maketrans(_WESTERN, _ARABIC_INDIC)
_TO_WESTERN = str.maketrans(_ARABIC_INDIC, _WESTERN)


def to_arabic_numerals(text: str) -> str:
    return text.translate(_TO_ARABIC)


def to_western_numerals(text: str) -> str:
    return text.translate(_TO_WESTERN)


def _tokens(h: HijriDate, weekday: int, loc: Locale) -> Dict[str, Callable[[], str]]:
    return {
        "d": lambda: f"{h.day:02d}",
        "j": lambda: str(h.day),
        "D": lambda: day_name(weekday, loc, short=True),
        "l": lambda: day_name(weekday, loc),
        "m": lambda: f"{h.month:02d}",
        "n": lambda: str(h.month),
        "F": lambda: month_name(h.month, loc),
        "M": lambda: month_name(h.month, loc, short=True),
        "Y": lambda: str(h.year),
        "y": lambda: f"{h.year % 100:02d}",
    }


def format_hijri(
    h: HijriDate,
    fmt: str = DEFAULT_FORMAT,
    locale: Union[str, Locale] = Locale.AR,
    *,
    weekday: int = 0,
    arabic_numerals: bool = True,
) -> str:
    """Render h with the token grammar; weekday is 0=Sunday and only used by D/l."""
    loc = resolve_locale(locale)
    tokens = _tokens(h, weekday, loc)
    out = "".join(tokens[ch]() if ch in tokens else ch for ch in fmt)
    if loc is Locale.AR and arabic_numerals:
        out = to_arabic_numerals(out)
    return out


def _alternation(names) -> str:
    # longest first so "ربيع الأول" wins over a shorter prefix
    return "(" + "|".join(re.escape(n) for n in sorted(names, key=len, reverse=True)) + ")"


def parse_hijri(text: str, fmt: str = "Y-m-d", locale: Union[str, Locale] = Locale.EN) -> HijriDate:
    """
    Inverse of format_hijri for the tokens d j m n F Y (D and l are matched
    and ignored). Either digit set is accepted.

    M and y cannot be parsed back unambiguously and raise ValueError.
    """
    loc = resolve_locale(locale)
    months = MONTHS[loc]
    pattern: List[str] = []
    fields: List[str] = []
    for ch in fmt:
        if ch in "dj":
            pattern.append(r"(\d{1,2})")
            fields.append("day")
        elif ch in "mn":
            pattern.append(r"(\d{1,2})")
            fields.append("month")
        elif ch == "Y":
            pattern.append(r"(\d+)")
            fields.append("year")
        elif ch == "F":
            pattern.append(_alternation(months))
            fields.append("month_name")
        elif ch in "Dl":
            pattern.append(_alternation(list(DAYS[loc]) + [n[:3] for n in DAYS[loc]]))
            fields.append("")
        elif ch in "My":
            raise ValueError(f"Format token '{ch}' is not reversible")
        else:
            pattern.append(re.escape(ch))

    m = re.fullmatch("".join(pattern), to_western_numerals(text.strip()))
    if m is None:
        raise InvalidDateError(f"'{text}' does not match format '{fmt}'")

    values: Dict[str, int] = {}
    for name, raw in zip(fields, m.groups()):
        if name == "month_name":
            values["month"] = months.index(raw) + 1
        elif name:
            values[name] = int(raw)
    missing = {"year", "month", "day"} - set(values)
    if missing:
        raise ValueError(f"Format '{fmt}' does not carry {sorted(missing)}")
    return HijriDate(values["year"], values["month"], values["day"])


_RELATIVE: Dict[Locale, Dict[int, str]] = {
    Locale.AR: {0: "اليوم", 1: "غداً", -1: "أمس", 2: "بعد غد", -2: "أول أمس"},
    Locale.EN: {0: "Today", 1: "Tomorrow", -1: "Yesterday"},
}


def relative_day(days_diff: int, locale: Union[str, Locale] = Locale.AR) -> Optional[str]:
    """Word for a day offset from today, or None when the language has none."""
    return _RELATIVE[resolve_locale(locale)].get(days_diff)
