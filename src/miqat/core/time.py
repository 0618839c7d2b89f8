from __future__ import annotations
import math
from datetime import date
from typing import Tuple

from .errors import InvalidDateError

YMD = Tuple[int, int, int]

# First day of the Gregorian reform (1582-10-15) as a day number.
GREGORIAN_REFORM_JDN = 2299161
# 1 Muharram 1 AH (civil epoch), midnight.
HIJRI_EPOCH_JD = 1948439.5
HIJRI_LEAP_POSITIONS = frozenset({2, 5, 7, 10, 13, 16, 18, 21, 24, 26, 29})


def gregorian_to_jd(year: int, month: int, day: int) -> float:
    """
    Julian Day at civil midnight (Meeus, Astronomical Algorithms ch. 7).

    Dates before 1582-10-15 are read in the Julian calendar, so that
    jd_to_gregorian inverts this exactly on both sides of the reform.
    """
    if (1582, 10, 4) < (year, month, day) < (1582, 10, 15):
        raise InvalidDateError(f"{year:04d}-{month:02d}-{day:02d} falls in the Gregorian reform gap")
    y, m = year, month
    if m <= 2:
        y -= 1
        m += 12
    if (year, month, day) >= (1582, 10, 15):
        a = y // 100
        b = 2 - a + a // 4
    else:
        b = 0
    return math.floor(365.25 * (y + 4716)) + math.floor(30.6001 * (m + 1)) + day + b - 1524.5


def jd_to_gregorian(jd: float) -> YMD:
    """Inverse of gregorian_to_jd; Julian rule below JDN 2299161."""
    z = math.floor(jd + 0.5)
    if z < GREGORIAN_REFORM_JDN:
        a = z
    else:
        alpha = math.floor((z - 1867216.25) / 36524.25)
        a = z + 1 + alpha - alpha // 4
    b = a + 1524
    c = math.floor((b - 122.1) / 365.25)
    d = math.floor(365.25 * c)
    e = math.floor((b - d) / 30.6001)
    day = b - d - math.floor(30.6001 * e)
    month = e - 1 if e < 14 else e - 13
    year = c - 4716 if month > 2 else c - 4715
    return int(year), int(month), int(day)


def hijri_to_jd(year: int, month: int, day: int) -> float:
    """Tabular Hijri date to Julian Day at civil midnight (30-year cycle)."""
    return (
        day
        + (59 * (month - 1) + 1) // 2
        + (year - 1) * 354
        + (3 + 11 * year) // 30
        + HIJRI_EPOCH_JD
        - 1
    )


def jd_to_hijri(jd: float) -> YMD:
    """Exact inverse of hijri_to_jd (integer arithmetic on the day number)."""
    jdn = math.floor(jd + 0.5)
    l = jdn - 1948440 + 10632
    n = (l - 1) // 10631
    l = l - 10631 * n + 354
    j = ((10985 - l) // 5316) * ((50 * l) // 17719) + (l // 5670) * ((43 * l) // 15238)
    l = l - ((30 - j) // 15) * ((17719 * j) // 50) - (j // 16) * ((15238 * j) // 43) + 29
    month = (24 * l) // 709
    day = l - (709 * month) // 24
    year = 30 * n + j - 30
    return int(year), int(month), int(day)


def is_hijri_leap_year(year: int) -> bool:
    return year % 30 in HIJRI_LEAP_POSITIONS


def day_of_week(jd: float) -> int:
    """0=Sunday .. 6=Saturday."""
    return int(math.floor(jd + 1.5)) % 7


def date_to_jd(d: date) -> float:
    return gregorian_to_jd(d.year, d.month, d.day)


def jd_to_date(jd: float) -> date:
    y, m, d = jd_to_gregorian(jd)
    try:
        return date(y, m, d)
    except ValueError as e:
        raise InvalidDateError(f"JD {jd} is outside the supported civil range") from e
