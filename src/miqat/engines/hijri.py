from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field, replace
from datetime import date
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

from ..core.errors import InvalidDateError
from ..core.time import (
    date_to_jd,
    day_of_week,
    hijri_to_jd,
    is_hijri_leap_year,
    jd_to_date,
    jd_to_hijri,
)
from ..core.types import HijriDate, HijriDayInfo, Locale, resolve_locale
from ..presentation import hijri_format as hf
from ..presentation import names
from .hijri_tables import EID_AL_ADHA, EID_AL_FITR, ISLAMIC_EVENTS, RAMADAN, UMM_AL_QURA_OVERRIDES, event_key

logger = logging.getLogger(__name__)

MAX_ADJUSTMENT = 2

DateLike = Union[date, HijriDate]


def _tabular_year_length(year: int) -> int:
    return 355 if is_hijri_leap_year(year) else 354


@dataclass(frozen=True)
class HijriConfig:
    """
    adjustment: days added to the Julian Day before conversion, clamped to [-2, 2].
    overrides: per-year month lengths that replace the tabular rule, stored as
        sorted (year, lengths) pairs. A Mapping is accepted and normalized.
    """
    adjustment: int = 0
    arabic_numerals: bool = True
    overrides: Tuple[Tuple[int, Tuple[int, ...]], ...] = field(
        default_factory=lambda: tuple(sorted(UMM_AL_QURA_OVERRIDES.items()))
    )
    default_format: str = hf.DEFAULT_FORMAT

    def __post_init__(self) -> None:
        adj = max(-MAX_ADJUSTMENT, min(MAX_ADJUSTMENT, int(self.adjustment)))
        if adj != self.adjustment:
            logger.debug("Hijri adjustment %s clamped to %s", self.adjustment, adj)
        object.__setattr__(self, "adjustment", adj)
        overrides = dict(self.overrides)
        for year, lengths in overrides.items():
            if len(lengths) != 12 or any(n not in (29, 30) for n in lengths):
                raise ValueError(f"Override for {year} must list twelve month lengths of 29 or 30")
        object.__setattr__(
            self, "overrides", tuple(sorted((int(y), tuple(int(n) for n in v)) for y, v in overrides.items()))
        )

    def tweak(self, **kwargs) -> "HijriConfig":
        return replace(self, **kwargs)


class HijriCalendarEngine:
    """
    Tabular Hijri calendar with optional per-year month-length overrides.

    An overridden year starts where the previous year ends, so a year whose
    override total differs from the tabular 354/355 moves the start of every
    later year by the difference. Conversion, validation and arithmetic all
    read the same month lengths.
    """

    def __init__(self, config: Optional[HijriConfig] = None, **kwargs: Any):
        if config is None:
            config = HijriConfig(**kwargs)
        elif kwargs:
            config = config.tweak(**kwargs)
        self.config = config
        self._lengths = dict(config.overrides)
        # (year, days moved relative to the tabular start of year + 1)
        self._shifts: List[Tuple[int, int]] = []
        shift = 0
        for year, lengths in config.overrides:
            shift += sum(lengths) - _tabular_year_length(year)
            self._shifts.append((year, shift))

    def __repr__(self) -> str:
        return f"HijriCalendarEngine({self.config!r})"

    @property
    def adjustment(self) -> int:
        return self.config.adjustment

    def info(self) -> Dict[str, Any]:
        return {
            "calendar": "tabular-hijri",
            "adjustment": self.config.adjustment,
            "arabic_numerals": self.config.arabic_numerals,
            "override_years": [year for year, _ in self.config.overrides],
            "supported_locales": [loc.value for loc in Locale],
        }

    # ---------------------------------------------------------------
    # month/year structure
    # ---------------------------------------------------------------

    def is_leap_year(self, year: int) -> bool:
        return is_hijri_leap_year(year)

    def days_in_month(self, year: int, month: int) -> int:
        if not 1 <= month <= 12:
            raise InvalidDateError(f"Invalid Hijri month {month}; must be 1-12")
        lengths = self._lengths.get(year)
        if lengths is not None:
            return lengths[month - 1]
        if month == 12 and self.is_leap_year(year):
            return 30
        return 30 if month % 2 == 1 else 29

    def days_in_year(self, year: int) -> int:
        lengths = self._lengths.get(year)
        if lengths is not None:
            return sum(lengths)
        return _tabular_year_length(year)

    def is_valid(self, year: int, month: int, day: int) -> bool:
        return year >= 1 and 1 <= month <= 12 and 1 <= day <= self.days_in_month(year, month)

    def validate(self, year: int, month: int, day: int) -> HijriDate:
        if year < 1:
            raise InvalidDateError(f"Invalid Hijri year {year}")
        if not 1 <= month <= 12:
            raise InvalidDateError(f"Invalid Hijri month {month}; must be 1-12")
        max_day = self.days_in_month(year, month)
        if not 1 <= day <= max_day:
            raise InvalidDateError(f"Invalid Hijri day {day}; must be 1-{max_day}")
        return HijriDate(year, month, day)

    # ---------------------------------------------------------------
    # Julian Day with overrides
    # ---------------------------------------------------------------

    def _shift_before(self, year: int) -> int:
        shift = 0
        for y, s in self._shifts:
            if y >= year:
                break
            shift = s
        return shift

    def _year_start(self, year: int) -> float:
        return hijri_to_jd(year, 1, 1) + self._shift_before(year)

    def to_jd(self, year: int, month: int, day: int) -> float:
        """Julian Day at civil midnight starting the given Hijri day."""
        if not self._shifts:
            return hijri_to_jd(year, month, day)
        lengths = self._lengths.get(year)
        if lengths is None:
            return hijri_to_jd(year, month, day) + self._shift_before(year)
        return self._year_start(year) + sum(lengths[: month - 1]) + day - 1

    def from_jd(self, jd: float) -> Tuple[int, int, int]:
        if not self._shifts:
            return jd_to_hijri(jd)
        midnight = math.floor(jd + 0.5) - 0.5
        year = jd_to_hijri(midnight)[0]
        while midnight < self._year_start(year):
            year -= 1
        while midnight >= self._year_start(year + 1):
            year += 1
        offset = int(midnight - self._year_start(year))
        month = 1
        while offset >= self.days_in_month(year, month):
            offset -= self.days_in_month(year, month)
            month += 1
        return year, month, offset + 1

    # ---------------------------------------------------------------
    # conversion
    # ---------------------------------------------------------------

    def to_hijri(self, d: date) -> HijriDate:
        y, m, day = self.from_jd(date_to_jd(d) + self.config.adjustment)
        if y < 1:
            raise InvalidDateError(f"{d.isoformat()} is before the Hijri epoch")
        return HijriDate(y, m, day)

    def to_gregorian(self, year: int, month: int, day: int) -> date:
        self.validate(year, month, day)
        return jd_to_date(self.to_jd(year, month, day) - self.config.adjustment)

    def today(self, today: Optional[date] = None) -> HijriDate:
        return self.to_hijri(today or date.today())

    def _as_hijri(self, value: DateLike) -> HijriDate:
        if isinstance(value, HijriDate):
            return self.validate(value.year, value.month, value.day)
        return self.to_hijri(value)

    def _weekday(self, h: HijriDate) -> int:
        return day_of_week(self.to_jd(h.year, h.month, h.day) - self.config.adjustment)


    # ---------------------------------------------------------------
    # names, events, formatting
    # ---------------------------------------------------------------

    def month_name(self, month: int, locale: Union[str, Locale] = Locale.AR) -> str:
        return names.month_name(month, locale)

    def day_name(self, value: DateLike, locale: Union[str, Locale] = Locale.AR) -> str:
        return names.day_name(self._weekday(self._as_hijri(value)), locale)

    def format(self, value: DateLike, fmt: Optional[str] = None, locale: Union[str, Locale] = Locale.AR) -> str:
        h = self._as_hijri(value)
        return hf.format_hijri(
            h,
            fmt or self.config.default_format,
            locale,
            weekday=self._weekday(h),
            arabic_numerals=self.config.arabic_numerals,
        )

    def parse(self, text: str, fmt: str = "Y-m-d", locale: Union[str, Locale] = Locale.EN) -> HijriDate:
        h = hf.parse_hijri(text, fmt, locale)
        return self.validate(h.year, h.month, h.day)

    def event(self, month: int, day: int, locale: Union[str, Locale] = Locale.AR) -> Optional[str]:
        loc = resolve_locale(locale)
        names_ = ISLAMIC_EVENTS.get(event_key(month, day))
        return None if names_ is None else names_[loc.value]

    def all_events(self, locale: Union[str, Locale] = Locale.AR) -> Dict[str, str]:
        loc = resolve_locale(locale)
        return {k: v[loc.value] for k, v in ISLAMIC_EVENTS.items()}

    def details(
        self,
        d: date,
        locale: Union[str, Locale] = Locale.AR,
        attributes: Sequence[str] = (),
    ) -> HijriDayInfo:
        from ..attributes.registry import compute_attributes

        info = HijriDayInfo(civil_date=d, hijri=self.to_hijri(d), weekday=day_of_week(date_to_jd(d)))
        if attributes:
            info = replace(info, attributes=compute_attributes(info, attributes, engine=self, locale=locale))
        return info

    # ---------------------------------------------------------------
    # arithmetic
    # ---------------------------------------------------------------

    def age(self, birth_year: int, birth_month: int, birth_day: int, *, today: Optional[date] = None) -> int:
        self.validate(birth_year, birth_month, birth_day)
        now = self.today(today)
        years = now.year - birth_year
        if (now.month, now.day) < (birth_month, birth_day):
            years -= 1
        return max(0, years)

    def add_days(self, h: HijriDate, days: int) -> HijriDate:
        h = self.validate(h.year, h.month, h.day)
        y, m, d = self.from_jd(self.to_jd(h.year, h.month, h.day) + days)
        if y < 1:
            raise InvalidDateError("Result is before the Hijri epoch")
        return HijriDate(y, m, d)

    def add_months(self, h: HijriDate, months: int) -> HijriDate:
        h = self.validate(h.year, h.month, h.day)
        index = h.year * 12 + (h.month - 1) + months
        year, month = divmod(index, 12)
        month += 1
        if year < 1:
            raise InvalidDateError("Result is before the Hijri epoch")
        return HijriDate(year, month, min(h.day, self.days_in_month(year, month)))

    def diff_in_days(self, a: HijriDate, b: HijriDate) -> int:
        """Absolute number of days between two Hijri dates."""
        return int(abs(self.to_jd(b.year, b.month, b.day) - self.to_jd(a.year, a.month, a.day)))

    # ---------------------------------------------------------------
    # shortcuts
    # ---------------------------------------------------------------

    def ramadan_start(self, year: int) -> date:
        return self.to_gregorian(year, *RAMADAN)

    def eid_al_fitr(self, year: int) -> date:
        return self.to_gregorian(year, *EID_AL_FITR)

    def eid_al_adha(self, year: int) -> date:
        return self.to_gregorian(year, *EID_AL_ADHA)
