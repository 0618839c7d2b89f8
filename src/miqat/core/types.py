from __future__ import annotations
import math
from dataclasses import dataclass, fields
from datetime import date
from enum import Enum
from typing import Any, Dict, Optional, Type, TypeVar, Union

from .errors import InvalidDateError, InvalidLocationError, InvalidMethodKeyError, NoSolutionError, UnsupportedLocaleError

PRAYERS = ("fajr", "sunrise", "dhuhr", "asr", "maghrib", "isha", "midnight")

E = TypeVar("E", bound=Enum)


class AsrMethod(str, Enum):
    STANDARD = "standard"
    HANAFI = "hanafi"

    @property
    def shadow_factor(self) -> int:
        return 2 if self is AsrMethod.HANAFI else 1


class HighLatitudeMethod(str, Enum):
    NONE = "none"
    MIDNIGHT = "midnight"
    ONE_SEVENTH = "oneseventh"
    ANGLE = "angle"


class TimeFormat(str, Enum):
    H24 = "24h"
    H12 = "12h"
    FLOAT = "float"


class MidnightMode(str, Enum):
    STANDARD = "standard"
    JAFARI = "jafari"


class Locale(str, Enum):
    AR = "ar"
    EN = "en"


def coerce_enum(cls: Type[E], value: Union[str, E], what: str) -> E:
    """Accept an enum member or its key; unknown keys raise InvalidMethodKeyError."""
    if isinstance(value, cls):
        return value
    try:
        return cls(str(value).lower())
    except ValueError:
        raise InvalidMethodKeyError(
            f"Unknown {what} '{value}'. Available: {sorted(m.value for m in cls)}"
        ) from None


def resolve_locale(value: Union[str, Locale]) -> Locale:
    if isinstance(value, Locale):
        return value
    try:
        return Locale(str(value).lower())
    except ValueError:
        raise UnsupportedLocaleError(f"Unsupported locale '{value}'. Supported: ['ar', 'en']") from None


@dataclass(frozen=True, order=True)
class HijriDate:
    year: int
    month: int
    day: int

    def __post_init__(self) -> None:
        if self.year < 1:
            raise InvalidDateError(f"Invalid Hijri year {self.year}")
        if not 1 <= self.month <= 12:
            raise InvalidDateError(f"Invalid Hijri month {self.month}; must be 1-12")
        if not 1 <= self.day <= 30:
            raise InvalidDateError(f"Invalid Hijri day {self.day}; must be 1-30")

    def isoformat(self) -> str:
        return f"{self.year:04d}-{self.month:02d}-{self.day:02d}"


@dataclass(frozen=True)
class Location:
    latitude: float
    longitude: float
    elevation: float = 0.0  # meters

    def __post_init__(self) -> None:
        for name in ("latitude", "longitude", "elevation"):
            if not math.isfinite(getattr(self, name)):
                raise InvalidLocationError(f"{name} must be a finite number")
        if not -90.0 <= self.latitude <= 90.0:
            raise InvalidLocationError(f"Invalid latitude {self.latitude}; must be in [-90, 90]")
        if not -180.0 <= self.longitude <= 180.0:
            raise InvalidLocationError(f"Invalid longitude {self.longitude}; must be in [-180, 180]")
        if self.elevation < 0:
            raise InvalidLocationError(f"Invalid elevation {self.elevation}; must be >= 0")


@dataclass(frozen=True)
class Hours:
    """Decimal hours in [0, 24)."""
    value: float

    available = True

    def unwrap(self) -> float:
        return self.value


@dataclass(frozen=True)
class NoSolution:
    """The sun does not reach the required altitude; carries the reason."""
    reason: str = "sun does not reach the required altitude"

    available = False

    def unwrap(self) -> float:
        raise NoSolutionError(self.reason)


HourResult = Union[Hours, NoSolution]


@dataclass(frozen=True)
class PrayerSchedule:
    fajr: HourResult
    sunrise: HourResult
    dhuhr: HourResult
    asr: HourResult
    maghrib: HourResult
    isha: HourResult
    midnight: HourResult

    def as_dict(self) -> Dict[str, HourResult]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


@dataclass(frozen=True)
class NextPrayer:
    name: str
    time: float  # decimal hours
    remaining_minutes: int
    day: date


@dataclass(frozen=True)
class HijriDayInfo:
    civil_date: date
    hijri: HijriDate
    weekday: int  # 0=Sunday
    attributes: Optional[Dict[str, Any]] = None
