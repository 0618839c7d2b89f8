from __future__ import annotations

from datetime import date, datetime
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple, Union

from ._bootstrap import build_registry
from .attributes.standard import FULL
from .core.engine import MethodRegistry
from .core.types import HijriDate, HijriDayInfo, Location, NextPrayer, PrayerSchedule
from .engines.hijri import HijriCalendarEngine, HijriConfig
from .engines.methods import CalculationMethodPreset
from .engines.prayer import CITIES, PrayerConfig, PrayerTimeEngine

# read-only; build your own with MethodRegistry.with_method and pass registry=
_REGISTRY: MethodRegistry = build_registry()

LocationLike = Union[Location, Tuple[float, float], Tuple[float, float, float]]
MethodLike = Union[str, CalculationMethodPreset]


def method_registry() -> MethodRegistry:
    return _REGISTRY


def _location(loc: LocationLike) -> Location:
    if isinstance(loc, Location):
        return loc
    return Location(*loc)


def list_methods() -> List[str]:
    return _REGISTRY.list()

def method_info(method: str) -> Dict[str, Any]:
    return _REGISTRY.get(method).info()

def list_cities() -> List[str]:
    return sorted(CITIES)

# ============================================================
# Hijri calendar
# ============================================================

def hijri_engine(
    *,
    adjustment: int = 0,
    arabic_numerals: bool = True,
    overrides: Optional[Mapping[int, Tuple[int, ...]]] = None,
) -> HijriCalendarEngine:
    cfg = HijriConfig(adjustment=adjustment, arabic_numerals=arabic_numerals)
    if overrides is not None:
        cfg = cfg.tweak(overrides=overrides)
    return HijriCalendarEngine(cfg)

def to_hijri(d: date, *, adjustment: int = 0) -> HijriDate:
    return hijri_engine(adjustment=adjustment).to_hijri(d)

def to_gregorian(year: int, month: int, day: int, *, adjustment: int = 0) -> date:
    return hijri_engine(adjustment=adjustment).to_gregorian(year, month, day)

def hijri_info(
    d: date,
    *,
    locale: str = "ar",
    adjustment: int = 0,
    attributes: Sequence[str] = FULL,
) -> HijriDayInfo:
    return hijri_engine(adjustment=adjustment).details(d, locale, attributes)

def format_hijri(
    d: Union[date, HijriDate],
    fmt: str = "j F Y",
    *,
    locale: str = "ar",
    adjustment: int = 0,
    arabic_numerals: bool = True,
) -> str:
    return hijri_engine(adjustment=adjustment, arabic_numerals=arabic_numerals).format(d, fmt, locale)

# ============================================================
# Prayer times
# ============================================================

def prayer_engine(
    *,
    method: MethodLike = "mwl",
    asr: str = "standard",
    high_latitude: str = "midnight",
    time_format: str = "24h",
    utc_offset: Optional[float] = None,
    offsets: Optional[Mapping[str, float]] = None,
    registry: Optional[MethodRegistry] = None,
) -> PrayerTimeEngine:
    if not isinstance(method, CalculationMethodPreset):
        method = (registry or _REGISTRY).get(method)
    cfg = PrayerConfig.from_keys(
        method, asr, high_latitude, time_format, utc_offset=utc_offset, offsets=offsets
    )
    return PrayerTimeEngine(cfg)

def prayer_schedule(d: Union[date, datetime], location: LocationLike, **config: Any) -> PrayerSchedule:
    return prayer_engine(**config).compute(d, _location(location))

def prayer_times(d: Union[date, datetime], location: LocationLike, **config: Any) -> Dict[str, str]:
    return prayer_engine(**config).get_times(d, _location(location))

def qibla(location: LocationLike) -> float:
    return PrayerTimeEngine().qibla(_location(location))

def next_prayer(location: LocationLike, now: datetime, **config: Any) -> NextPrayer:
    return prayer_engine(**config).next_prayer(_location(location), now)

def city_times(name: str, d: Union[date, datetime], **config: Any) -> Dict[str, str]:
    """Formatted times for a built-in city, using that city's customary method."""
    key = name.lower()
    if key not in CITIES:
        raise KeyError(f"Unknown city '{name}'. Available: {sorted(CITIES)}")
    loc, method = CITIES[key]
    config.setdefault("method", method)
    return prayer_times(d, loc, **config)
