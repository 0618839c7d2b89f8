from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from datetime import date, datetime, timedelta
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Tuple, Union

from ..core.errors import InvalidMethodKeyError
from ..core.time import date_to_jd
from ..core.types import (
    PRAYERS,
    AsrMethod,
    HighLatitudeMethod,
    Hours,
    HourResult,
    Location,
    MidnightMode,
    NextPrayer,
    NoSolution,
    PrayerSchedule,
    TimeFormat,
    coerce_enum,
)
from ..presentation.time_format import format_hours
from ..reference import solar
from ..reference.angles import fix_hour, time_diff
from .methods import DEFAULT_METHOD, METHODS, CalculationMethodPreset, custom_method

logger = logging.getLogger(__name__)

# Beyond this latitude the twilight angles are also capped by the night portion.
HIGH_LATITUDE_THRESHOLD = 48.0

# First guesses (local mean solar hours) for the instant the sun position is sampled.
_GUESS = {
    "fajr": 5.0,
    "sunrise": 6.0,
    "dhuhr": 12.0,
    "asr": 13.0,
    "sunset": 18.0,
    "isha": 18.0,
}

_DAILY = ("fajr", "sunrise", "dhuhr", "asr", "maghrib", "isha")

CITIES: Mapping[str, Tuple[Location, str]] = MappingProxyType({
    "makkah": (Location(21.4225, 39.8262), "makkah"),
    "madinah": (Location(24.4686, 39.6142), "makkah"),
    "cairo": (Location(30.0444, 31.2357), "egypt"),
    "dubai": (Location(25.2048, 55.2708), "gulf"),
    "riyadh": (Location(24.7136, 46.6753), "makkah"),
    "istanbul": (Location(41.0082, 28.9784), "turkey"),
})

MethodLike = Union[str, CalculationMethodPreset]
DateLike = Union[date, datetime]


def resolve_method(method: MethodLike) -> CalculationMethodPreset:
    if isinstance(method, CalculationMethodPreset):
        return method
    key = str(method).lower()
    if key == "custom":
        return custom_method()
    if key not in METHODS:
        raise InvalidMethodKeyError(f"Unknown method '{method}'. Available: {sorted(METHODS) + ['custom']}")
    return METHODS[key]


@dataclass(frozen=True)
class PrayerConfig:
    """
    Immutable calculation settings.

    utc_offset: hours added to UTC for the output clock; None means "take it
    from an aware datetime argument, else 0".
    offsets: manual per-prayer adjustments in minutes, stored as sorted pairs.
    """
    method: CalculationMethodPreset = METHODS[DEFAULT_METHOD]
    asr: AsrMethod = AsrMethod.STANDARD
    high_latitude: HighLatitudeMethod = HighLatitudeMethod.MIDNIGHT
    time_format: TimeFormat = TimeFormat.H24
    utc_offset: Optional[float] = None
    offsets: Tuple[Tuple[str, float], ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "method", resolve_method(self.method))
        object.__setattr__(self, "asr", coerce_enum(AsrMethod, self.asr, "asr method"))
        object.__setattr__(self, "high_latitude",
                           coerce_enum(HighLatitudeMethod, self.high_latitude, "high latitude method"))
        object.__setattr__(self, "time_format", coerce_enum(TimeFormat, self.time_format, "time format"))
        offsets = dict(self.offsets)
        for name in offsets:
            if name not in PRAYERS:
                raise InvalidMethodKeyError(f"Unknown prayer '{name}' in offsets. Available: {list(PRAYERS)}")
        object.__setattr__(self, "offsets", tuple(sorted((k, float(v)) for k, v in offsets.items())))

    @classmethod
    def from_keys(
        cls,
        method: MethodLike = DEFAULT_METHOD,
        asr: str = "standard",
        high_latitude: str = "midnight",
        time_format: str = "24h",
        *,
        utc_offset: Optional[float] = None,
        offsets: Optional[Mapping[str, float]] = None,
        **custom: Any,
    ) -> "PrayerConfig":
        """Build from string keys; custom angle keywords imply the 'custom' method."""
        if custom:
            if method not in (DEFAULT_METHOD, "custom"):
                raise InvalidMethodKeyError("Custom angles can only be combined with method='custom'")
            method = custom_method(**custom)
        return cls(
            method=method,
            asr=asr,
            high_latitude=high_latitude,
            time_format=time_format,
            utc_offset=utc_offset,
            offsets=tuple((offsets or {}).items()),
        )

    def offset(self, prayer: str) -> float:
        return dict(self.offsets).get(prayer, 0.0)

    def tweak(self, **kwargs) -> "PrayerConfig":
        if "offsets" in kwargs and isinstance(kwargs["offsets"], Mapping):
            kwargs["offsets"] = tuple(kwargs["offsets"].items())
        return replace(self, **kwargs)

    def info(self) -> Dict[str, Any]:
        return {
            "method": self.method.info(),
            "asr": self.asr.value,
            "high_latitude": self.high_latitude.value,
            "time_format": self.time_format.value,
            "utc_offset": self.utc_offset,
            "offsets": dict(self.offsets),
        }


def _shift(value: HourResult, hours: float) -> HourResult:
    if isinstance(value, NoSolution):
        return value
    return Hours(value.value + hours)


class PrayerTimeEngine:
    """
    Daily prayer schedule from the low-precision solar model.

    The engine holds only its frozen PrayerConfig; with_config returns a new
    engine, so instances can be shared freely.
    """

    def __init__(self, config: Optional[PrayerConfig] = None, **kwargs: Any):
        if config is None:
            config = PrayerConfig(**kwargs)
        elif kwargs:
            config = config.tweak(**kwargs)
        self.config = config

    def __repr__(self) -> str:
        return f"PrayerTimeEngine({self.config!r})"

    def with_config(self, **changes: Any) -> "PrayerTimeEngine":
        return PrayerTimeEngine(self.config.tweak(**changes))

    def info(self) -> Dict[str, Any]:
        return self.config.info()

    # ---------------------------------------------------------------
    # numeric layer
    # ---------------------------------------------------------------

    def _timezone(self, when: DateLike) -> float:
        if self.config.utc_offset is not None:
            return float(self.config.utc_offset)
        if isinstance(when, datetime) and when.utcoffset() is not None:
            return when.utcoffset().total_seconds() / 3600.0
        return 0.0

    def _event(self, jd0: float, guess: str, angle: float, loc: Location, tz: float, ccw: bool) -> HourResult:
        pos = solar.sun_position(jd0 + _GUESS[guess] / 24.0)
        transit = solar.mid_day(pos.equation_of_time_hours, loc.longitude, tz)
        return _shift(solar.sun_angle_time(angle, loc.latitude, pos.declination_deg, ccw), transit)

    def _raw_times(self, day: date, loc: Location, tz: float) -> Dict[str, HourResult]:
        """Unwrapped times (may fall outside [0,24)) with the high-latitude rule applied."""
        method = self.config.method
        jd0 = date_to_jd(day) - loc.longitude / 360.0
        horizon = solar.horizon_angle(loc.elevation)

        noon = solar.sun_position(jd0 + _GUESS["dhuhr"] / 24.0)
        dhuhr = solar.mid_day(noon.equation_of_time_hours, loc.longitude, tz)

        times: Dict[str, HourResult] = {
            "fajr": self._event(jd0, "fajr", -method.fajr_angle, loc, tz, False),
            "sunrise": self._event(jd0, "sunrise", horizon, loc, tz, False),
            "dhuhr": Hours(dhuhr),
            "sunset": self._event(jd0, "sunset", horizon, loc, tz, True),
        }

        asr_pos = solar.sun_position(jd0 + _GUESS["asr"] / 24.0)
        asr_alt = solar.asr_angle(self.config.asr.shadow_factor, loc.latitude, asr_pos.declination_deg)
        times["asr"] = self._event(jd0, "asr", asr_alt, loc, tz, True)

        times["maghrib"] = _shift(times["sunset"], method.maghrib_minutes / 60.0)
        if method.isha_by_interval:
            times["isha"] = _shift(times["maghrib"], method.isha_minutes / 60.0)
        else:
            times["isha"] = self._event(jd0, "isha", -method.isha_angle, loc, tz, True)

        for name, value in times.items():
            if isinstance(value, NoSolution):
                logger.debug("%s on %s at lat %.4f: %s", name, day, loc.latitude, value.reason)

        self._adjust_high_latitude(times, loc, day)
        return times

    def _night_portion(self, angle: float, night: float) -> float:
        rule = self.config.high_latitude
        if rule is HighLatitudeMethod.ANGLE:
            return angle / 60.0 * night
        if rule is HighLatitudeMethod.ONE_SEVENTH:
            return night / 7.0
        return night / 2.0

    def _adjust_high_latitude(self, times: Dict[str, HourResult], loc: Location, day: date) -> None:
        if self.config.high_latitude is HighLatitudeMethod.NONE:
            return
        sunrise, sunset = times["sunrise"], times["sunset"]
        if isinstance(sunrise, NoSolution) or isinstance(sunset, NoSolution):
            # polar day or night: no night to take a portion of
            return
        night = time_diff(sunset.value, sunrise.value)
        high = abs(loc.latitude) >= HIGH_LATITUDE_THRESHOLD
        method = self.config.method

        fajr = times["fajr"]
        portion = self._night_portion(method.fajr_angle, night)
        if isinstance(fajr, NoSolution) or (high and sunrise.value - fajr.value > portion):
            times["fajr"] = Hours(sunrise.value - portion)
            logger.debug("fajr on %s moved to %s of the night before sunrise", day, self.config.high_latitude.value)

        if not method.isha_by_interval:
            isha = times["isha"]
            portion = self._night_portion(method.isha_angle, night)
            if isinstance(isha, NoSolution) or (high and isha.value - sunset.value > portion):
                times["isha"] = Hours(sunset.value + portion)
                logger.debug("isha on %s moved to %s of the night after sunset", day, self.config.high_latitude.value)

    def _midnight(self, times: Dict[str, HourResult], next_fajr: HourResult) -> HourResult:
        sunset = times["sunset"]
        if isinstance(sunset, NoSolution) or isinstance(next_fajr, NoSolution):
            return NoSolution("midnight needs both sunset and the next fajr")
        span = next_fajr.value + 24.0 - sunset.value
        ratio = 2.0 / 3.0 if self.config.method.midnight is MidnightMode.JAFARI else 0.5
        return Hours(sunset.value + span * ratio)

    def _unwrapped(self, day: date, location: Location, tz: float) -> Dict[str, HourResult]:
        times = self._raw_times(day, location, tz)
        next_fajr = self._raw_times(day + timedelta(days=1), location, tz)["fajr"]
        times["midnight"] = self._midnight(times, next_fajr)
        return {name: _shift(times[name], self.config.offset(name) / 60.0) for name in PRAYERS}

    def compute(self, d: DateLike, location: Location) -> PrayerSchedule:
        """All seven times as decimal hours in [0,24) or NoSolution."""
        tz = self._timezone(d)
        day = d.date() if isinstance(d, datetime) else d
        out: Dict[str, HourResult] = {}
        for name, value in self._unwrapped(day, location, tz).items():
            out[name] = value if isinstance(value, NoSolution) else Hours(fix_hour(value.value))
        return PrayerSchedule(**out)

    def time_of(self, prayer: str, d: DateLike, location: Location) -> HourResult:
        """Single prayer; NoSolution stays a value, call .unwrap() to raise instead."""
        if prayer not in PRAYERS:
            raise KeyError(f"Unknown prayer '{prayer}'. Available: {list(PRAYERS)}")
        return getattr(self.compute(d, location), prayer)

    # ---------------------------------------------------------------
    # presentation layer
    # ---------------------------------------------------------------

    def get_times(self, d: DateLike, location: Location) -> Dict[str, str]:
        sched = self.compute(d, location)
        fmt = self.config.time_format
        return {name: format_hours(value, fmt) for name, value in sched.as_dict().items()}

    def qibla(self, location: Location) -> float:
        return solar.qibla_bearing(location.latitude, location.longitude)

    def next_prayer(self, location: Location, now: datetime) -> NextPrayer:
        """
        First daily prayer strictly after now.

        Times are compared before wrapping to [0,24), so an Isha that falls
        after midnight still belongs to the previous evening. `day` is the
        date whose schedule the prayer comes from.
        """
        tz = self._timezone(now)
        current = now.hour + now.minute / 60.0 + now.second / 3600.0
        today = now.date()
        best = None
        for shift in (-1, 0, 1):
            day = today + timedelta(days=shift)
            times = self._unwrapped(day, location, tz)
            for name in _DAILY:
                value = times[name]
                if isinstance(value, NoSolution):
                    continue
                t = value.value + 24.0 * shift
                if t > current and (best is None or t < best[0]):
                    best = (t, name, day)
        # tomorrow's dhuhr is always defined and later than now
        t, name, day = best
        return NextPrayer(name, fix_hour(t), int(round((t - current) * 60.0)), day)
