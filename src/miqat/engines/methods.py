from __future__ import annotations

from dataclasses import dataclass, replace
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Union

from ..core.types import MidnightMode, coerce_enum


@dataclass(frozen=True)
class CalculationMethodPreset:
    """
    Twilight convention of a calculation authority.

    Isha is either a sun depression angle or a fixed delay after Maghrib,
    never both.
    """
    key: str
    name: str
    fajr_angle: float
    isha_angle: Optional[float] = None
    isha_minutes: Optional[float] = None
    maghrib_minutes: float = 0.0
    midnight: MidnightMode = MidnightMode.STANDARD

    def __post_init__(self) -> None:
        if (self.isha_angle is None) == (self.isha_minutes is None):
            raise ValueError(f"Method '{self.key}': set exactly one of isha_angle / isha_minutes")
        if not 0.0 < self.fajr_angle < 90.0:
            raise ValueError(f"Method '{self.key}': fajr_angle must be in (0, 90)")
        if self.isha_angle is not None and not 0.0 < self.isha_angle < 90.0:
            raise ValueError(f"Method '{self.key}': isha_angle must be in (0, 90)")
        object.__setattr__(self, "midnight", coerce_enum(MidnightMode, self.midnight, "midnight mode"))

    @property
    def isha_by_interval(self) -> bool:
        return self.isha_minutes is not None

    def info(self) -> Dict[str, Any]:
        return {
            "key": self.key,
            "name": self.name,
            "fajr_angle": self.fajr_angle,
            "isha_angle": self.isha_angle,
            "isha_minutes": self.isha_minutes,
            "maghrib_minutes": self.maghrib_minutes,
            "midnight": self.midnight.value,
        }

    def tweak(self, **kwargs) -> "CalculationMethodPreset":
        return replace(self, **kwargs)


def _preset(key: str, name: str, fajr: float, *, isha: Optional[float] = None,
            isha_minutes: Optional[float] = None, maghrib: float = 0.0,
            midnight: MidnightMode = MidnightMode.STANDARD) -> CalculationMethodPreset:
    return CalculationMethodPreset(key, name, fajr, isha, isha_minutes, maghrib, midnight)


_PRESETS = (
    _preset("mwl", "Muslim World League", 18.0, isha=17.0),
    _preset("isna", "Islamic Society of North America", 15.0, isha=15.0),
    _preset("egypt", "Egyptian General Authority of Survey", 19.5, isha=17.5),
    _preset("makkah", "Umm al-Qura University, Makkah", 18.5, isha_minutes=90.0),
    _preset("karachi", "University of Islamic Sciences, Karachi", 18.0, isha=18.0),
    _preset("tehran", "Institute of Geophysics, University of Tehran", 17.7, isha=14.0,
            maghrib=4.5, midnight=MidnightMode.JAFARI),
    _preset("jafari", "Shia Ithna-Ashari, Leva Institute, Qum", 16.0, isha=14.0,
            maghrib=4.0, midnight=MidnightMode.JAFARI),
    _preset("gulf", "Gulf Region", 19.5, isha_minutes=90.0),
    _preset("kuwait", "Kuwait", 18.0, isha=17.5),
    _preset("qatar", "Qatar", 18.0, isha_minutes=90.0),
    _preset("singapore", "Majlis Ugama Islam Singapura", 20.0, isha=18.0),
    _preset("turkey", "Diyanet Isleri Baskanligi, Turkey", 18.0, isha=17.0),
)

METHODS: Mapping[str, CalculationMethodPreset] = MappingProxyType({p.key: p for p in _PRESETS})

DEFAULT_METHOD = "mwl"


def custom_method(
    fajr_angle: float = 18.0,
    isha_angle: Optional[float] = 17.0,
    *,
    isha_minutes: Optional[float] = None,
    maghrib_minutes: float = 0.0,
    midnight: Union[str, MidnightMode] = MidnightMode.STANDARD,
    name: str = "Custom",
) -> CalculationMethodPreset:
    """Caller-supplied angles; an isha_minutes value replaces the Isha angle."""
    if isha_minutes is not None:
        isha_angle = None
    return CalculationMethodPreset(
        key="custom",
        name=name,
        fajr_angle=float(fajr_angle),
        isha_angle=None if isha_angle is None else float(isha_angle),
        isha_minutes=None if isha_minutes is None else float(isha_minutes),
        maghrib_minutes=float(maghrib_minutes),
        midnight=coerce_enum(MidnightMode, midnight, "midnight mode"),
    )
