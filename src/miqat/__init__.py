"""miqat public API.

Keep this surface small: users should mostly interact with functions re-exported here.
"""
import logging

from .api import (
    list_methods,
    method_info,
    list_cities,
    hijri_engine,
    to_hijri,
    to_gregorian,
    hijri_info,
    format_hijri,
    prayer_engine,
    prayer_schedule,
    prayer_times,
    qibla,
    next_prayer,
    city_times,
)
from .core.types import HijriDate, Location, Hours, NoSolution, PrayerSchedule
from .engines.hijri import HijriCalendarEngine, HijriConfig
from .engines.prayer import PrayerConfig, PrayerTimeEngine

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "list_methods",
    "method_info",
    "list_cities",
    "hijri_engine",
    "to_hijri",
    "to_gregorian",
    "hijri_info",
    "format_hijri",
    "prayer_engine",
    "prayer_schedule",
    "prayer_times",
    "qibla",
    "next_prayer",
    "city_times",
    "HijriDate",
    "Location",
    "Hours",
    "NoSolution",
    "PrayerSchedule",
    "HijriCalendarEngine",
    "HijriConfig",
    "PrayerConfig",
    "PrayerTimeEngine",
]
