from __future__ import annotations

from typing import Dict, Tuple, Union

from ..core.errors import InvalidDateError
from ..core.types import Locale, resolve_locale

MONTHS: Dict[Locale, Tuple[str, ...]] = {
    Locale.AR: (
        "محرم", "صفر", "ربيع الأول", "ربيع الثاني", "جمادى الأولى", "جمادى الآخرة",
        "رجب", "شعبان", "رمضان", "شوال", "ذو القعدة", "ذو الحجة",
    ),
    Locale.EN: (
        "Muharram", "Safar", "Rabi' al-Awwal", "Rabi' al-Thani", "Jumada al-Ula", "Jumada al-Akhirah",
        "Rajab", "Sha'ban", "Ramadan", "Shawwal", "Dhu al-Qi'dah", "Dhu al-Hijjah",
    ),
}

# index 0 = Sunday
DAYS: Dict[Locale, Tuple[str, ...]] = {
    Locale.AR: ("الأحد", "الإثنين", "الثلاثاء", "الأربعاء", "الخميس", "الجمعة", "السبت"),
    Locale.EN: ("Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday"),
}

PRAYER_NAMES: Dict[Locale, Dict[str, str]] = {
    Locale.AR: {
        "fajr": "الفجر",
        "sunrise": "الشروق",
        "dhuhr": "الظهر",
        "asr": "العصر",
        "maghrib": "المغرب",
        "isha": "العشاء",
        "midnight": "منتصف الليل",
    },
    Locale.EN: {
        "fajr": "Fajr",
        "sunrise": "Sunrise",
        "dhuhr": "Dhuhr",
        "asr": "Asr",
        "maghrib": "Maghrib",
        "isha": "Isha",
        "midnight": "Midnight",
    },
}


def month_name(month: int, locale: Union[str, Locale] = Locale.AR, *, short: bool = False) -> str:
    if not 1 <= month <= 12:
        raise InvalidDateError(f"Invalid Hijri month {month}; must be 1-12")
    name = MONTHS[resolve_locale(locale)][month - 1]
    return name[:3] if short else name


def day_name(weekday: int, locale: Union[str, Locale] = Locale.AR, *, short: bool = False) -> str:
    """weekday: 0=Sunday .. 6=Saturday."""
    name = DAYS[resolve_locale(locale)][weekday % 7]
    return name[:3] if short else name


def prayer_name(key: str, locale: Union[str, Locale] = Locale.AR) -> str:
    names = PRAYER_NAMES[resolve_locale(locale)]
    if key not in names:
        raise KeyError(f"Unknown prayer '{key}'. Available: {sorted(names)}")
    return names[key]
