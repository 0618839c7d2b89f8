from __future__ import annotations

from types import MappingProxyType
from typing import Mapping, Tuple

# Umm al-Qura month lengths that differ from the tabular rule.
UMM_AL_QURA_OVERRIDES: Mapping[int, Tuple[int, ...]] = MappingProxyType({
    1445: (30, 29, 30, 29, 30, 29, 30, 29, 30, 29, 30, 29),
    1446: (30, 29, 30, 30, 29, 30, 29, 30, 29, 30, 29, 30),
    1447: (29, 30, 29, 30, 30, 29, 30, 29, 30, 29, 30, 29),
})

# "month-day" -> {locale: name}
ISLAMIC_EVENTS: Mapping[str, Mapping[str, str]] = MappingProxyType({
    "1-1": {"ar": "رأس السنة الهجرية", "en": "Islamic New Year"},
    "1-10": {"ar": "يوم عاشوراء", "en": "Day of Ashura"},
    "3-12": {"ar": "المولد النبوي الشريف", "en": "Mawlid al-Nabi"},
    "7-27": {"ar": "الإسراء والمعراج", "en": "Isra and Mi'raj"},
    "8-15": {"ar": "ليلة النصف من شعبان", "en": "Mid-Sha'ban"},
    "9-1": {"ar": "بداية شهر رمضان", "en": "Start of Ramadan"},
    "9-27": {"ar": "ليلة القدر", "en": "Laylat al-Qadr"},
    "10-1": {"ar": "عيد الفطر", "en": "Eid al-Fitr"},
    "12-8": {"ar": "يوم التروية", "en": "Day of Tarwiyah"},
    "12-9": {"ar": "يوم عرفة", "en": "Day of Arafah"},
    "12-10": {"ar": "عيد الأضحى", "en": "Eid al-Adha"},
})

RAMADAN = (9, 1)
EID_AL_FITR = (10, 1)
EID_AL_ADHA = (12, 10)


def event_key(month: int, day: int) -> str:
    return f"{month}-{day}"
