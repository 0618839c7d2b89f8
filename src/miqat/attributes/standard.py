from __future__ import annotations
from typing import Any, Dict

from ..presentation import names
from .registry import register_attribute

def weekday(info, engine, locale) -> Dict[str, Any]:
    # Convention: 0=Sun..6=Sat
    return {"day_of_week": info.weekday}

def day_name(info, engine, locale) -> Dict[str, Any]:
    return {"day_name": names.day_name(info.weekday, locale)}

def month_name(info, engine, locale) -> Dict[str, Any]:
    return {"month_name": names.month_name(info.hijri.month, locale)}

def leap_year(info, engine, locale) -> Dict[str, Any]:
    return {"is_leap_year": engine.is_leap_year(info.hijri.year)}

def days_in_month(info, engine, locale) -> Dict[str, Any]:
    return {"days_in_month": engine.days_in_month(info.hijri.year, info.hijri.month)}

def days_in_year(info, engine, locale) -> Dict[str, Any]:
    return {"days_in_year": engine.days_in_year(info.hijri.year)}

def event(info, engine, locale) -> Dict[str, Any]:
    return {"event": engine.event(info.hijri.month, info.hijri.day, locale)}

def formatted(info, engine, locale) -> Dict[str, Any]:
    return {"formatted": engine.format(info.civil_date, None, locale)}

register_attribute("weekday", weekday)
register_attribute("day_name", day_name)
register_attribute("month_name", month_name)
register_attribute("leap_year", leap_year)
register_attribute("days_in_month", days_in_month)
register_attribute("days_in_year", days_in_year)
register_attribute("event", event)
register_attribute("formatted", formatted)

FULL = ("month_name", "day_name", "weekday", "leap_year", "days_in_month", "days_in_year", "event", "formatted")
