from __future__ import annotations

from datetime import date, timedelta

import pytest

from miqat.core.errors import InvalidDateError, UnsupportedLocaleError
from miqat.core.types import HijriDate
from miqat.engines.hijri import HijriCalendarEngine, HijriConfig
from miqat.engines.hijri_tables import UMM_AL_QURA_OVERRIDES


@pytest.fixture
def eng():
    return HijriCalendarEngine()


@pytest.fixture
def tabular():
    return HijriCalendarEngine(overrides={})


def test_gregorian_to_hijri(eng):
    assert eng.to_hijri(date(2024, 3, 20)) == HijriDate(1445, 9, 10)
    assert eng.to_hijri(date(2024, 3, 11)) == HijriDate(1445, 9, 1)


def test_hijri_to_gregorian(eng):
    assert eng.to_gregorian(1445, 9, 1) == date(2024, 3, 11)
    assert eng.to_gregorian(1445, 10, 1) == date(2024, 4, 10)


def test_adjustment_shifts_both_directions():
    plus = HijriCalendarEngine(adjustment=1)
    assert plus.to_hijri(date(2024, 3, 20)) == HijriDate(1445, 9, 11)
    assert plus.to_gregorian(1445, 9, 11) == date(2024, 3, 20)

    minus = HijriCalendarEngine(adjustment=-2)
    assert minus.to_hijri(date(2024, 3, 20)) == HijriDate(1445, 9, 8)
    assert minus.to_gregorian(1445, 9, 8) == date(2024, 3, 20)


def test_adjustment_is_clamped():
    assert HijriConfig(adjustment=5).adjustment == 2
    assert HijriConfig(adjustment=-9).adjustment == -2
    assert HijriCalendarEngine(adjustment=3).adjustment == 2


@pytest.mark.parametrize("adj", [-2, -1, 0, 1, 2])
def test_round_trip_fixed_adjustment(adj):
    eng = HijriCalendarEngine(adjustment=adj, overrides={})
    for d in [date(1600, 1, 1), date(1900, 2, 28), date(2000, 2, 29), date(2024, 3, 20), date(2399, 12, 31)]:
        h = eng.to_hijri(d)
        assert eng.to_gregorian(h.year, h.month, h.day) == d


def test_leap_years(eng, tabular):
    assert eng.is_leap_year(1445)      # 1445 mod 30 = 5
    assert not eng.is_leap_year(1446)  # 6
    assert eng.is_leap_year(1447)      # 7
    assert tabular.days_in_year(1445) == 355
    assert tabular.days_in_year(1446) == 354
    # overridden years sum their month lengths
    assert eng.days_in_year(1445) == 354
    assert eng.days_in_year(1446) == 355


def test_days_in_month_tabular(tabular):
    assert tabular.days_in_month(1450, 1) == 30
    assert tabular.days_in_month(1450, 2) == 29
    assert tabular.days_in_month(1450, 12) == 30  # leap
    assert tabular.days_in_month(1451, 12) == 29


def test_days_in_month_override_table(eng, tabular):
    assert eng.days_in_month(1445, 12) == 29
    assert tabular.days_in_month(1445, 12) == 30
    assert [eng.days_in_month(1446, m) for m in range(1, 13)] == list(UMM_AL_QURA_OVERRIDES[1446])


def test_leap_flag_matches_last_month_outside_overrides(eng):
    for y in range(1380, 1500):
        if y in UMM_AL_QURA_OVERRIDES:
            continue
        for m in range(1, 13):
            assert eng.days_in_month(y, m) in (29, 30)
        assert eng.is_leap_year(y) == (eng.days_in_month(y, 12) == 30)


def test_override_years_start_where_the_previous_year_ends(eng, tabular):
    assert eng.to_hijri(date(2024, 7, 6)) == HijriDate(1445, 12, 29)
    assert eng.to_hijri(date(2024, 7, 7)) == HijriDate(1446, 1, 1)
    assert tabular.to_hijri(date(2024, 7, 7)) == HijriDate(1445, 12, 30)
    assert eng.to_gregorian(1446, 12, 30) == date(2025, 6, 26)
    assert eng.to_gregorian(1447, 1, 1) == date(2025, 6, 27)
    # 1445-1447 total one day short of the tabular cycle
    assert eng.to_gregorian(1448, 1, 1) == tabular.to_gregorian(1448, 1, 1) - timedelta(days=1)
    assert eng.to_gregorian(1444, 1, 1) == tabular.to_gregorian(1444, 1, 1)


@pytest.mark.parametrize("adj", [-1, 0, 1])
def test_override_years_keep_dates_valid_and_reversible(adj):
    eng = HijriCalendarEngine(adjustment=adj)
    d = date(2023, 7, 1)
    prev = None
    while d <= date(2026, 7, 1):
        h = eng.to_hijri(d)
        assert h.day <= eng.days_in_month(h.year, h.month), d
        assert eng.to_gregorian(h.year, h.month, h.day) == d
        assert eng.format(h, "Y-m-d", "en") == h.isoformat()
        if prev is not None:
            assert eng.add_days(prev, 1) == h
        prev = h
        d += timedelta(days=1)


def test_julian_day_helpers_agree_with_conversion(eng):
    for h in (HijriDate(1445, 12, 29), HijriDate(1446, 12, 30), HijriDate(1447, 6, 15), HijriDate(1460, 3, 3)):
        jd = eng.to_jd(h.year, h.month, h.day)
        assert eng.from_jd(jd) == (h.year, h.month, h.day)
        assert eng.from_jd(jd + 0.75) == (h.year, h.month, h.day)


def test_config_is_hashable():
    assert hash(HijriConfig()) == hash(HijriConfig(overrides=UMM_AL_QURA_OVERRIDES))
    assert HijriConfig(overrides={}) == HijriConfig(overrides=())
    assert HijriConfig(overrides={}) != HijriConfig()
    cache = {HijriConfig(adjustment=1): "plus one"}
    assert cache[HijriConfig(adjustment=1)] == "plus one"
    assert HijriConfig(overrides={1500: [29] * 12}).overrides == ((1500, (29,) * 12),)
    assert [y for y, _ in HijriConfig().overrides] == [1445, 1446, 1447]


def test_custom_override_source():
    eng = HijriCalendarEngine(overrides={1500: (29,) * 6 + (30,) * 6})
    assert eng.days_in_month(1500, 1) == 29
    assert eng.days_in_month(1445, 12) == 30
    with pytest.raises(ValueError):
        HijriConfig(overrides={1500: (29, 30)})


def test_validation(eng):
    with pytest.raises(InvalidDateError):
        eng.to_gregorian(1445, 13, 1)
    with pytest.raises(InvalidDateError):
        eng.to_gregorian(1445, 12, 30)  # override month of 29 days
    with pytest.raises(InvalidDateError):
        eng.to_gregorian(0, 1, 1)
    assert eng.is_valid(1445, 9, 30)
    assert not eng.is_valid(1446, 2, 30)
    assert not eng.is_valid(1445, 0, 1)


def test_before_epoch_rejected(eng):
    with pytest.raises(InvalidDateError):
        eng.to_hijri(date(600, 1, 1))


def test_hijri_date_value_type():
    assert HijriDate(1445, 1, 1) < HijriDate(1445, 2, 1) < HijriDate(1446, 1, 1)
    assert HijriDate(1445, 9, 10).isoformat() == "1445-09-10"
    with pytest.raises(InvalidDateError):
        HijriDate(1445, 13, 1)
    with pytest.raises(InvalidDateError):
        HijriDate(1445, 1, 31)


def test_events(eng):
    assert eng.event(9, 1, "en") == "Start of Ramadan"
    assert eng.event(10, 1, "ar") == "عيد الفطر"
    assert eng.event(2, 2, "en") is None
    events = eng.all_events("en")
    assert len(events) == 11
    assert events["12-10"] == "Eid al-Adha"
    with pytest.raises(UnsupportedLocaleError):
        eng.event(9, 1, "fr")


def test_age(eng):
    today = date(2024, 3, 20)  # 10 Ramadan 1445
    assert eng.age(1420, 5, 10, today=today) == 25
    assert eng.age(1420, 9, 10, today=today) == 25
    assert eng.age(1420, 10, 1, today=today) == 24
    assert eng.age(1446, 1, 1, today=today) == 0


def test_add_days_and_months(eng):
    assert eng.add_days(HijriDate(1445, 9, 10), 21) == HijriDate(1445, 10, 1)
    assert eng.add_days(HijriDate(1445, 9, 10), -10) == HijriDate(1445, 8, 29)
    assert eng.add_months(HijriDate(1444, 1, 30), 1) == HijriDate(1444, 2, 29)
    assert eng.add_months(HijriDate(1444, 12, 1), 1) == HijriDate(1445, 1, 1)
    assert eng.add_months(HijriDate(1445, 1, 15), -1) == HijriDate(1444, 12, 15)
    assert eng.add_months(HijriDate(1440, 6, 5), 24) == HijriDate(1442, 6, 5)


def test_diff_in_days(eng, tabular):
    assert eng.diff_in_days(HijriDate(1445, 9, 1), HijriDate(1445, 10, 1)) == 30
    assert eng.diff_in_days(HijriDate(1445, 10, 1), HijriDate(1445, 9, 1)) == 30
    assert eng.diff_in_days(HijriDate(1445, 1, 1), HijriDate(1446, 1, 1)) == 354
    assert tabular.diff_in_days(HijriDate(1445, 1, 1), HijriDate(1446, 1, 1)) == 355


def test_shortcuts(eng):
    assert eng.ramadan_start(1445) == date(2024, 3, 11)
    assert eng.eid_al_fitr(1445) == date(2024, 4, 10)
    assert eng.eid_al_adha(1445) == date(2024, 6, 17)


def test_names(eng):
    assert eng.month_name(9, "en") == "Ramadan"
    assert eng.month_name(12, "ar") == "ذو الحجة"
    assert eng.day_name(date(2024, 3, 20), "en") == "Wednesday"
    assert eng.day_name(HijriDate(1445, 9, 10), "ar") == "الأربعاء"
