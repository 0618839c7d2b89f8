# tests/test_prayer.py

from dataclasses import FrozenInstanceError
from datetime import date, datetime, timedelta, timezone

import pytest

from miqat.core.errors import InvalidLocationError, InvalidMethodKeyError, NoSolutionError
from miqat.core.types import Hours, Location, NoSolution
from miqat.engines.methods import METHODS, CalculationMethodPreset, custom_method
from miqat.engines.prayer import PrayerConfig, PrayerTimeEngine
from miqat.reference.angles import time_diff

# --- Golden case ---
# Cairo, Egyptian General Authority of Survey, Asr standard, UTC+2.
# Published table for 2024-03-20:
#   Fajr 04:32  Sunrise 05:59  Dhuhr 12:02  Asr 15:30  Maghrib 18:07  Isha 19:24

CAIRO = Location(30.0444, 31.2357)
DAY = date(2024, 3, 20)
REFERENCE = {
    "fajr": (4, 32),
    "sunrise": (5, 59),
    "dhuhr": (12, 2),
    "asr": (15, 30),
    "maghrib": (18, 7),
    "isha": (19, 24),
}


@pytest.fixture
def egypt():
    return PrayerTimeEngine(PrayerConfig.from_keys("egypt", utc_offset=2))


def _ordered(values):
    """Consecutive forward gaps are positive and the whole span stays within one day."""
    gaps = [time_diff(a, b) for a, b in zip(values, values[1:])]
    return all(g > 0 for g in gaps) and sum(gaps) < 24.0


def test_cairo_golden_within_one_minute(egypt):
    sched = egypt.compute(DAY, CAIRO)
    for name, (h, m) in REFERENCE.items():
        value = getattr(sched, name)
        assert isinstance(value, Hours)
        assert value.value == pytest.approx(h + m / 60.0, abs=1.0 / 60.0), name


def test_cairo_formatted(egypt):
    times = egypt.get_times(DAY, CAIRO)
    assert set(times) == {"fajr", "sunrise", "dhuhr", "asr", "maghrib", "isha", "midnight"}
    assert times["fajr"] == "04:32"
    assert times["asr"] == "15:30"
    assert times["isha"] == "19:24"


def test_cairo_12h_and_float(egypt):
    t12 = egypt.with_config(time_format="12h").get_times(DAY, CAIRO)
    assert t12["isha"] == "7:24 PM"
    assert t12["fajr"].endswith("AM")
    tf = egypt.with_config(time_format="float").get_times(DAY, CAIRO)
    assert float(tf["dhuhr"]) == pytest.approx(12.04, abs=1.0 / 60.0)


@pytest.mark.parametrize("loc,tz", [
    (CAIRO, 2.0),
    (Location(40.7128, -74.0060), -5.0),   # New York
    (Location(-6.2088, 106.8456), 7.0),    # Jakarta
    (Location(-33.8688, 151.2093), 10.0),  # Sydney
])
@pytest.mark.parametrize("day", [date(2024, 3, 20), date(2024, 6, 21), date(2024, 12, 21)])
def test_daily_ordering(loc, tz, day):
    for method in ("mwl", "isna", "makkah", "tehran"):
        sched = PrayerTimeEngine(method=method, utc_offset=tz).compute(day, loc)
        values = [getattr(sched, n) for n in ("fajr", "sunrise", "dhuhr", "asr", "maghrib", "isha")]
        assert all(isinstance(v, Hours) for v in values)
        assert _ordered([v.value for v in values]), (method, day)
        for v in values:
            assert 0.0 <= v.value < 24.0


def test_makkah_isha_is_interval_after_maghrib():
    sched = PrayerTimeEngine(method="makkah", utc_offset=3).compute(DAY, Location(21.4225, 39.8262))
    assert time_diff(sched.maghrib.value, sched.isha.value) * 60.0 == pytest.approx(90.0)


def test_maghrib_minutes_offset():
    base = PrayerTimeEngine(method="mwl").compute(DAY, CAIRO)
    tehran = PrayerTimeEngine(method="tehran").compute(DAY, CAIRO)
    # same horizon, so only the maghrib delay differs
    assert tehran.sunrise.value == pytest.approx(base.sunrise.value)
    assert time_diff(base.maghrib.value, tehran.maghrib.value) * 60.0 == pytest.approx(4.5)


def test_hanafi_asr_is_later(egypt):
    std = egypt.compute(DAY, CAIRO).asr.value
    han = egypt.with_config(asr="hanafi").compute(DAY, CAIRO).asr.value
    assert 0.5 < han - std < 1.5


def test_elevation_widens_day(egypt):
    flat = egypt.compute(DAY, CAIRO)
    high = egypt.compute(DAY, Location(CAIRO.latitude, CAIRO.longitude, 1000.0))
    assert high.sunrise.value < flat.sunrise.value
    assert high.maghrib.value > flat.maghrib.value
    assert high.dhuhr == flat.dhuhr


def test_manual_offsets(egypt):
    base = egypt.compute(DAY, CAIRO)
    shifted = egypt.with_config(offsets={"dhuhr": 5, "isha": -3}).compute(DAY, CAIRO)
    assert (shifted.dhuhr.value - base.dhuhr.value) * 60.0 == pytest.approx(5.0)
    assert (shifted.isha.value - base.isha.value) * 60.0 == pytest.approx(-3.0)
    assert shifted.fajr == base.fajr


def test_utc_offset_from_aware_datetime():
    eng = PrayerTimeEngine(method="egypt")
    aware = datetime(2024, 3, 20, 9, 0, tzinfo=timezone(timedelta(hours=2)))
    assert eng.compute(aware, CAIRO) == PrayerTimeEngine(method="egypt", utc_offset=2).compute(DAY, CAIRO)
    # naive date: UTC
    assert eng.compute(DAY, CAIRO).dhuhr.value == pytest.approx(10.04, abs=1.0 / 60.0)


@pytest.mark.parametrize("mode,ratio", [("mwl", 0.5), ("jafari", 2.0 / 3.0)])
def test_midnight(mode, ratio):
    eng = PrayerTimeEngine(method=mode, utc_offset=2)
    today = eng.compute(DAY, CAIRO)
    nxt = eng.compute(DAY + timedelta(days=1), CAIRO)
    sunset = today.maghrib.value
    if mode == "jafari":
        sunset -= 4.0 / 60.0  # jafari maghrib is 4 minutes after sunset
    span = time_diff(sunset, nxt.fajr.value)
    assert time_diff(sunset, today.midnight.value) == pytest.approx(span * ratio, abs=1e-9)


# --- High latitude ---
# 70 N in mid August: the sun sets, but never gets 17-18 degrees below the horizon.

NORTH = Location(70.0, 20.0)
AUGUST = date(2024, 8, 15)


def test_high_latitude_none_marks_unavailable():
    eng = PrayerTimeEngine(method="mwl", high_latitude="none", utc_offset=1)
    sched = eng.compute(AUGUST, NORTH)
    assert isinstance(sched.fajr, NoSolution)
    assert isinstance(sched.isha, NoSolution)
    assert isinstance(sched.midnight, NoSolution)
    for name in ("sunrise", "dhuhr", "asr", "maghrib"):
        assert isinstance(getattr(sched, name), Hours)

    times = eng.get_times(AUGUST, NORTH)
    assert times["fajr"] == "-----"
    assert times["isha"] == "-----"
    assert times["dhuhr"] != "-----"


def test_high_latitude_midnight_rule():
    sched = PrayerTimeEngine(method="mwl", high_latitude="midnight", utc_offset=1).compute(AUGUST, NORTH)
    assert isinstance(sched.fajr, Hours)
    assert isinstance(sched.isha, Hours)
    night = time_diff(sched.maghrib.value, sched.sunrise.value)
    for value in (sched.fajr.value, sched.isha.value):
        assert 0.0 < time_diff(sched.maghrib.value, value) < night
    # both land on the middle of the night
    assert time_diff(sched.maghrib.value, sched.isha.value) == pytest.approx(night / 2.0)
    assert isinstance(sched.midnight, Hours)


def test_high_latitude_one_seventh_and_angle():
    sev = PrayerTimeEngine(method="mwl", high_latitude="oneseventh").compute(AUGUST, NORTH)
    night = time_diff(sev.maghrib.value, sev.sunrise.value)
    assert time_diff(sev.fajr.value, sev.sunrise.value) == pytest.approx(night / 7.0)
    assert time_diff(sev.maghrib.value, sev.isha.value) == pytest.approx(night / 7.0)

    ang = PrayerTimeEngine(method="mwl", high_latitude="angle").compute(AUGUST, NORTH)
    assert time_diff(ang.fajr.value, ang.sunrise.value) == pytest.approx(night * 18.0 / 60.0)
    assert time_diff(ang.maghrib.value, ang.isha.value) == pytest.approx(night * 17.0 / 60.0)


def test_polar_day():
    sched = PrayerTimeEngine(method="mwl").compute(date(2024, 6, 21), Location(80.0, 0.0))
    assert isinstance(sched.sunrise, NoSolution)
    assert isinstance(sched.maghrib, NoSolution)
    assert isinstance(sched.dhuhr, Hours)


def test_single_field_query():
    eng = PrayerTimeEngine(method="mwl", high_latitude="none")
    fajr = eng.time_of("fajr", AUGUST, NORTH)
    assert isinstance(fajr, NoSolution)
    with pytest.raises(NoSolutionError):
        fajr.unwrap()
    assert eng.time_of("dhuhr", AUGUST, NORTH).unwrap() == pytest.approx(12.0 - 20.0 / 15.0, abs=0.3)
    with pytest.raises(KeyError):
        eng.time_of("tahajjud", AUGUST, NORTH)


# --- Qibla and next prayer ---

def test_qibla(egypt):
    assert egypt.qibla(CAIRO) == pytest.approx(136.1, abs=1.0)


def test_next_prayer_same_day(egypt):
    nxt = egypt.next_prayer(CAIRO, datetime(2024, 3, 20, 13, 0))
    assert nxt.name == "asr"
    assert nxt.day == DAY
    assert 145 <= nxt.remaining_minutes <= 155


def test_next_prayer_early_morning(egypt):
    nxt = egypt.next_prayer(CAIRO, datetime(2024, 3, 20, 4, 0))
    assert nxt.name == "fajr"
    assert 30 <= nxt.remaining_minutes <= 34


def test_next_prayer_rolls_over_midnight(egypt):
    nxt = egypt.next_prayer(CAIRO, datetime(2024, 3, 20, 23, 0))
    assert nxt.name == "fajr"
    assert nxt.day == date(2024, 3, 21)
    # 23:00 -> about 04:31 next day
    assert 325 <= nxt.remaining_minutes <= 337


# Late June at 47.5N: MWL isha (18 deg) falls just after midnight local time.
SUMMER_NIGHT = Location(47.5, 5.0)
CEST = timezone(timedelta(hours=2))


@pytest.fixture
def summer_mwl():
    return PrayerTimeEngine(method="mwl", high_latitude="none", utc_offset=2)


def test_isha_after_midnight_is_next_before_midnight(summer_mwl):
    isha = summer_mwl.compute(date(2024, 6, 21), SUMMER_NIGHT).isha
    assert isinstance(isha, Hours) and isha.value < 1.0

    nxt = summer_mwl.next_prayer(SUMMER_NIGHT, datetime(2024, 6, 21, 23, 59, tzinfo=CEST))
    assert nxt.name == "isha"
    assert nxt.day == date(2024, 6, 21)
    assert nxt.time == pytest.approx(isha.value)
    assert 15 <= nxt.remaining_minutes <= 40


def test_isha_after_midnight_is_next_just_after_midnight(summer_mwl):
    nxt = summer_mwl.next_prayer(SUMMER_NIGHT, datetime(2024, 6, 22, 0, 5, tzinfo=CEST))
    assert nxt.name == "isha"
    # the isha of the evening before
    assert nxt.day == date(2024, 6, 21)
    assert 10 <= nxt.remaining_minutes <= 35


# --- Configuration ---

def test_config_rejects_unknown_keys():
    with pytest.raises(InvalidMethodKeyError):
        PrayerConfig.from_keys("nope")
    with pytest.raises(InvalidMethodKeyError):
        PrayerConfig.from_keys("mwl", asr="maliki")
    with pytest.raises(InvalidMethodKeyError):
        PrayerConfig.from_keys("mwl", high_latitude="polar")
    with pytest.raises(InvalidMethodKeyError):
        PrayerConfig.from_keys("mwl", time_format="13h")
    with pytest.raises(InvalidMethodKeyError):
        PrayerConfig.from_keys("mwl", offsets={"tea": 3})


def test_config_is_immutable_and_hashable():
    cfg = PrayerConfig.from_keys("isna", offsets={"fajr": 2})
    with pytest.raises(FrozenInstanceError):
        cfg.asr = "hanafi"
    assert hash(cfg) == hash(PrayerConfig.from_keys("isna", offsets={"fajr": 2.0}))
    eng = PrayerTimeEngine(cfg)
    eng2 = eng.with_config(asr="hanafi")
    assert eng.config.asr.value == "standard"
    assert eng2.config.asr.value == "hanafi"


def test_location_validation():
    with pytest.raises(InvalidLocationError):
        Location(91.0, 0.0)
    with pytest.raises(InvalidLocationError):
        Location(0.0, -181.0)
    with pytest.raises(InvalidLocationError):
        Location(0.0, 0.0, -5.0)
    with pytest.raises(InvalidLocationError):
        Location(float("nan"), 0.0)


def test_presets():
    assert len(METHODS) == 12
    assert METHODS["egypt"].fajr_angle == 19.5
    assert METHODS["makkah"].isha_minutes == 90.0
    assert METHODS["makkah"].isha_angle is None
    assert METHODS["tehran"].midnight.value == "jafari"
    with pytest.raises(ValueError):
        CalculationMethodPreset("bad", "Bad", 18.0, isha_angle=17.0, isha_minutes=90.0)
    with pytest.raises(ValueError):
        CalculationMethodPreset("bad", "Bad", 18.0)


def test_custom_method():
    cfg = PrayerConfig.from_keys("custom", fajr_angle=15.0, isha_angle=15.0)
    assert cfg.method.key == "custom"
    isna = PrayerTimeEngine(method="isna").compute(DAY, CAIRO)
    cust = PrayerTimeEngine(cfg).compute(DAY, CAIRO)
    assert cust.fajr == isna.fajr
    assert cust.isha == isna.isha

    by_minutes = custom_method(18.0, isha_minutes=75.0)
    assert by_minutes.isha_angle is None
    sched = PrayerTimeEngine(method=by_minutes).compute(DAY, CAIRO)
    assert time_diff(sched.maghrib.value, sched.isha.value) * 60.0 == pytest.approx(75.0)
