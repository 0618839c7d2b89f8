#!/usr/bin/env python3
"""
Cross-check the closed-form hour-angle solution against a root search on
the continuously varying sun.

The closed form samples declination once per event; here the altitude is
re-evaluated at every trial instant and the crossing solved with brentq.
"""
from __future__ import annotations

import argparse
from datetime import date, timedelta
from typing import Callable, Dict, List, Optional, Tuple

from miqat.core.time import date_to_jd
from miqat.core.types import Location, NoSolution
from miqat.engines.prayer import PrayerTimeEngine
from miqat.reference import solar


def _need_numpy():
    try:
        import numpy as np
        return np
    except ImportError as e:
        raise RuntimeError('Need numpy. Install: pip install "miqat[diagnostics]"') from e


def _need_scipy_optimize():
    try:
        from scipy import optimize
        return optimize
    except ImportError as e:
        raise RuntimeError('Need scipy. Install: pip install "miqat[design]"') from e


def altitude_at(day: date, loc: Location, tz: float) -> Callable[[float], Tuple[float, solar.SunPosition]]:
    """Returns t -> (altitude deg, sun position) for clock hour t on day."""
    jd_midnight = date_to_jd(day)

    def f(t: float):
        pos = solar.sun_position(jd_midnight + (t - tz) / 24.0)
        transit = solar.mid_day(pos.equation_of_time_hours, loc.longitude, tz)
        # hour angle measured from the transit nearest t
        h = (t - transit + 12.0) % 24.0 - 12.0
        return solar.sun_altitude(h, loc.latitude, pos.declination_deg), pos

    return f


def targets(engine: PrayerTimeEngine, loc: Location) -> Dict[str, Callable[[solar.SunPosition], float]]:
    m = engine.config.method
    horizon = solar.horizon_angle(loc.elevation)
    factor = engine.config.asr.shadow_factor
    out = {
        "fajr": lambda pos: -m.fajr_angle,
        "sunrise": lambda pos: horizon,
        "asr": lambda pos: solar.asr_angle(factor, loc.latitude, pos.declination_deg),
    }
    if m.maghrib_minutes == 0:
        out["maghrib"] = lambda pos: horizon
    if not m.isha_by_interval:
        out["isha"] = lambda pos: -m.isha_angle
    return out


def refine(optimize, alt, target, guess: float, halfwidth: float = 0.5) -> Optional[float]:
    def g(t: float) -> float:
        a, pos = alt(t)
        return a - target(pos)

    a, b = guess - halfwidth, guess + halfwidth
    if g(a) * g(b) > 0:
        return None
    return float(optimize.brentq(g, a, b, xtol=1e-9))


def main(argv: Optional[List[str]] = None) -> int:
    p = argparse.ArgumentParser(description="Closed-form vs root-found sun crossings.")
    p.add_argument("--lat", type=float, default=30.0444)
    p.add_argument("--lon", type=float, default=31.2357)
    p.add_argument("--tz", type=float, default=2.0)
    p.add_argument("--method", default="egypt")
    p.add_argument("--start", default="2024-01-01")
    p.add_argument("--days", type=int, default=365)
    p.add_argument("--step", type=int, default=7)
    args = p.parse_args(argv)

    np = _need_numpy()
    optimize = _need_scipy_optimize()

    engine = PrayerTimeEngine(method=args.method, high_latitude="none", utc_offset=args.tz)
    loc = Location(args.lat, args.lon)
    y, m, d = map(int, args.start.split("-"))
    start = date(y, m, d)
    tgt = targets(engine, loc)

    errors: Dict[str, List[float]] = {name: [] for name in tgt}
    for k in range(0, args.days, args.step):
        day = start + timedelta(days=k)
        alt = altitude_at(day, loc, args.tz)
        sched = engine.compute(day, loc)
        for name, target in tgt.items():
            closed = getattr(sched, name)
            if isinstance(closed, NoSolution):
                continue
            root = refine(optimize, alt, target, closed.value)
            if root is not None:
                errors[name].append((closed.value - root) * 60.0)

    print(f"{'event':8s} {'n':>4s} {'mean':>8s} {'max|.|':>8s}  (minutes, closed-form minus root)")
    for name, errs in errors.items():
        if not errs:
            print(f"{name:8s} {0:4d}        -        -")
            continue
        e = np.asarray(errs)
        print(f"{name:8s} {len(e):4d} {e.mean():8.3f} {np.abs(e).max():8.3f}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
