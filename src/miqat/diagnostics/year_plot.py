#!/usr/bin/env python3
from __future__ import annotations

import argparse
from datetime import date, timedelta
from typing import List, Optional, Tuple

import miqat
from miqat.core.types import Location, NoSolution


def _need_numpy():
    try:
        import numpy as np
        return np
    except ImportError as e:
        raise RuntimeError('Need numpy. Install: pip install "miqat[diagnostics]"') from e


def _need_matplotlib():
    try:
        import matplotlib.pyplot as plt
        return plt
    except ImportError as e:
        raise RuntimeError('Need matplotlib. Install: pip install "miqat[diagnostics]"') from e


SERIES = ("fajr", "sunrise", "dhuhr", "asr", "maghrib", "isha")
COLORS = {
    "fajr": "tab:purple",
    "sunrise": "tab:orange",
    "dhuhr": "tab:red",
    "asr": "tab:olive",
    "maghrib": "tab:blue",
    "isha": "0.30",
}


def build_series(np, engine, loc: Location, year: int) -> Tuple["np.ndarray", dict]:
    """Day-of-year axis and one array per prayer (NaN where unavailable)."""
    start = date(year, 1, 1)
    n = (date(year + 1, 1, 1) - start).days
    x = np.arange(1, n + 1, dtype=int)
    out = {name: np.full(n, np.nan) for name in SERIES}
    for i in range(n):
        sched = engine.compute(start + timedelta(days=i), loc)
        for name in SERIES:
            value = getattr(sched, name)
            if not isinstance(value, NoSolution):
                out[name][i] = value.value
    return x, out


def main(argv: Optional[List[str]] = None) -> int:
    p = argparse.ArgumentParser(description="Plot a year of prayer times for one place.")
    p.add_argument("--lat", type=float, default=30.0444)
    p.add_argument("--lon", type=float, default=31.2357)
    p.add_argument("--tz", type=float, default=2.0)
    p.add_argument("--year", type=int, default=2024)
    p.add_argument("--method", default="egypt")
    p.add_argument("--high-lat", default="none", choices=["none", "midnight", "oneseventh", "angle"])
    p.add_argument("--outbase", default="prayer_year", help="Output base name (writes .png)")
    args = p.parse_args(argv)

    np = _need_numpy()
    plt = _need_matplotlib()

    engine = miqat.prayer_engine(method=args.method, high_latitude=args.high_lat, utc_offset=args.tz)
    loc = Location(args.lat, args.lon)
    x, series = build_series(np, engine, loc, args.year)

    fig, ax = plt.subplots(figsize=(9.2, 4.8), constrained_layout=True)
    ax.set_axisbelow(True)
    ax.grid(True, which="major", color="0.88", linewidth=0.7)

    for name in SERIES:
        ax.plot(x, series[name], color=COLORS[name], linewidth=1.4, label=name.capitalize())
        missing = int(np.isnan(series[name]).sum())
        if missing:
            print(f"{name}: unavailable on {missing} days")

    ax.set_xlabel(f"Day of year {args.year}")
    ax.set_ylabel(f"Clock hours (UTC{args.tz:+g})")
    ax.set_ylim(0, 24)
    ax.set_title(f"Prayer times at {args.lat:g}, {args.lon:g} ({engine.config.method.name})")
    ax.legend(loc="center left", bbox_to_anchor=(1.02, 0.5), frameon=False)

    fig.savefig(args.outbase + ".png", dpi=200)
    print(f"Saved: {args.outbase}.png")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
