from __future__ import annotations

import argparse
from datetime import date, datetime
import logging
import sys
import re
import importlib
import inspect

from miqat.core.errors import MiqatError


_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def _parse_ymd(s: str) -> date:
    y, m, d = map(int, s.split("-"))
    return date(y, m, d)


def _run_module_main(modpath: str, argv: list[str]) -> int:
    """
    Import module and run its main().

    Supports:
      - main(argv: list[str] | None = None) -> int|None
      - main() -> int|None
    """
    mod = importlib.import_module(modpath)
    if not hasattr(mod, "main"):
        raise SystemExit(f"Module {modpath} has no main()")
    fn = getattr(mod, "main")

    sig = inspect.signature(fn)
    if len(sig.parameters) == 0:
        rv = fn()
    else:
        rv = fn(argv)
    return int(rv or 0)


def _add_location_args(p: argparse.ArgumentParser) -> None:
    p.add_argument("--lat", type=float, help="Latitude in degrees (north positive)")
    p.add_argument("--lon", type=float, help="Longitude in degrees (east positive)")
    p.add_argument("--elevation", type=float, default=0.0, help="Elevation in meters")
    p.add_argument("--city", help="Built-in city (makkah, madinah, cairo, dubai, riyadh, istanbul)")


def _location(args):
    from miqat.core.types import Location
    from miqat.engines.prayer import CITIES

    if args.city:
        key = args.city.lower()
        if key not in CITIES:
            raise SystemExit(f"Unknown city '{args.city}'. Available: {sorted(CITIES)}")
        return CITIES[key]
    if args.lat is None or args.lon is None:
        raise SystemExit("Give --lat and --lon, or --city")
    return Location(args.lat, args.lon, args.elevation), None


def _add_config_args(p: argparse.ArgumentParser) -> None:
    p.add_argument("--method", default=None, help="Calculation method key (default: mwl, or the city's method)")
    p.add_argument("--asr", default="standard", choices=["standard", "hanafi"])
    p.add_argument("--high-lat", default="midnight", choices=["none", "midnight", "oneseventh", "angle"])
    p.add_argument("--tz", type=float, default=None, help="UTC offset in hours for the output clock")
    p.add_argument("--offset", action="append", default=[], metavar="PRAYER=MIN",
                   help="Manual adjustment in minutes (repeatable)")


def _engine(args, city_method, time_format: str = "24h"):
    import miqat

    offsets = {}
    for item in args.offset:
        name, _, minutes = item.partition("=")
        offsets[name.strip()] = float(minutes)
    return miqat.prayer_engine(
        method=args.method or city_method or "mwl",
        asr=args.asr,
        high_latitude=args.high_lat,
        time_format=time_format,
        utc_offset=args.tz,
        offsets=offsets,
    )


def cmd_hijri(argv: list[str]) -> int:
    import miqat

    p = argparse.ArgumentParser(prog="miqat hijri", description="Gregorian -> Hijri date")
    p.add_argument("date", nargs="?", help="YYYY-MM-DD (default: today)")
    p.add_argument("--adjust", type=int, default=0, help="Adjustment in days, clamped to [-2, 2]")
    p.add_argument("--locale", default="ar", choices=["ar", "en"])
    p.add_argument("--format", default="j F Y", help="Format tokens: d j D l m n F M Y y")
    p.add_argument("--western-digits", action="store_true")
    args = p.parse_args(argv)

    d = _parse_ymd(args.date) if args.date else date.today()
    info = miqat.hijri_info(d, locale=args.locale, adjustment=args.adjust)
    text = miqat.format_hijri(
        d, args.format, locale=args.locale, adjustment=args.adjust, arabic_numerals=not args.western_digits
    )
    print(text)
    print(f"  {info.hijri.isoformat()}  ({d.isoformat()})")
    for k, v in (info.attributes or {}).items():
        if k != "formatted":
            print(f"  {k:14s}: {v}")
    return 0


def cmd_gregorian(argv: list[str]) -> int:
    import miqat

    p = argparse.ArgumentParser(prog="miqat gregorian", description="Hijri -> Gregorian date")
    p.add_argument("date", help="Hijri date YYYY-MM-DD")
    p.add_argument("--adjust", type=int, default=0)
    args = p.parse_args(argv)

    y, m, d = map(int, args.date.split("-"))
    print(miqat.to_gregorian(y, m, d, adjustment=args.adjust).isoformat())
    return 0


def cmd_times(argv: list[str]) -> int:
    from miqat.presentation.names import prayer_name

    p = argparse.ArgumentParser(prog="miqat times", description="Prayer times for a date and place")
    p.add_argument("date", nargs="?", help="YYYY-MM-DD (default: today)")
    _add_location_args(p)
    _add_config_args(p)
    p.add_argument("--time-format", default="24h", choices=["24h", "12h", "float"])
    p.add_argument("--locale", default="en", choices=["ar", "en"])
    args = p.parse_args(argv)

    d = _parse_ymd(args.date) if args.date else date.today()
    loc, city_method = _location(args)
    eng = _engine(args, city_method, args.time_format)
    times = eng.get_times(d, loc)

    print(f"{d.isoformat()}  lat={loc.latitude:g} lon={loc.longitude:g}  method={eng.config.method.key}")
    for name, value in times.items():
        print(f"  {prayer_name(name, args.locale):12s} {value}")
    return 0


def cmd_qibla(argv: list[str]) -> int:
    import miqat

    p = argparse.ArgumentParser(prog="miqat qibla", description="Bearing toward the Kaaba")
    _add_location_args(p)
    args = p.parse_args(argv)

    loc, _ = _location(args)
    print(f"{miqat.qibla(loc):.2f}")
    return 0


def cmd_next(argv: list[str]) -> int:
    from miqat.presentation.time_format import format_hours, split_minutes

    p = argparse.ArgumentParser(prog="miqat next", description="Next prayer after a given moment")
    _add_location_args(p)
    _add_config_args(p)
    p.add_argument("--now", help="ISO datetime (default: current local time)")
    args = p.parse_args(argv)

    now = datetime.fromisoformat(args.now) if args.now else datetime.now().astimezone()
    loc, city_method = _location(args)
    nxt = _engine(args, city_method).next_prayer(loc, now)
    rem = split_minutes(nxt.remaining_minutes)
    print(f"{nxt.name} at {format_hours(nxt.time)} on {nxt.day.isoformat()} (in {rem['hours']}h {rem['minutes']:02d}m)")
    return 0


def cmd_methods(argv: list[str]) -> int:
    import miqat

    argparse.ArgumentParser(prog="miqat methods", description="List calculation methods").parse_args(argv)
    for key in miqat.list_methods():
        info = miqat.method_info(key)
        isha = f"{info['isha_angle']}deg" if info["isha_angle"] is not None else f"+{info['isha_minutes']:g}min"
        print(f"{key:10s} fajr={info['fajr_angle']:<5g} isha={isha:<8s} {info['name']}")
    return 0


def cmd_events(argv: list[str]) -> int:
    from miqat.engines.hijri import HijriCalendarEngine

    p = argparse.ArgumentParser(prog="miqat events", description="Islamic events table")
    p.add_argument("--locale", default="en", choices=["ar", "en"])
    p.add_argument("--year", type=int, help="Also print Gregorian dates for this Hijri year")
    args = p.parse_args(argv)

    eng = HijriCalendarEngine()
    for key, name in eng.all_events(args.locale).items():
        m, d = map(int, key.split("-"))
        when = f"  {eng.to_gregorian(args.year, m, d).isoformat()}" if args.year else ""
        print(f"{key:6s} {name}{when}")
    return 0


def main(argv: list[str] | None = None) -> int:
    if argv is None:
        argv = sys.argv[1:]

    # shorthand: `miqat YYYY-MM-DD ...`
    if argv and _DATE_RE.match(argv[0]):
        return cmd_hijri(argv)

    p = argparse.ArgumentParser(prog="miqat", description="Hijri calendar and prayer times toolkit CLI.")
    p.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    sub = p.add_subparsers(dest="cmd", required=True)

    sub.add_parser("hijri", help="Gregorian -> Hijri date")
    sub.add_parser("gregorian", help="Hijri -> Gregorian date")
    sub.add_parser("times", help="Prayer times for a date and place")
    sub.add_parser("qibla", help="Qibla bearing")
    sub.add_parser("next", help="Next prayer")
    sub.add_parser("methods", help="List calculation methods")
    sub.add_parser("events", help="Islamic events table")

    p_diag = sub.add_parser("diag", help="Diagnostics tools (no ephemeris required)")
    p_diag.add_argument(
        "tool",
        choices=["round-trip", "ramadan-table", "year-plot", "crossing-check"],
        help="Which diagnostic to run",
    )

    p_ephem = sub.add_parser("ephem", help="Ephemeris-based diagnostics")
    p_ephem.add_argument("tool", choices=["validate-sun"], help="Which ephemeris diagnostic to run")

    args, rest = p.parse_known_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    commands = {
        "hijri": cmd_hijri,
        "gregorian": cmd_gregorian,
        "times": cmd_times,
        "qibla": cmd_qibla,
        "next": cmd_next,
        "methods": cmd_methods,
        "events": cmd_events,
    }

    try:
        if args.cmd in commands:
            return commands[args.cmd](rest)

        if args.cmd == "diag":
            tool_map = {
                "round-trip": "miqat.diagnostics.round_trip",
                "ramadan-table": "miqat.diagnostics.ramadan_table",
                "year-plot": "miqat.diagnostics.year_plot",
                "crossing-check": "miqat.diagnostics.crossing_check",
            }
            return _run_module_main(tool_map[args.tool], rest)

        if args.cmd == "ephem":
            tool_map = {
                "validate-sun": "miqat.diagnostics.ephem.validate_sun",
            }
            return _run_module_main(tool_map[args.tool], rest)
    except MiqatError as e:
        raise SystemExit(f"error: {e}") from e

    raise RuntimeError("unreachable")


if __name__ == "__main__":
    raise SystemExit(main())
