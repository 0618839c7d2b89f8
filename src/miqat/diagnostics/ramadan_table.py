from __future__ import annotations

from datetime import date
import argparse
from typing import List

from miqat.engines.hijri import HijriCalendarEngine, HijriConfig
from miqat.presentation.names import day_name


def mmdd(d: date) -> str:
    return f"{d.month:02d}-{d.day:02d}"


def parse_adjustments(arg: str) -> List[int]:
    """
    Parse adjustments list from CLI.
    Example:
      --adjustments "-1,0,1"
    """
    return [int(x) for x in arg.split(",") if x.strip()]


def main(argv: list[str] | None = None) -> int:
    p = argparse.ArgumentParser(
        description="Print Ramadan / Eid Gregorian dates across Hijri years."
    )
    p.add_argument("--from-year", type=int, default=1440)
    p.add_argument("--to-year", type=int, default=1460)
    p.add_argument("--adjustments", type=str, default="0", help='Comma list like "-1,0,1".')
    p.add_argument("--locale", choices=("ar", "en"), default="en")
    p.add_argument(
        "--dates",
        choices=("mmdd", "iso"),
        default="iso",
        help="Display format in table columns (default: iso).",
    )
    args = p.parse_args(argv)

    def fmt(d: date) -> str:
        return mmdd(d) if args.dates == "mmdd" else d.isoformat()

    Y0, Y1 = args.from_year, args.to_year
    if Y1 < Y0:
        raise SystemExit("--to-year must be >= --from-year")

    engines = [(adj, HijriCalendarEngine(HijriConfig(adjustment=adj))) for adj in parse_adjustments(args.adjustments)]

    headers = ["Year", "Leap"]
    for adj, _ in engines:
        tag = f"[{adj:+d}]" if len(engines) > 1 else ""
        headers += [f"Ramadan{tag}", f"Fitr{tag}", f"Adha{tag}"]
    colw = [5, 4] + [max(12, len(h)) for h in headers[2:]]
    print("  ".join(h.ljust(w) for h, w in zip(headers, colw)))
    print("  ".join("-" * w for w in colw))

    for Y in range(Y0, Y1 + 1):
        row = [str(Y), "yes" if engines[0][1].is_leap_year(Y) else ""]
        for _, eng in engines:
            for d in (eng.ramadan_start(Y), eng.eid_al_fitr(Y), eng.eid_al_adha(Y)):
                wd = day_name((d.weekday() + 1) % 7, args.locale, short=True)
                row.append(f"{fmt(d)} {wd}")
        print("  ".join(c.ljust(w) for c, w in zip(row, colw)))

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
