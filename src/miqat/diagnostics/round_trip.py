from __future__ import annotations

import argparse
import logging
import random
from datetime import date, timedelta
from typing import List

from miqat.core.errors import InvalidDateError
from miqat.engines.hijri import HijriCalendarEngine, HijriConfig

logger = logging.getLogger(__name__)


def parse_date(s: str) -> date:
    y, m, d = s.split("-")
    return date(int(y), int(m), int(d))


def random_date(start: date, end: date) -> date:
    span = (end - start).days
    return start + timedelta(days=random.randint(0, span))


def parse_adjustments(s: str) -> List[int]:
    # "-1,0,1" -> [-1, 0, 1]
    return [int(x) for x in s.split(",") if x.strip()]


def roundtrip_test(
    engine: HijriCalendarEngine,
    N: int,
    start: date,
    end: date,
    seed: int,
    *,
    max_failures: int,
) -> int:
    random.seed(seed)
    failures = 0

    for _ in range(N):
        d0 = random_date(start, end)
        h = engine.to_hijri(d0)

        try:
            back = engine.to_gregorian(h.year, h.month, h.day)
        except InvalidDateError as e:
            back = None
            logger.debug("%s -> %s rejected: %s", d0, h, e)

        if back != d0:
            failures += 1
            print("\nFAIL (gregorian)")
            print("adjustment:", engine.adjustment)
            print("d0:", d0)
            print("hijri:", h)
            print("back:", back)
            if failures >= max_failures:
                return failures

        jd = engine.to_jd(h.year, h.month, h.day)
        if engine.from_jd(jd) != (h.year, h.month, h.day):
            failures += 1
            print("\nFAIL (julian day)")
            print("hijri:", h, "jd:", jd, "->", engine.from_jd(jd))
            if failures >= max_failures:
                return failures

    return failures


def main(argv: list[str] | None = None) -> int:
    p = argparse.ArgumentParser(description="Random round-trip tests: gregorian -> hijri -> gregorian.")
    p.add_argument("--adjustments", type=str, default="-2,-1,0,1,2", help="Comma-separated adjustment list.")
    p.add_argument("--N", type=int, default=2000, help="Trials per adjustment.")
    p.add_argument("--start", type=str, default="1600-01-01", help="Start date YYYY-MM-DD.")
    p.add_argument("--end", type=str, default="2400-12-31", help="End date YYYY-MM-DD.")
    p.add_argument("--seed", type=int, default=123, help="RNG seed.")
    p.add_argument("--max-failures", type=int, default=5, help="Stop after this many failures per adjustment.")
    p.add_argument("--umm-al-qura", action="store_true",
                   help="Keep the Umm al-Qura month-length overrides instead of the pure tabular rule.")
    args = p.parse_args(argv)

    start = parse_date(args.start)
    end = parse_date(args.end)

    if end < start:
        raise SystemExit("--end must be >= --start")

    total_fail = 0
    for adj in parse_adjustments(args.adjustments):
        cfg = HijriConfig(adjustment=adj)
        if not args.umm_al_qura:
            cfg = cfg.tweak(overrides={})
        fails = roundtrip_test(HijriCalendarEngine(cfg), args.N, start, end, args.seed,
                               max_failures=args.max_failures)
        print(f"adjustment {adj:+d}: {fails} failures / {args.N}")
        total_fail += fails

    return 1 if total_fail else 0


if __name__ == "__main__":
    raise SystemExit(main())
