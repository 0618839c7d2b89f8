#!/usr/bin/env python3
from __future__ import annotations

import argparse
from typing import List, Optional

from miqat.ephemeris.de422 import DE422Sun
from miqat.reference import solar
from miqat.reference.angles import wrap180

# DE422 coverage in JD
MIN_JD = 625648.5
MAX_JD = 2816816.5


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


def main(argv: Optional[List[str]] = None) -> int:
    p = argparse.ArgumentParser(description="Validate the low-precision solar model against DE422.")
    p.add_argument("--year-start", type=int, default=1900)
    p.add_argument("--year-end", type=int, default=2100)
    p.add_argument("--step-days", type=int, default=5)
    p.add_argument("--out-png", default="sun_validation.png")
    args = p.parse_args(argv)

    np = _need_numpy()
    plt = _need_matplotlib()

    print("Loading DE422 Ephemeris...")
    sun = DE422Sun.load()

    jd_start = max(solar.J2000 + (args.year_start - 2000) * 365.25, MIN_JD + 1.0)
    jd_end = min(solar.J2000 + (args.year_end - 2000) * 365.25, MAX_JD - 1.0)
    if jd_start > jd_end:
        raise ValueError(f"Requested range is outside valid ephemeris range [{MIN_JD}, {MAX_JD}]")

    jds = np.arange(jd_start, jd_end, args.step_days)
    years = 2000 + (jds - solar.J2000) / 365.25
    print(f"Validating {len(jds)} points from {years[0]:.0f} to {years[-1]:.0f}...")

    err_dec = np.empty_like(jds)
    err_ra = np.empty_like(jds)
    for i, jd in enumerate(jds):
        ref = sun.position(float(jd))
        model = solar.sun_position(float(jd))
        # arcminutes / seconds of time
        err_dec[i] = (model.declination_deg - ref.declination_deg) * 60.0
        err_ra[i] = wrap180((model.right_ascension_hours - ref.right_ascension_hours) * 15.0) / 15.0 * 3600.0

    print(f"declination   : mean {err_dec.mean():+.3f}'  max|.| {np.abs(err_dec).max():.3f}'")
    print(f"RA / EOT      : mean {err_ra.mean():+.2f}s  max|.| {np.abs(err_ra).max():.2f}s")

    fig, axs = plt.subplots(2, 1, figsize=(12, 7), sharex=True)

    axs[0].scatter(years, err_dec, s=1, alpha=0.5, color="orange")
    axs[0].set_title("Solar Declination Error (model - DE422)")
    axs[0].set_ylabel("Error (arcmin)")
    axs[0].grid(True, alpha=0.3)

    axs[1].scatter(years, err_ra, s=1, alpha=0.5, color="blue")
    axs[1].set_title("Right Ascension / Equation of Time Error (model - DE422)")
    axs[1].set_ylabel("Error (s)")
    axs[1].set_xlabel("Year")
    axs[1].grid(True, alpha=0.3)

    plt.suptitle(f"Solar Model Validation against DE422 ({years[0]:.0f} to {years[-1]:.0f})", fontsize=14)
    plt.tight_layout()
    plt.savefig(args.out_png, dpi=200)
    print(f"Validation complete. Plot saved to {args.out_png}")

    return 0

if __name__ == "__main__":
    raise SystemExit(main())
