#ephemeris/de422.py
from __future__ import annotations

import math
from dataclasses import dataclass

from ..core.errors import EphemerisUnavailableError
from ..reference.angles import fix_angle, fix_hour

EPS_J2000_DEG = 23.439291111
# general precession in longitude, degrees per Julian century
PRECESSION_DEG_PER_CENTURY = 1.396971
EMRAT_DEFAULT = 81.30056907419062


def _get_emrat(constants: dict) -> float:
    for k in ("EMRAT", "emrat"):
        if k in constants:
            return float(constants[k])
    return EMRAT_DEFAULT


def _load_constants_dict(de422_mod) -> dict:
    # de422 package ships constants.npy next to __file__
    import pathlib
    import numpy as np
    pkgdir = pathlib.Path(de422_mod.__file__).resolve().parent
    p = pkgdir / "constants.npy"
    if not p.exists():
        return {}
    c = np.load(str(p), allow_pickle=True)
    return c.item() if c.shape == () else {}


@dataclass(frozen=True)
class SunOfDate:
    declination_deg: float
    right_ascension_hours: float
    longitude_deg: float


@dataclass
class DE422Sun:
    """
    Geocentric geometric Sun from DE422, rotated to the equinox of date with
    a first-order precession in longitude (no nutation, no aberration).

    Requires optional deps:
      pip install "miqat[ephemeris]"
    """
    eph: object
    emrat: float

    @classmethod
    def load(cls) -> "DE422Sun":
        try:
            import de422  # type: ignore
            from jplephem import Ephemeris  # type: ignore
        except ImportError as e:
            raise EphemerisUnavailableError(
                "DE422 ephemeris not available. Install extras:\n"
                "  pip install \"miqat[ephemeris]\""
            ) from e

        eph = Ephemeris(de422)
        try:
            const = _load_constants_dict(de422)
        except (OSError, ValueError, ImportError):
            const = {}
        return cls(eph=eph, emrat=_get_emrat(const))

    def earth_to_sun(self, jd: float):
        r_emb = self.eph.compute("earthmoon", jd)[:3]
        r_em = self.eph.compute("moon", jd)[:3]
        r_sun = self.eph.compute("sun", jd)[:3]
        r_earth = r_emb - r_em / (self.emrat + 1.0)
        return r_sun - r_earth

    def position(self, jd: float) -> SunOfDate:
        x, y, z = (float(c) for c in self.earth_to_sun(jd))

        # equatorial J2000 -> ecliptic J2000
        e0 = math.radians(EPS_J2000_DEG)
        ye = math.cos(e0) * y + math.sin(e0) * z
        ze = -math.sin(e0) * y + math.cos(e0) * z
        lon = math.degrees(math.atan2(ye, x))
        lat = math.degrees(math.atan2(ze, math.hypot(x, ye)))

        d = jd - 2451545.0
        lon = fix_angle(lon + PRECESSION_DEG_PER_CENTURY * d / 36525.0)

        # ecliptic of date -> equatorial of date
        eps = math.radians(23.439 - 0.00000036 * d)
        lr, br = math.radians(lon), math.radians(lat)
        xe = math.cos(br) * math.cos(lr)
        ye = math.cos(br) * math.sin(lr)
        ze = math.sin(br)
        yq = math.cos(eps) * ye - math.sin(eps) * ze
        zq = math.sin(eps) * ye + math.cos(eps) * ze
        dec = math.degrees(math.asin(max(-1.0, min(1.0, zq))))
        ra = fix_hour(math.degrees(math.atan2(yq, xe)) / 15.0)
        return SunOfDate(declination_deg=dec, right_ascension_hours=ra, longitude_deg=lon)
