# reference/solar.py

from __future__ import annotations

import math
from dataclasses import dataclass

from ..core.types import Hours, HourResult, NoSolution
from .angles import (
    bearing,
    darccos,
    darccot,
    darcsin,
    darctan2,
    dcos,
    dsin,
    dtan,
    fix_angle,
    fix_hour,
)

J2000 = 2451545.0
KAABA_LAT = 21.4225
KAABA_LON = 39.8262
# standard refraction plus solar semi-diameter
HORIZON_DEG = 0.833


@dataclass(frozen=True)
class SunPosition:
    """Apparent solar declination (degrees), equation of time and right ascension (hours)."""
    declination_deg: float
    equation_of_time_hours: float
    right_ascension_hours: float = 0.0


def sun_position(jd: float) -> SunPosition:
    """
    Low-precision solar coordinates (U.S. Naval Observatory almanac formulae),
    good to about one arc-minute over 1950-2050.
    """
    d = jd - J2000
    g = fix_angle(357.529 + 0.98560028 * d)
    q = fix_angle(280.459 + 0.98564736 * d)
    l = fix_angle(q + 1.915 * dsin(g) + 0.020 * dsin(2 * g))

    e = 23.439 - 0.00000036 * d
    ra = darctan2(dcos(e) * dsin(l), dcos(l)) / 15.0
    dec = darcsin(dsin(e) * dsin(l))

    # q/15 and RA may straddle 0h/24h; keep EOT near zero
    eqt = fix_hour(q / 15.0 - fix_hour(ra) + 12.0) - 12.0
    return SunPosition(declination_deg=dec, equation_of_time_hours=eqt, right_ascension_hours=fix_hour(ra))


def sun_angle_time(angle_deg: float, lat_deg: float, dec_deg: float, ccw: bool = False) -> HourResult:
    """
    Hour-angle offset from transit at which the sun's altitude equals angle_deg.

    Negative (before transit) unless ccw, positive (after transit) otherwise.
    Returns NoSolution when the sun never reaches that altitude on this day.
    """
    denom = dcos(lat_deg) * dcos(dec_deg)
    if denom == 0.0:
        return NoSolution(f"no hour angle at latitude {lat_deg:g}")
    cos_h = (dsin(angle_deg) - dsin(lat_deg) * dsin(dec_deg)) / denom
    if cos_h < -1.0 or cos_h > 1.0:
        return NoSolution(
            f"sun does not reach {angle_deg:.3f} deg altitude at latitude {lat_deg:g} "
            f"(declination {dec_deg:.3f})"
        )
    h = darccos(cos_h) / 15.0
    return Hours(h if ccw else -h)


def mid_day(equation_of_time_hours: float, lon_deg: float, timezone_hours: float) -> float:
    """Clock time of solar transit."""
    return fix_hour(12.0 - equation_of_time_hours - lon_deg / 15.0 + timezone_hours)


def asr_angle(shadow_factor: float, lat_deg: float, dec_deg: float) -> float:
    """
    Sun altitude (degrees, positive) at which an object's shadow equals
    shadow_factor times its height plus the noon shadow.
    """
    return darccot(shadow_factor + dtan(abs(lat_deg - dec_deg)))


def sun_altitude(hour_angle_hours: float, lat_deg: float, dec_deg: float) -> float:
    """Geometric altitude (degrees) at a given hour angle from transit."""
    s = dsin(lat_deg) * dsin(dec_deg) + dcos(lat_deg) * dcos(dec_deg) * dcos(15.0 * hour_angle_hours)
    return darcsin(max(-1.0, min(1.0, s)))


def elevation_correction(elevation_m: float) -> float:
    """Horizon dip (degrees) for an observer elevation_m above the surroundings."""
    return 0.0347 * math.sqrt(elevation_m)


def horizon_angle(elevation_m: float = 0.0) -> float:
    """Altitude of the sun's centre at apparent sunrise/sunset."""
    return -(HORIZON_DEG + elevation_correction(elevation_m))


def qibla_bearing(lat_deg: float, lon_deg: float) -> float:
    """Great-circle initial bearing toward the Kaaba, degrees from true north in [0,360)."""
    return bearing(lat_deg, lon_deg, KAABA_LAT, KAABA_LON)
