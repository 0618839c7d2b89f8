# reference/angles.py

from __future__ import annotations

import math
from math import fmod

EARTH_RADIUS_KM = 6371.0


def _wrap(x: float, period: float) -> float:
    y = fmod(x, period)
    if y < 0:
        y += period
    # tiny negatives round up to the period itself
    if y >= period:
        y = 0.0
    return y


def fix_angle(x_deg: float) -> float:
    """Wrap degrees to [0,360)."""
    return _wrap(x_deg, 360.0)


def fix_hour(x_hours: float) -> float:
    """Wrap hours to [0,24)."""
    return _wrap(x_hours, 24.0)


def wrap180(deg: float) -> float:
    return (deg + 180.0) % 360.0 - 180.0


def time_diff(t1: float, t2: float) -> float:
    """Forward interval from t1 to t2 in hours, across midnight if needed."""
    return fix_hour(t2 - t1)


# degree-based trigonometry

def dsin(d: float) -> float:
    return math.sin(math.radians(d))

def dcos(d: float) -> float:
    return math.cos(math.radians(d))

def dtan(d: float) -> float:
    return math.tan(math.radians(d))

def darcsin(x: float) -> float:
    return math.degrees(math.asin(x))

def darccos(x: float) -> float:
    return math.degrees(math.acos(x))

def darctan2(y: float, x: float) -> float:
    return math.degrees(math.atan2(y, x))

def darccot(x: float) -> float:
    return math.degrees(math.atan(1.0 / x))


def bearing(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Initial great-circle bearing from point 1 to point 2, degrees from true north in [0,360)."""
    dlon = lon2 - lon1
    y = dsin(dlon) * dcos(lat2)
    x = dcos(lat1) * dsin(lat2) - dsin(lat1) * dcos(lat2) * dcos(dlon)
    return fix_angle(darctan2(y, x))


def haversine_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great-circle distance on a spherical Earth."""
    dlat = math.radians(lat2 - lat1)
    dlon = math.radians(lon2 - lon1)
    a = math.sin(dlat / 2) ** 2 + dcos(lat1) * dcos(lat2) * math.sin(dlon / 2) ** 2
    return 2.0 * EARTH_RADIUS_KM * math.asin(min(1.0, math.sqrt(a)))
