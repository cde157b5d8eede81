"""Flat-earth projection of sector points around a light.

Bearings are given as seen from seaward towards the light, so the point for
bearing *b* lies in true direction ``b + 180°`` from the light.  Offsets are a
local planar approximation: one degree of latitude is 60 nm and longitude is
scaled by ``cos(latitude)``.  This is not a geodesic computation.
"""

from __future__ import annotations

import math

NM_PER_DEGREE = 60.0


def bearing_to_angle(bearing: float) -> float:
    """Mathematical angle (radians, counter-clockwise from east) of the point drawn for *bearing*."""
    return 1.5 * math.pi - math.radians(bearing)


def project(lat: float, lon: float, radius_nm: float, bearing: float) -> tuple[float, float]:
    """Return ``(lat, lon)`` of the point *radius_nm* away from the anchor at *bearing*."""
    r = radius_nm / NM_PER_DEGREE
    a = bearing_to_angle(bearing)
    return (
        lat + r * math.sin(a),
        lon + r * math.cos(a) / math.cos(math.radians(lat)),
    )


def arc_step(radius_nm: float, arc_max: float, arc_div: float) -> float:
    """Angular distance in degrees between two consecutive arc points.

    The chord between neighbouring points is ``radius / arc_div``, capped at
    *arc_max* nautical miles when *arc_max* > 0.
    """
    chord = radius_nm / arc_div
    if arc_max > 0 and chord > arc_max:
        chord = arc_max
    return math.degrees(2.0 * math.asin(min(1.0, chord / (2.0 * radius_nm))))


def arc_bearings(start: float, end: float, step: float) -> list[float]:
    """Interior bearings strictly between *start* and *end*, *step* apart."""
    bearings: list[float] = []
    if step <= 0:
        return bearings
    i = 1
    while start + i * step < end:
        bearings.append(start + i * step)
        i += 1
    return bearings
