"""Route geometry helpers: great-circle distance and polyline thinning.

Coordinates are ``(lon, lat)`` pairs, the order used by GeoJSON and by the
map-matching API. None of these functions validate their input; NaN in,
NaN out. Range checks live in ``app.core.waypoints``.
"""

import math
from collections.abc import Sequence

from shapely.geometry import LineString

Coordinate = tuple[float, float]  # (lon, lat)

EARTH_RADIUS_M = 6_371_000
# Thinning tolerance in raw degrees, not meters
DEFAULT_TOLERANCE = 0.0001


def haversine_distance(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great-circle distance in meters between two lat/lon points."""
    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    dphi = math.radians(lat2 - lat1)
    dlambda = math.radians(lon2 - lon1)
    a = (math.sin(dphi / 2) ** 2 +
         math.cos(phi1) * math.cos(phi2) *
         math.sin(dlambda / 2) ** 2)
    # Rounding near antipodes or out-of-range latitudes can push a outside [0, 1]; NaN skips both
    if a > 1:
        a = 1.0
    elif a < 0:
        a = 0.0
    return EARTH_RADIUS_M * 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))


def calculate_route_distance(coords: Sequence[Sequence[float]]) -> float:
    """Total length in meters of a ``[(lon, lat), ...]`` polyline."""
    total = 0.0
    for i in range(len(coords) - 1):
        lon1, lat1 = coords[i][0], coords[i][1]
        lon2, lat2 = coords[i + 1][0], coords[i + 1][1]
        total += haversine_distance(lat1, lon1, lat2, lon2)
    return total


def perpendicular_distance(
    point: Sequence[float],
    line_start: Sequence[float],
    line_end: Sequence[float],
) -> float:
    """Planar distance (degrees) from a point to a segment, clamped to its ends."""
    x, y = point[0], point[1]
    x1, y1 = line_start[0], line_start[1]
    x2, y2 = line_end[0], line_end[1]

    dx, dy = x2 - x1, y2 - y1
    len_sq = dx * dx + dy * dy

    # -1 forces the clamp to line_start for a zero-length segment
    t = -1.0
    if len_sq != 0:
        t = ((x - x1) * dx + (y - y1) * dy) / len_sq

    if t < 0:
        cx, cy = x1, y1
    elif t > 1:
        cx, cy = x2, y2
    else:
        cx, cy = x1 + t * dx, y1 + t * dy

    ex, ey = x - cx, y - cy
    return math.sqrt(ex * ex + ey * ey)


def simplify_route(
    coords: Sequence[Coordinate],
    tolerance: float = DEFAULT_TOLERANCE,
) -> list[Coordinate]:
    """Drop interior points that sit within ``tolerance`` of their neighbours.

    Single pass: each interior point is tested against its original
    predecessor and successor, not against the points kept so far, so this
    is cheaper and coarser than Douglas-Peucker. First and last points are
    always kept. Polylines of two points or fewer come back unchanged.
    """
    if len(coords) <= 2:
        return list(coords)

    simplified = [coords[0]]
    for i in range(1, len(coords) - 1):
        if perpendicular_distance(coords[i], coords[i - 1], coords[i + 1]) > tolerance:
            simplified.append(coords[i])
    simplified.append(coords[-1])
    return simplified


def route_bounds(coords: Sequence[Coordinate]) -> tuple[float, float, float, float] | None:
    """Bounding box ``(min_lon, min_lat, max_lon, max_lat)`` for fitting a map view."""
    if len(coords) < 2:
        return None
    return LineString([(c[0], c[1]) for c in coords]).bounds
