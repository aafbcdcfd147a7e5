"""Conversion between route polylines and the stored waypoints string.

A waypoints string is ``"lon,lat;lon,lat;..."``, e.g.
``"-108.98,25.79;-108.97,25.8"``. Numbers are written the way the web
console writes them (shortest repr digits, positional, no trailing ``.0``),
so strings stored by either side compare equal.
"""

import logging
import math
from collections.abc import Sequence
from decimal import Decimal

from app.core.errors import CoordinateRangeError, InputSizeError, WaypointsFormatError
from app.core.geometry import Coordinate, simplify_route

logger = logging.getLogger(__name__)

POINT_SEP = ";"
COORD_SEP = ","
MIN_ROUTE_POINTS = 2


def _in_range(lon: float, lat: float) -> bool:
    # Comparisons with NaN are False, so NaN fails here too
    return -180 <= lon <= 180 and -90 <= lat <= 90


def validate_coordinates(coords: Sequence[Sequence[float]]) -> bool:
    """True if every (lon, lat) pair is inside the valid range."""
    return all(_in_range(c[0], c[1]) for c in coords)


def _format_number(value: float) -> str:
    value = float(value)
    if value == 0:
        return "0"
    # Shortest repr digits, always positional: 5e-05 is written 0.00005
    text = format(Decimal(repr(value)), "f")
    if text.endswith(".0"):
        text = text[:-2]
    return text


def encode_waypoints(coords: Sequence[Sequence[float]]) -> str:
    """Encode a polyline for storage.

    Raises InputSizeError for fewer than two points and CoordinateRangeError
    if any point is out of range; a route is rejected whole, never filtered.
    """
    if len(coords) < MIN_ROUTE_POINTS:
        raise InputSizeError(
            f"A route needs at least {MIN_ROUTE_POINTS} points, got {len(coords)}"
        )
    for i, c in enumerate(coords):
        if not _in_range(c[0], c[1]):
            raise CoordinateRangeError(f"Point {i} out of range: lon={c[0]}, lat={c[1]}")
    return POINT_SEP.join(
        f"{_format_number(c[0])}{COORD_SEP}{_format_number(c[1])}" for c in coords
    )


def _parse_component(raw: str, token: str) -> float:
    try:
        value = float(raw)
    except ValueError:
        raise WaypointsFormatError(f"Not a number in waypoint {token!r}: {raw!r}") from None
    if not math.isfinite(value):
        raise WaypointsFormatError(f"Non-finite value in waypoint {token!r}")
    return value


def decode_waypoints(text: str | None) -> list[Coordinate]:
    """Decode a stored waypoints string into ``[(lon, lat), ...]``.

    An empty string is a route with no geometry and decodes to ``[]``.
    Any malformed token raises WaypointsFormatError.
    """
    if text is None or not text.strip():
        return []

    coords: list[Coordinate] = []
    for token in text.split(POINT_SEP):
        parts = token.split(COORD_SEP)
        if len(parts) != 2:
            raise WaypointsFormatError(
                f"Waypoint {token!r} must have exactly 2 components, got {len(parts)}"
            )
        lon = _parse_component(parts[0].strip(), token)
        lat = _parse_component(parts[1].strip(), token)
        coords.append((lon, lat))
    return coords


def count_waypoints(text: str | None) -> int:
    """Number of points in a waypoints string, without parsing them."""
    if not text or not text.strip():
        return 0
    return len(text.split(POINT_SEP))


def prepare_waypoints(
    coords: Sequence[Coordinate],
    tolerance: float | None = None,
) -> str:
    """Simplify (if a tolerance is given), validate and encode for storage."""
    if tolerance is not None:
        before = len(coords)
        coords = simplify_route(coords, tolerance)
        logger.debug("Simplified route %d -> %d points (tol=%g)", before, len(coords), tolerance)
    return encode_waypoints(coords)
