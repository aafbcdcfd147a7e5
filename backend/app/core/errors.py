"""Errors raised by the route geometry and waypoints layer."""


class GeometryError(ValueError):
    """Base class for coordinate and waypoint errors."""


class CoordinateRangeError(GeometryError):
    """A coordinate is outside lon [-180, 180] / lat [-90, 90]."""


class WaypointsFormatError(GeometryError):
    """A waypoints string token could not be decoded into a numeric pair."""


class InputSizeError(GeometryError):
    """Fewer (or more) coordinates than the operation accepts."""
