"""Tagged success/failure values returned by the record services.

Expected failures (a blank required field, an unknown id, a route with
out-of-range points) come back as ``Err`` instead of being raised.
"""

import enum
from dataclasses import dataclass
from typing import Any

from app.core.errors import CoordinateRangeError, GeometryError, InputSizeError, WaypointsFormatError


class ErrorKind(str, enum.Enum):
    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    PERMISSION_DENIED = "permission_denied"
    NETWORK = "network"
    RANGE = "range"
    FORMAT = "format"
    INPUT_SIZE = "input_size"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class Ok:
    value: Any = None
    message: str = ""

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Err:
    kind: ErrorKind
    message: str

    @property
    def ok(self) -> bool:
        return False


Result = Ok | Err


def err_from_geometry(exc: GeometryError) -> Err:
    """Map a geometry/codec exception onto an Err of the matching kind."""
    if isinstance(exc, CoordinateRangeError):
        kind = ErrorKind.RANGE
    elif isinstance(exc, WaypointsFormatError):
        kind = ErrorKind.FORMAT
    elif isinstance(exc, InputSizeError):
        kind = ErrorKind.INPUT_SIZE
    else:
        kind = ErrorKind.VALIDATION
    return Err(kind, str(exc))
