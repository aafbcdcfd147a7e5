import datetime

from pydantic import BaseModel

from app.core.map_matching import Profile

# (lon, lat)
Coordinate = tuple[float, float]


class RouteCreate(BaseModel):
    nombre: str
    descripcion: str
    activo: int = 1
    coordinates: list[Coordinate] | None = None
    tolerance: float | None = None  # simplify before storing when set


class RouteUpdate(BaseModel):
    nombre: str | None = None
    descripcion: str | None = None
    coordinates: list[Coordinate] | None = None
    tolerance: float | None = None


class RouteInfo(BaseModel):
    id: str
    nombre: str
    descripcion: str
    activo: int
    waypoints_count: int
    distancia: float = 0.0  # meters
    created_at: datetime.datetime | None = None


class RouteDetail(RouteInfo):
    waypoints: str = ""
    coordinates: list[Coordinate] = []
    bounds: tuple[float, float, float, float] | None = None  # min_lon, min_lat, max_lon, max_lat


class MatchRequest(BaseModel):
    coordinates: list[Coordinate]
    profile: Profile = Profile.DRIVING
    tolerance: float | None = None  # defaults to settings.simplify_tolerance


class MatchResponse(BaseModel):
    coordinates: list[Coordinate]
    waypoints: str
    raw_points: int
    matched_points: int
    distance: float  # meters, as reported by the matcher
    duration: float  # seconds
    confidence: float


class MapDefaults(BaseModel):
    center: Coordinate
    simplify_tolerance: float
    profiles: list[Profile]
