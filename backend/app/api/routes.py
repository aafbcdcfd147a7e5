"""Route REST API endpoints."""

import logging

from fastapi import APIRouter, Depends, HTTPException

from app.api.deps import get_matcher, get_store, unwrap
from app.config import settings
from app.core.errors import GeometryError, WaypointsFormatError
from app.core.geometry import route_bounds
from app.core.map_matching import MapMatchingClient, Profile
from app.core.store import DocumentStore
from app.core.waypoints import count_waypoints, encode_waypoints
from app.schemas.common import ActiveToggle, MutationResult
from app.schemas.route import (
    MapDefaults,
    MatchRequest,
    MatchResponse,
    RouteCreate,
    RouteDetail,
    RouteInfo,
    RouteUpdate,
)
from app.services import routes as service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/routes", tags=["routes"])


def _info_fields(route: dict) -> dict:
    return {
        "id": route["id"],
        "nombre": route["nombre"],
        "descripcion": route["descripcion"],
        "activo": route["activo"],
        "waypoints_count": count_waypoints(route.get("waypoints")),
        "distancia": route.get("distancia", 0.0),
        "created_at": route.get("created_at"),
    }


@router.get("", response_model=list[RouteInfo])
async def list_routes(store: DocumentStore = Depends(get_store)):
    """Get all routes, newest first, with their waypoint counts."""
    routes = await service.get_all_routes(store)
    return [RouteInfo(**_info_fields(r)) for r in routes]


@router.get("/defaults", response_model=MapDefaults)
async def get_map_defaults():
    """Initial map view and simplification settings for the route drawer."""
    return MapDefaults(
        center=(settings.default_center_lon, settings.default_center_lat),
        simplify_tolerance=settings.simplify_tolerance,
        profiles=list(Profile),
    )


@router.post("/match", response_model=MatchResponse)
async def match_route(
    payload: MatchRequest,
    matcher: MapMatchingClient | None = Depends(get_matcher),
):
    """Snap drawn points to the road network and thin the result."""
    tolerance = payload.tolerance if payload.tolerance is not None else settings.simplify_tolerance
    snapped = unwrap(await service.snap_route(
        matcher, payload.coordinates, payload.profile, tolerance,
    )).value
    try:
        waypoints = encode_waypoints(snapped.coordinates)
    except GeometryError as e:
        raise HTTPException(status_code=422, detail=str(e))
    return MatchResponse(
        coordinates=snapped.coordinates,
        waypoints=waypoints,
        raw_points=snapped.raw_points,
        matched_points=snapped.matched_points,
        distance=snapped.distance,
        duration=snapped.duration,
        confidence=snapped.confidence,
    )


@router.get("/{route_id}", response_model=RouteDetail)
async def get_route(route_id: str, store: DocumentStore = Depends(get_store)):
    """Get a route with its decoded geometry."""
    route = unwrap(await service.get_route(store, route_id)).value
    try:
        coordinates = service.route_coordinates(route)
    except WaypointsFormatError as e:
        logger.error("Route %s has corrupt waypoints: %s", route_id, e)
        raise HTTPException(status_code=500, detail="Stored route geometry is corrupt")

    return RouteDetail(
        **_info_fields(route),
        waypoints=route.get("waypoints") or "",
        coordinates=coordinates,
        bounds=route_bounds(coordinates),
    )


@router.post("", response_model=MutationResult, status_code=201)
async def create_route(payload: RouteCreate, store: DocumentStore = Depends(get_store)):
    result = unwrap(await service.add_route(
        store,
        payload.nombre,
        payload.descripcion,
        activo=payload.activo,
        coordinates=payload.coordinates,
        tolerance=payload.tolerance,
    ))
    return MutationResult(id=result.value["id"], message=result.message)


@router.patch("/{route_id}", response_model=MutationResult)
async def update_route(route_id: str, payload: RouteUpdate, store: DocumentStore = Depends(get_store)):
    result = unwrap(await service.update_route(
        store, route_id, **payload.model_dump(exclude_unset=True)
    ))
    return MutationResult(id=route_id, message=result.message, data=result.value)


@router.delete("/{route_id}", response_model=MutationResult)
async def delete_route(route_id: str, store: DocumentStore = Depends(get_store)):
    result = unwrap(await service.delete_route(store, route_id))
    return MutationResult(id=route_id, message=result.message)


@router.post("/{route_id}/active", response_model=MutationResult)
async def set_route_active(
    route_id: str, payload: ActiveToggle, store: DocumentStore = Depends(get_store),
):
    result = unwrap(await service.toggle_route_active(store, route_id, payload.activo))
    return MutationResult(id=route_id, message=result.message, data={"activo": result.value})
