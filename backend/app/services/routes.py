"""Route (``rutas``) records and road snapping of drawn routes.

A route's geometry is stored as a waypoints string next to its total
length in meters (``distancia``). Drawn points can be snapped to the road
network first with :func:`snap_route`.
"""

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

from app.core.errors import GeometryError
from app.core.geometry import (
    DEFAULT_TOLERANCE,
    Coordinate,
    calculate_route_distance,
    simplify_route,
)
from app.core.map_matching import MapMatchingClient, MapMatchingError, NoMatchError, Profile
from app.core.results import Err, ErrorKind, Ok, Result, err_from_geometry
from app.core.store import ROUTES, DocumentStore, StoreError
from app.core.waypoints import decode_waypoints, prepare_waypoints
from app.services.common import err_from_store, is_blank, valid_active_flag

logger = logging.getLogger(__name__)


@dataclass
class SnappedRoute:
    coordinates: list[Coordinate]  # snapped and simplified, [(lon, lat), ...]
    raw_points: int  # points in the drawn input
    matched_points: int  # points returned by the API before simplification
    distance: float  # meters, as reported by the API
    duration: float  # seconds
    confidence: float  # 0.0–1.0


def _geometry_fields(coordinates: Sequence[Coordinate], tolerance: float | None) -> dict[str, Any]:
    """Encode coordinates for storage. Raises GeometryError on bad input."""
    waypoints = prepare_waypoints(coordinates, tolerance)
    return {
        "waypoints": waypoints,
        "distancia": calculate_route_distance(decode_waypoints(waypoints)),
    }


async def add_route(
    store: DocumentStore,
    nombre: str,
    descripcion: str,
    activo: int = 1,
    coordinates: Sequence[Coordinate] | None = None,
    tolerance: float | None = None,
) -> Result:
    """Validate and store a new route, with its drawn geometry if given."""
    if is_blank(nombre):
        return Err(ErrorKind.VALIDATION, "El nombre es requerido")
    if is_blank(descripcion):
        return Err(ErrorKind.VALIDATION, "La descripción es requerida")
    if not valid_active_flag(activo):
        return Err(ErrorKind.VALIDATION, "El estado debe ser 0 o 1")

    data: dict[str, Any] = {
        "nombre": nombre.strip(),
        "descripcion": descripcion.strip(),
        "activo": activo,
        "waypoints": "",
        "distancia": 0.0,
    }
    if coordinates is not None:
        try:
            data.update(_geometry_fields(coordinates, tolerance))
        except GeometryError as e:
            logger.info("Rejected route geometry: %s", e)
            return err_from_geometry(e)

    try:
        doc_id = await store.add(ROUTES, data)
    except StoreError as e:
        return err_from_store(e, "Error al agregar la ruta. Por favor intenta de nuevo.")

    logger.info("Route added: %s (%.0fm)", doc_id, data["distancia"])
    return Ok({"id": doc_id, **data}, "Ruta agregada exitosamente")


async def get_all_routes(store: DocumentStore) -> list[dict[str, Any]]:
    return await store.list(ROUTES, order_by="created_at", descending=True)


async def get_route(store: DocumentStore, route_id: str) -> Result:
    try:
        route = await store.get(ROUTES, route_id)
    except StoreError as e:
        return err_from_store(e, "Error al obtener la ruta.")
    if route is None:
        return Err(ErrorKind.NOT_FOUND, "Ruta no encontrada")
    return Ok(route)


async def update_route(
    store: DocumentStore,
    route_id: str,
    nombre: str | None = None,
    descripcion: str | None = None,
    coordinates: Sequence[Coordinate] | None = None,
    tolerance: float | None = None,
) -> Result:
    data: dict[str, Any] = {}
    if nombre is not None:
        if is_blank(nombre):
            return Err(ErrorKind.VALIDATION, "El nombre no puede estar vacío")
        data["nombre"] = nombre.strip()
    if descripcion is not None:
        if is_blank(descripcion):
            return Err(ErrorKind.VALIDATION, "La descripción no puede estar vacía")
        data["descripcion"] = descripcion.strip()
    if coordinates is not None:
        try:
            data.update(_geometry_fields(coordinates, tolerance))
        except GeometryError as e:
            return err_from_geometry(e)

    try:
        found = await store.update(ROUTES, route_id, data)
    except StoreError as e:
        return err_from_store(e, "Error al actualizar la ruta. Por favor intenta de nuevo.")
    if not found:
        return Err(ErrorKind.NOT_FOUND, "Ruta no encontrada")

    logger.info("Route updated: %s", route_id)
    return Ok(data, "Ruta actualizada exitosamente")


async def delete_route(store: DocumentStore, route_id: str) -> Result:
    try:
        found = await store.delete(ROUTES, route_id)
    except StoreError as e:
        return err_from_store(e, "Error al eliminar la ruta. Por favor intenta de nuevo.")
    if not found:
        return Err(ErrorKind.NOT_FOUND, "Ruta no encontrada")
    logger.info("Route deleted: %s", route_id)
    return Ok(None, "Ruta eliminada exitosamente")


async def toggle_route_active(store: DocumentStore, route_id: str, activo: int) -> Result:
    if not valid_active_flag(activo):
        return Err(ErrorKind.VALIDATION, "El estado debe ser 0 o 1")
    try:
        found = await store.update(ROUTES, route_id, {"activo": activo})
    except StoreError as e:
        return err_from_store(e, "Error al cambiar el estado de la ruta.")
    if not found:
        return Err(ErrorKind.NOT_FOUND, "Ruta no encontrada")

    logger.info("Route %s active=%d", route_id, activo)
    return Ok(activo, f"Ruta marcada como {'activa' if activo == 1 else 'inactiva'}")


def route_coordinates(route: dict[str, Any]) -> list[Coordinate]:
    """Decoded geometry of a stored route. Raises WaypointsFormatError if corrupt."""
    return decode_waypoints(route.get("waypoints") or "")


async def snap_route(
    client: MapMatchingClient | None,
    coordinates: Sequence[Coordinate],
    profile: Profile = Profile.DRIVING,
    tolerance: float | None = DEFAULT_TOLERANCE,
) -> Result:
    """Snap drawn points to roads, then thin the snapped geometry."""
    if client is None:
        return Err(ErrorKind.VALIDATION, "El ajuste a calles no está configurado (falta el token de Mapbox)")
    try:
        profile = Profile(profile)
    except ValueError:
        return Err(ErrorKind.VALIDATION, f"Perfil de ruta desconocido: {profile}")

    try:
        matched = await client.match(coordinates, profile)
    except GeometryError as e:
        return err_from_geometry(e)
    except NoMatchError as e:
        logger.info("No road match for %d points: %s", len(coordinates), e)
        return Err(ErrorKind.VALIDATION, "No se pudo hacer match de la ruta con las calles")
    except MapMatchingError as e:
        logger.warning("Map matching failed: %s", e)
        return Err(ErrorKind.NETWORK, f"Error al procesar la ruta con Map Matching: {e}")

    snapped = matched.coordinates
    if tolerance is not None:
        snapped = simplify_route(snapped, tolerance)

    return Ok(SnappedRoute(
        coordinates=snapped,
        raw_points=len(coordinates),
        matched_points=len(matched.coordinates),
        distance=matched.distance,
        duration=matched.duration,
        confidence=matched.confidence,
    ))
