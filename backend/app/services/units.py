"""Vehicle (``unidades``) records."""

import logging
from typing import Any

from app.core.results import Err, ErrorKind, Ok, Result
from app.core.store import UNITS, DocumentStore, StoreError
from app.services.common import err_from_store, is_blank, valid_active_flag

logger = logging.getLogger(__name__)

CAPACITY_MESSAGE = "La capacidad debe ser un número entero mayor a 0"


def _parse_capacity(capacidad) -> int | None:
    """Return the capacity as an int, or None if it is not a positive integer."""
    if isinstance(capacidad, bool):
        return None
    if isinstance(capacidad, float) and capacidad.is_integer():
        capacidad = int(capacidad)
    if not isinstance(capacidad, int) or capacidad <= 0:
        return None
    return capacidad


async def add_unit(
    store: DocumentStore,
    no_placas: str,
    no_unidad: str,
    capacidad: int,
    activo: int = 1,
) -> Result:
    if is_blank(no_placas):
        return Err(ErrorKind.VALIDATION, "El número de placas es requerido")
    if is_blank(no_unidad):
        return Err(ErrorKind.VALIDATION, "El número de unidad es requerido")
    capacity = _parse_capacity(capacidad)
    if capacity is None:
        return Err(ErrorKind.VALIDATION, CAPACITY_MESSAGE)
    if not valid_active_flag(activo):
        return Err(ErrorKind.VALIDATION, "El estado debe ser 0 o 1")

    data = {
        "no_placas": no_placas.strip().upper(),
        "no_unidad": no_unidad.strip(),
        "capacidad": capacity,
        "activo": activo,
    }
    try:
        doc_id = await store.add(UNITS, data)
    except StoreError as e:
        return err_from_store(e, "Error al agregar la unidad. Por favor intenta de nuevo.")

    logger.info("Unit added: %s (%s)", doc_id, data["no_placas"])
    return Ok({"id": doc_id, **data}, "Unidad agregada exitosamente")


async def get_all_units(store: DocumentStore) -> list[dict[str, Any]]:
    return await store.list(UNITS, order_by="created_at", descending=True)


async def update_unit(
    store: DocumentStore,
    unit_id: str,
    no_placas: str | None = None,
    no_unidad: str | None = None,
    capacidad: int | None = None,
) -> Result:
    data: dict[str, Any] = {}
    if no_placas is not None:
        if is_blank(no_placas):
            return Err(ErrorKind.VALIDATION, "El número de placas no puede estar vacío")
        data["no_placas"] = no_placas.strip().upper()
    if no_unidad is not None:
        if is_blank(no_unidad):
            return Err(ErrorKind.VALIDATION, "El número de unidad no puede estar vacío")
        data["no_unidad"] = no_unidad.strip()
    if capacidad is not None:
        capacity = _parse_capacity(capacidad)
        if capacity is None:
            return Err(ErrorKind.VALIDATION, CAPACITY_MESSAGE)
        data["capacidad"] = capacity

    try:
        found = await store.update(UNITS, unit_id, data)
    except StoreError as e:
        return err_from_store(e, "Error al actualizar la unidad. Por favor intenta de nuevo.")
    if not found:
        return Err(ErrorKind.NOT_FOUND, "Unidad no encontrada")

    logger.info("Unit updated: %s", unit_id)
    return Ok(data, "Unidad actualizada exitosamente")


async def delete_unit(store: DocumentStore, unit_id: str) -> Result:
    try:
        found = await store.delete(UNITS, unit_id)
    except StoreError as e:
        return err_from_store(e, "Error al eliminar la unidad. Por favor intenta de nuevo.")
    if not found:
        return Err(ErrorKind.NOT_FOUND, "Unidad no encontrada")
    logger.info("Unit deleted: %s", unit_id)
    return Ok(None, "Unidad eliminada exitosamente")


async def toggle_unit_active(store: DocumentStore, unit_id: str, activo: int) -> Result:
    if not valid_active_flag(activo):
        return Err(ErrorKind.VALIDATION, "El estado debe ser 0 o 1")
    try:
        found = await store.update(UNITS, unit_id, {"activo": activo})
    except StoreError as e:
        return err_from_store(e, "Error al cambiar el estado de la unidad.")
    if not found:
        return Err(ErrorKind.NOT_FOUND, "Unidad no encontrada")

    logger.info("Unit %s active=%d", unit_id, activo)
    return Ok(activo, f"Unidad marcada como {'activa' if activo == 1 else 'inactiva'}")


def format_capacity(capacidad: int) -> str:
    """'1 pasajero', '40 pasajeros', '1,200 pasajeros'."""
    return f"{capacidad:,} {'pasajero' if capacidad == 1 else 'pasajeros'}"


def filter_units(units: list[dict[str, Any]], term: str | None) -> list[dict[str, Any]]:
    if not term:
        return list(units)
    needle = term.lower()
    return [
        u for u in units
        if needle in u["no_placas"].lower()
        or needle in u["no_unidad"].lower()
        or needle in u["id"].lower()
        or needle in str(u["capacidad"])
    ]
