"""Driver (``choferes``) records."""

import logging
from typing import Any

from app.core.results import Err, ErrorKind, Ok, Result
from app.core.store import DRIVERS, DocumentStore, StoreError
from app.services.common import err_from_store, is_blank, valid_active_flag

logger = logging.getLogger(__name__)

# field -> label used in validation messages
REQUIRED_FIELDS = {
    "nombre": "El nombre",
    "apellido_paterno": "El apellido paterno",
    "apellido_materno": "El apellido materno",
    "no_licencia": "El número de licencia",
}


def _normalize(field: str, value: str) -> str:
    value = value.strip()
    if field == "no_licencia":
        value = value.upper()
    return value


async def add_driver(
    store: DocumentStore,
    nombre: str,
    apellido_paterno: str,
    apellido_materno: str,
    no_licencia: str,
    activo: int = 1,
) -> Result:
    """Validate and store a new driver. Returns Ok with the stored record."""
    values = {
        "nombre": nombre,
        "apellido_paterno": apellido_paterno,
        "apellido_materno": apellido_materno,
        "no_licencia": no_licencia,
    }
    for field, label in REQUIRED_FIELDS.items():
        if is_blank(values[field]):
            return Err(ErrorKind.VALIDATION, f"{label} es requerido")
    if not valid_active_flag(activo):
        return Err(ErrorKind.VALIDATION, "El estado debe ser 0 o 1")

    data: dict[str, Any] = {f: _normalize(f, v) for f, v in values.items()}
    data["activo"] = activo

    try:
        doc_id = await store.add(DRIVERS, data)
    except StoreError as e:
        return err_from_store(e, "Error al agregar el chofer. Por favor intenta de nuevo.")

    logger.info("Driver added: %s", doc_id)
    return Ok({"id": doc_id, **data}, "Chofer agregado exitosamente")


async def get_all_drivers(store: DocumentStore) -> list[dict[str, Any]]:
    """All drivers, newest first. Store failures propagate as StoreError."""
    drivers = await store.list(DRIVERS, order_by="created_at", descending=True)
    logger.debug("Fetched %d drivers", len(drivers))
    return drivers


async def update_driver(store: DocumentStore, driver_id: str, **changes: str | None) -> Result:
    """Update any subset of the driver's name and license fields."""
    data: dict[str, Any] = {}
    for field, value in changes.items():
        if field not in REQUIRED_FIELDS:
            return Err(ErrorKind.VALIDATION, f"Campo desconocido: {field}")
        if value is None:
            continue
        if is_blank(value):
            return Err(ErrorKind.VALIDATION, f"{REQUIRED_FIELDS[field]} no puede estar vacío")
        data[field] = _normalize(field, value)

    try:
        found = await store.update(DRIVERS, driver_id, data)
    except StoreError as e:
        return err_from_store(e, "Error al actualizar el chofer. Por favor intenta de nuevo.")
    if not found:
        return Err(ErrorKind.NOT_FOUND, "Chofer no encontrado")

    logger.info("Driver updated: %s (%s)", driver_id, ", ".join(data) or "no changes")
    return Ok(data, "Chofer actualizado exitosamente")


async def delete_driver(store: DocumentStore, driver_id: str) -> Result:
    try:
        found = await store.delete(DRIVERS, driver_id)
    except StoreError as e:
        return err_from_store(e, "Error al eliminar el chofer. Por favor intenta de nuevo.")
    if not found:
        return Err(ErrorKind.NOT_FOUND, "Chofer no encontrado")
    logger.info("Driver deleted: %s", driver_id)
    return Ok(None, "Chofer eliminado exitosamente")


async def toggle_driver_active(store: DocumentStore, driver_id: str, activo: int) -> Result:
    """Set the active flag (1 = active, 0 = inactive)."""
    if not valid_active_flag(activo):
        return Err(ErrorKind.VALIDATION, "El estado debe ser 0 o 1")
    try:
        found = await store.update(DRIVERS, driver_id, {"activo": activo})
    except StoreError as e:
        return err_from_store(e, "Error al cambiar el estado del chofer.")
    if not found:
        return Err(ErrorKind.NOT_FOUND, "Chofer no encontrado")

    logger.info("Driver %s active=%d", driver_id, activo)
    return Ok(activo, f"Chofer marcado como {'activo' if activo == 1 else 'inactivo'}")


def format_full_name(driver: dict[str, Any]) -> str:
    return f"{driver['nombre']} {driver['apellido_paterno']} {driver['apellido_materno']}"


def filter_drivers(drivers: list[dict[str, Any]], term: str | None) -> list[dict[str, Any]]:
    """Case-insensitive search over full name, each name part, license and id."""
    if not term:
        return list(drivers)
    needle = term.lower()

    def matches(driver: dict[str, Any]) -> bool:
        haystack = [
            format_full_name(driver),
            driver["nombre"],
            driver["apellido_paterno"],
            driver["apellido_materno"],
            driver["no_licencia"],
            driver["id"],
        ]
        return any(needle in h.lower() for h in haystack)

    return [d for d in drivers if matches(d)]
