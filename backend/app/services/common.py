"""Helpers shared by the record services."""

import logging

from app.core.results import Err, ErrorKind
from app.core.store import StoreError, StoreErrorKind

logger = logging.getLogger(__name__)

PERMISSION_MESSAGE = "Permisos denegados. Verifica los permisos de la base de datos."
NETWORK_MESSAGE = "Error de conexión con la base de datos. Intenta de nuevo."


def err_from_store(exc: StoreError, fallback: str) -> Err:
    """Translate a store failure into a user-facing Err."""
    if exc.kind == StoreErrorKind.PERMISSION_DENIED:
        return Err(ErrorKind.PERMISSION_DENIED, PERMISSION_MESSAGE)
    if exc.kind == StoreErrorKind.NETWORK:
        return Err(ErrorKind.NETWORK, NETWORK_MESSAGE)
    logger.error("Store error: %s", exc)
    return Err(ErrorKind.UNKNOWN, fallback)


def is_blank(value: str | None) -> bool:
    return value is None or not value.strip()


def valid_active_flag(activo) -> bool:
    return not isinstance(activo, bool) and activo in (0, 1)
