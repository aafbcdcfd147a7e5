"""Driver REST API endpoints."""

from fastapi import APIRouter, Depends

from app.api.deps import get_store, unwrap
from app.core.store import DocumentStore
from app.schemas.common import ActiveToggle, MutationResult
from app.schemas.driver import DriverCreate, DriverInfo, DriverUpdate
from app.services import drivers as service

router = APIRouter(prefix="/api/drivers", tags=["drivers"])


def _info(driver: dict) -> DriverInfo:
    return DriverInfo(**driver, full_name=service.format_full_name(driver))


@router.get("", response_model=list[DriverInfo])
async def list_drivers(q: str | None = None, store: DocumentStore = Depends(get_store)):
    """Get all drivers, newest first, optionally filtered by a search term."""
    drivers = await service.get_all_drivers(store)
    return [_info(d) for d in service.filter_drivers(drivers, q)]


@router.post("", response_model=MutationResult, status_code=201)
async def create_driver(payload: DriverCreate, store: DocumentStore = Depends(get_store)):
    result = unwrap(await service.add_driver(store, **payload.model_dump()))
    return MutationResult(id=result.value["id"], message=result.message)


@router.patch("/{driver_id}", response_model=MutationResult)
async def update_driver(
    driver_id: str, payload: DriverUpdate, store: DocumentStore = Depends(get_store),
):
    result = unwrap(await service.update_driver(
        store, driver_id, **payload.model_dump(exclude_unset=True)
    ))
    return MutationResult(id=driver_id, message=result.message, data=result.value)


@router.delete("/{driver_id}", response_model=MutationResult)
async def delete_driver(driver_id: str, store: DocumentStore = Depends(get_store)):
    result = unwrap(await service.delete_driver(store, driver_id))
    return MutationResult(id=driver_id, message=result.message)


@router.post("/{driver_id}/active", response_model=MutationResult)
async def set_driver_active(
    driver_id: str, payload: ActiveToggle, store: DocumentStore = Depends(get_store),
):
    result = unwrap(await service.toggle_driver_active(store, driver_id, payload.activo))
    return MutationResult(id=driver_id, message=result.message, data={"activo": result.value})
