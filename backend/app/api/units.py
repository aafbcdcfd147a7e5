"""Vehicle unit REST API endpoints."""

from fastapi import APIRouter, Depends

from app.api.deps import get_store, unwrap
from app.core.store import DocumentStore
from app.schemas.common import ActiveToggle, MutationResult
from app.schemas.unit import UnitCreate, UnitInfo, UnitUpdate
from app.services import units as service

router = APIRouter(prefix="/api/units", tags=["units"])


@router.get("", response_model=list[UnitInfo])
async def list_units(q: str | None = None, store: DocumentStore = Depends(get_store)):
    """Get all units, newest first, optionally filtered by a search term."""
    units = await service.get_all_units(store)
    return [
        UnitInfo(**u, capacidad_label=service.format_capacity(u["capacidad"]))
        for u in service.filter_units(units, q)
    ]


@router.post("", response_model=MutationResult, status_code=201)
async def create_unit(payload: UnitCreate, store: DocumentStore = Depends(get_store)):
    result = unwrap(await service.add_unit(store, **payload.model_dump()))
    return MutationResult(id=result.value["id"], message=result.message)


@router.patch("/{unit_id}", response_model=MutationResult)
async def update_unit(unit_id: str, payload: UnitUpdate, store: DocumentStore = Depends(get_store)):
    result = unwrap(await service.update_unit(
        store, unit_id, **payload.model_dump(exclude_unset=True)
    ))
    return MutationResult(id=unit_id, message=result.message, data=result.value)


@router.delete("/{unit_id}", response_model=MutationResult)
async def delete_unit(unit_id: str, store: DocumentStore = Depends(get_store)):
    result = unwrap(await service.delete_unit(store, unit_id))
    return MutationResult(id=unit_id, message=result.message)


@router.post("/{unit_id}/active", response_model=MutationResult)
async def set_unit_active(
    unit_id: str, payload: ActiveToggle, store: DocumentStore = Depends(get_store),
):
    result = unwrap(await service.toggle_unit_active(store, unit_id, payload.activo))
    return MutationResult(id=unit_id, message=result.message, data={"activo": result.value})
