import datetime

from pydantic import BaseModel


class UnitCreate(BaseModel):
    no_placas: str
    no_unidad: str
    capacidad: int
    activo: int = 1


class UnitUpdate(BaseModel):
    no_placas: str | None = None
    no_unidad: str | None = None
    capacidad: int | None = None


class UnitInfo(BaseModel):
    id: str
    no_placas: str
    no_unidad: str
    capacidad: int
    capacidad_label: str
    activo: int
    created_at: datetime.datetime | None = None
