import datetime

from pydantic import BaseModel


class DriverCreate(BaseModel):
    nombre: str
    apellido_paterno: str
    apellido_materno: str
    no_licencia: str
    activo: int = 1


class DriverUpdate(BaseModel):
    nombre: str | None = None
    apellido_paterno: str | None = None
    apellido_materno: str | None = None
    no_licencia: str | None = None


class DriverInfo(BaseModel):
    id: str
    nombre: str
    apellido_paterno: str
    apellido_materno: str
    no_licencia: str
    activo: int
    full_name: str
    created_at: datetime.datetime | None = None
