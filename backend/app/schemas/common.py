from typing import Any, Literal

from pydantic import BaseModel


class ActiveToggle(BaseModel):
    activo: Literal[0, 1]


class MutationResult(BaseModel):
    id: str | None = None
    message: str
    data: dict[str, Any] | None = None
