"""Document store used for drivers, units and routes.

Records live in named collections (``choferes``, ``unidades``, ``rutas``)
as plain dicts. The store is passed to the services explicitly; the app
builds one at startup and tests build their own.
"""

import datetime
import enum
import itertools
import logging
import uuid
from typing import Any, Protocol

logger = logging.getLogger(__name__)

DRIVERS = "choferes"
UNITS = "unidades"
ROUTES = "rutas"


class StoreErrorKind(str, enum.Enum):
    PERMISSION_DENIED = "permission_denied"
    NETWORK = "network"
    UNKNOWN = "unknown"


class StoreError(Exception):
    """A store backend failed to complete a request."""

    def __init__(self, message: str, kind: StoreErrorKind = StoreErrorKind.UNKNOWN) -> None:
        super().__init__(message)
        self.kind = kind


def new_document_id() -> str:
    return uuid.uuid4().hex[:20]


def utcnow() -> datetime.datetime:
    return datetime.datetime.now(datetime.timezone.utc)


class DocumentStore(Protocol):
    async def add(self, collection: str, data: dict[str, Any]) -> str: ...

    async def get(self, collection: str, doc_id: str) -> dict[str, Any] | None: ...

    async def list(
        self, collection: str, order_by: str = "created_at", descending: bool = True,
    ) -> list[dict[str, Any]]: ...

    async def update(self, collection: str, doc_id: str, data: dict[str, Any]) -> bool: ...

    async def delete(self, collection: str, doc_id: str) -> bool: ...


class InMemoryDocumentStore:
    """Dict-backed store for development and tests."""

    def __init__(self) -> None:
        # collection -> {doc_id -> document}
        self._collections: dict[str, dict[str, dict[str, Any]]] = {}
        # Insertion sequence breaks created_at ties
        self._seq = itertools.count()
        self._order: dict[str, int] = {}

    async def add(self, collection: str, data: dict[str, Any]) -> str:
        doc_id = new_document_id()
        doc = dict(data)
        doc.setdefault("created_at", utcnow())
        self._collections.setdefault(collection, {})[doc_id] = doc
        self._order[doc_id] = next(self._seq)
        return doc_id

    async def get(self, collection: str, doc_id: str) -> dict[str, Any] | None:
        doc = self._collections.get(collection, {}).get(doc_id)
        if doc is None:
            return None
        return {"id": doc_id, **doc}

    async def list(
        self, collection: str, order_by: str = "created_at", descending: bool = True,
    ) -> list[dict[str, Any]]:
        docs = self._collections.get(collection, {})
        ids = sorted(
            docs,
            key=lambda d: (docs[d].get(order_by), self._order[d]),
            reverse=descending,
        )
        return [{"id": d, **docs[d]} for d in ids]

    async def update(self, collection: str, doc_id: str, data: dict[str, Any]) -> bool:
        doc = self._collections.get(collection, {}).get(doc_id)
        if doc is None:
            return False
        doc.update(data)
        return True

    async def delete(self, collection: str, doc_id: str) -> bool:
        docs = self._collections.get(collection, {})
        if doc_id not in docs:
            return False
        del docs[doc_id]
        self._order.pop(doc_id, None)
        return True
