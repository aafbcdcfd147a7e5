"""Document store backed by a single SQL table (see ``app.models.tables.Document``)."""

from typing import Any

from sqlalchemy import delete, select
from sqlalchemy.exc import DBAPIError, OperationalError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.core.store import StoreError, StoreErrorKind, new_document_id, utcnow
from app.models.tables import Document


def _to_store_error(exc: SQLAlchemyError) -> StoreError:
    if isinstance(exc, OperationalError) or (
        isinstance(exc, DBAPIError) and exc.connection_invalidated
    ):
        return StoreError(f"Database unreachable: {exc}", StoreErrorKind.NETWORK)
    if "permission denied" in str(exc).lower():
        return StoreError(f"Permission denied: {exc}", StoreErrorKind.PERMISSION_DENIED)
    return StoreError(str(exc))


def _as_dict(row: Document) -> dict[str, Any]:
    return {"id": row.id, **row.data, "created_at": row.created_at}


class SqlDocumentStore:
    """Stores each record as a JSON blob keyed by (collection, id)."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self.session_factory = session_factory

    async def add(self, collection: str, data: dict[str, Any]) -> str:
        doc_id = new_document_id()
        payload = dict(data)
        created_at = payload.pop("created_at", None) or utcnow()
        try:
            async with self.session_factory() as session:
                session.add(Document(
                    collection=collection, id=doc_id, data=payload, created_at=created_at,
                ))
                await session.commit()
        except SQLAlchemyError as e:
            raise _to_store_error(e) from e
        return doc_id

    async def get(self, collection: str, doc_id: str) -> dict[str, Any] | None:
        try:
            async with self.session_factory() as session:
                row = await session.get(Document, (collection, doc_id))
        except SQLAlchemyError as e:
            raise _to_store_error(e) from e
        return _as_dict(row) if row else None

    async def list(
        self, collection: str, order_by: str = "created_at", descending: bool = True,
    ) -> list[dict[str, Any]]:
        stmt = select(Document).where(Document.collection == collection)
        if order_by == "created_at":
            stmt = stmt.order_by(
                Document.created_at.desc() if descending else Document.created_at
            )
        try:
            async with self.session_factory() as session:
                rows = (await session.execute(stmt)).scalars().all()
        except SQLAlchemyError as e:
            raise _to_store_error(e) from e

        docs = [_as_dict(r) for r in rows]
        if order_by != "created_at":
            docs.sort(key=lambda d: d.get(order_by), reverse=descending)
        return docs

    async def update(self, collection: str, doc_id: str, data: dict[str, Any]) -> bool:
        try:
            async with self.session_factory() as session:
                row = await session.get(Document, (collection, doc_id))
                if row is None:
                    return False
                # Reassign so the JSON column is flagged dirty
                row.data = {**row.data, **data}
                await session.commit()
        except SQLAlchemyError as e:
            raise _to_store_error(e) from e
        return True

    async def delete(self, collection: str, doc_id: str) -> bool:
        try:
            async with self.session_factory() as session:
                result = await session.execute(
                    delete(Document).where(
                        Document.collection == collection, Document.id == doc_id,
                    )
                )
                await session.commit()
        except SQLAlchemyError as e:
            raise _to_store_error(e) from e
        return result.rowcount > 0
