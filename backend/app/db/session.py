"""Async SQLAlchemy engine and session factory."""

import orjson
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine

from app.config import settings


def _json_dumps(value) -> str:
    return orjson.dumps(value).decode()


engine = create_async_engine(
    settings.database_url,
    json_serializer=_json_dumps,
    json_deserializer=orjson.loads,
    pool_pre_ping=True,
)
async_session = async_sessionmaker(engine, expire_on_commit=False)
