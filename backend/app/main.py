"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.api import drivers, routes, units
from app.api.deps import store_error_status
from app.config import settings
from app.core.map_matching import MapMatchingClient
from app.core.store import InMemoryDocumentStore, StoreError

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)-8s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


async def _create_sql_store():
    from app.db.document_store import SqlDocumentStore
    from app.db.session import async_session, engine
    from app.models.base import Base
    from app.models import tables  # noqa: F401

    # Create tables if they don't exist
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    return SqlDocumentStore(async_session), engine


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application startup and shutdown."""
    engine = None
    if settings.store_backend == "sql":
        app.state.store, engine = await _create_sql_store()
    else:
        app.state.store = InMemoryDocumentStore()
        logger.warning("Using in-memory store - records are lost on restart")

    app.state.matcher = None
    if settings.mapbox_access_token:
        app.state.matcher = MapMatchingClient()
    else:
        logger.warning("MAPBOX_ACCESS_TOKEN not set - road snapping disabled")

    logger.info("Fleet console started (store=%s)", settings.store_backend)

    yield

    # Shutdown
    if app.state.matcher is not None:
        await app.state.matcher.close()
    if engine is not None:
        await engine.dispose()
    logger.info("Fleet console shut down")


app = FastAPI(
    title="Fleet Console",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(drivers.router)
app.include_router(units.router)
app.include_router(routes.router)


@app.exception_handler(StoreError)
async def store_error_handler(request: Request, exc: StoreError):
    logger.error("Store failure on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(
        status_code=store_error_status(exc),
        content={"detail": "Error al acceder a la base de datos. Por favor intenta de nuevo."},
    )


@app.get("/api/health")
async def health():
    return {"status": "ok"}
