"""Shared FastAPI dependencies and Result -> HTTP translation."""

from fastapi import HTTPException, Request

from app.core.map_matching import MapMatchingClient
from app.core.results import Err, ErrorKind, Ok, Result
from app.core.store import DocumentStore, StoreError, StoreErrorKind

ERROR_STATUS = {
    ErrorKind.VALIDATION: 422,
    ErrorKind.RANGE: 422,
    ErrorKind.FORMAT: 422,
    ErrorKind.INPUT_SIZE: 422,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.PERMISSION_DENIED: 403,
    ErrorKind.NETWORK: 502,
    ErrorKind.UNKNOWN: 500,
}

STORE_ERROR_STATUS = {
    StoreErrorKind.PERMISSION_DENIED: 403,
    StoreErrorKind.NETWORK: 502,
    StoreErrorKind.UNKNOWN: 500,
}


def get_store(request: Request) -> DocumentStore:
    return request.app.state.store


def get_matcher(request: Request) -> MapMatchingClient | None:
    return getattr(request.app.state, "matcher", None)


def unwrap(result: Result) -> Ok:
    """Return an Ok result or raise the HTTPException matching the Err kind."""
    if isinstance(result, Err):
        raise HTTPException(
            status_code=ERROR_STATUS[result.kind],
            detail=result.message,
            headers={"X-Error-Kind": result.kind.value},
        )
    return result


def store_error_status(exc: StoreError) -> int:
    return STORE_ERROR_STATUS.get(exc.kind, 500)
