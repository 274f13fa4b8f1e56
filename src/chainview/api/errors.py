from fastapi import HTTPException

from chainview.exceptions import (
    ChainViewError,
    DataIntegrityError,
    ExternalServiceError,
    InvalidAddressError,
    UnknownChainError,
    UpstreamError,
)


def to_http_error(exc: ChainViewError) -> HTTPException:
    """Map a domain failure to the HTTP status the API reports it with."""
    if isinstance(exc, UnknownChainError):
        return HTTPException(status_code=404, detail=str(exc))
    if isinstance(exc, InvalidAddressError):
        return HTTPException(status_code=400, detail=str(exc))
    if isinstance(exc, DataIntegrityError):
        return HTTPException(status_code=422, detail=str(exc))
    if isinstance(exc, (ExternalServiceError, UpstreamError)):
        return HTTPException(status_code=502, detail=str(exc))
    return HTTPException(status_code=500, detail=str(exc))
