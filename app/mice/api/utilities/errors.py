# app/mice/api/utilities/errors.py

from fastapi import HTTPException, status

from ...services.errors import ServiceError, InvalidPayload, NotFound, StoreUnavailable, ScanConflict

_STATUS_BY_ERROR = {
    InvalidPayload: status.HTTP_400_BAD_REQUEST,
    NotFound: status.HTTP_404_NOT_FOUND,
    ScanConflict: status.HTTP_409_CONFLICT,
    StoreUnavailable: status.HTTP_503_SERVICE_UNAVAILABLE,
}


def to_http_exception(error: ServiceError) -> HTTPException:
    """Maps a service layer error onto the HTTP status the clients expect."""
    for error_type, status_code in _STATUS_BY_ERROR.items():
        if isinstance(error, error_type):
            return HTTPException(status_code=status_code, detail=str(error))
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(error))
