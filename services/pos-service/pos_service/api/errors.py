"""
POS Service — Domain error → HTTP status mapping
"""
from fastapi import HTTPException, status

from pos_service.core.errors import (
    CodeParseError,
    DuplicateError,
    InsufficientStockError,
    InvalidStateError,
    NotFoundError,
    PosError,
    TableReservedError,
    ValidationError,
)

STATUS_BY_ERROR: dict[type[PosError], int] = {
    NotFoundError: status.HTTP_404_NOT_FOUND,
    TableReservedError: status.HTTP_409_CONFLICT,
    InsufficientStockError: status.HTTP_409_CONFLICT,
    DuplicateError: status.HTTP_409_CONFLICT,
    ValidationError: status.HTTP_400_BAD_REQUEST,
    InvalidStateError: status.HTTP_400_BAD_REQUEST,
    CodeParseError: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def http_error(exc: PosError) -> HTTPException:
    for error_type in type(exc).__mro__:
        if error_type in STATUS_BY_ERROR:
            return HTTPException(status_code=STATUS_BY_ERROR[error_type], detail=str(exc))
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc))
