from fastapi import HTTPException, status

from language_platform.core.exceptions import (
    AuthError,
    AutoSaveStateError,
    NotFoundError,
    PermissionDeniedError,
    PlatformError,
    StorageError,
    ValidationError,
)

_STATUS_BY_ERROR = (
    (ValidationError, status.HTTP_400_BAD_REQUEST),
    (AuthError, status.HTTP_401_UNAUTHORIZED),
    (PermissionDeniedError, status.HTTP_403_FORBIDDEN),
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (AutoSaveStateError, status.HTTP_409_CONFLICT),
    (StorageError, status.HTTP_503_SERVICE_UNAVAILABLE),
)


def http_error(exc: PlatformError) -> HTTPException:
    """
    Traduce una excepción de dominio a la HTTPException correspondiente.
    """
    for error_type, status_code in _STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            headers = {"WWW-Authenticate": "Bearer"} if status_code == status.HTTP_401_UNAUTHORIZED else None
            return HTTPException(status_code=status_code, detail=str(exc), headers=headers)
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc))
