from datetime import datetime

from fastapi import Request, status
from fastapi.responses import JSONResponse

from workoutplanner.core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    BusinessRuleError,
    ConflictError,
    DomainError,
    IllegalStateTransitionError,
    NotFoundError,
    OptimisticLockConflictError,
    ValidationError,
)
from workoutplanner.core.logging import get_logger


logger = get_logger(__name__)


ERROR_STATUS_MAP: dict[type[DomainError], int] = {
    NotFoundError: status.HTTP_404_NOT_FOUND,
    ValidationError: status.HTTP_400_BAD_REQUEST,
    BusinessRuleError: status.HTTP_422_UNPROCESSABLE_ENTITY,
    ConflictError: status.HTTP_409_CONFLICT,
    OptimisticLockConflictError: status.HTTP_409_CONFLICT,
    IllegalStateTransitionError: status.HTTP_409_CONFLICT,
    AuthenticationError: status.HTTP_401_UNAUTHORIZED,
    AuthorizationError: status.HTTP_403_FORBIDDEN,
}

# Expected outcomes of concurrent use; everything else is logged as an error.
_WARNING_ERRORS = (OptimisticLockConflictError, IllegalStateTransitionError)


async def domain_error_handler(request: Request, exc: DomainError) -> JSONResponse:
    status_code = ERROR_STATUS_MAP.get(type(exc), status.HTTP_500_INTERNAL_SERVER_ERROR)
    request_id = getattr(request.state, "request_id", None)

    log = logger.warning if isinstance(exc, _WARNING_ERRORS) or status_code < 500 else logger.error
    log(
        "domain_error",
        request_id=request_id,
        code=exc.code,
        status_code=status_code,
        path=request.url.path,
        details=exc.details,
    )

    return JSONResponse(
        status_code=status_code,
        content={
            "data": None,
            "meta": {
                "request_id": request_id,
                "timestamp": datetime.utcnow().isoformat() + "Z",
            },
            "errors": [
                {
                    "code": exc.code,
                    "message": exc.message,
                    "details": exc.details,
                }
            ],
        },
    )
