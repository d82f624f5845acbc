"""Exception handlers mapping permission errors to HTTP responses.

Register with register_exception_handlers(app).
"""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from permission_management.domain.exceptions import PermissionManagementException

logger = logging.getLogger(__name__)

# Map domain error_code to HTTP status when applicable
_ERROR_CODE_STATUS: dict[str, int] = {
    "VALIDATION_ERROR": 400,
    "INVALID_HOLDER_KEY": 400,
    "UNKNOWN_PERMISSION": 404,
    "PERMISSION_GROUP_NOT_FOUND": 404,
    "PERMISSION_DENIED": 403,
    "BATCH_PARTIAL_FAILURE": 409,
    "CATALOG_NOT_INITIALIZED": 503,
    "STORE_UNAVAILABLE": 503,
    "DATABASE_NOT_CONFIGURED": 503,
}


def _permission_exception_handler(
    request: Request, exc: PermissionManagementException
) -> JSONResponse:
    """Return JSON from exc.to_dict() with the mapped status code (default 400)."""
    status = _ERROR_CODE_STATUS.get(exc.error_code, 400)
    if status >= 500:
        logger.error("%s on %s %s: %s", exc.error_code, request.method, request.url.path, exc.message)
    return JSONResponse(status_code=status, content=exc.to_dict())


def register_exception_handlers(app: FastAPI) -> None:
    """Register handlers for PermissionManagementException and subclasses."""
    app.add_exception_handler(PermissionManagementException, _permission_exception_handler)
