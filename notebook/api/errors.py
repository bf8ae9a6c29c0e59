"""HTTP mapping of the notebook error taxonomy"""
import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from notebook.errors import (
    DuplicateError,
    NotebookError,
    NotFoundError,
    PermissionDeniedError,
    StoreError,
    ValidationError,
)

logger = logging.getLogger(__name__)

STATUS_CODES = {
    ValidationError: 400,
    PermissionDeniedError: 403,
    NotFoundError: 404,
    DuplicateError: 409,
    StoreError: 502,
}


def status_for(error: NotebookError) -> int:
    for error_type, status_code in STATUS_CODES.items():
        if isinstance(error, error_type):
            return status_code
    return 500


async def notebook_error_handler(request: Request, exc: NotebookError) -> JSONResponse:
    status_code = status_for(exc)
    body = {"detail": exc.message}

    if isinstance(exc, DuplicateError):
        # already satisfied; clients show it as a dismissable notice
        body["informational"] = True
        body["materialized_count"] = exc.materialized_count
    elif isinstance(exc, StoreError):
        body["step"] = exc.step
        logger.error(f"{request.method} {request.url.path} failed: {exc}")

    return JSONResponse(status_code=status_code, content=body)


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(NotebookError, notebook_error_handler)
