"""Exception handlers registered on the application."""
import logging

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)

_REQUEST_PARTS = ("body", "query", "path", "header", "cookie")


def flatten_validation_errors(errors: list[dict]) -> dict:
    """Group pydantic errors into ``formErrors`` (whole payload) and
    ``fieldErrors`` keyed by top-level field name."""
    form_errors: list[str] = []
    field_errors: dict[str, list[str]] = {}
    for error in errors:
        loc = [part for part in error.get("loc", ()) if part not in _REQUEST_PARTS]
        message = error.get("msg", "Valor inválido").removeprefix("Value error, ")
        if loc:
            field_errors.setdefault(str(loc[0]), []).append(message)
        else:
            form_errors.append(message)
    return {"formErrors": form_errors, "fieldErrors": field_errors}


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    detail = flatten_validation_errors(exc.errors())
    logger.info("Rejected %s %s: %s", request.method, request.url.path, detail)
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"detail": detail})
