import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from student_api.core.errors import InputError

logger = logging.getLogger(__name__)

INVALID_ID_DETAIL = "Invalid ID"
INVALID_INPUT_DETAIL = "Invalid input"


async def input_error_handler(request: Request, exc: Exception) -> JSONResponse:
    # InputError carries one of the details above; body validation is always "Invalid input"
    detail = str(exc) if isinstance(exc, InputError) and str(exc) else INVALID_INPUT_DETAIL
    logger.info(f"{request.method} {request.url.path} rejected: {detail}")
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"detail": detail})


def register_exception_handlers(app: FastAPI) -> None:
    # FastAPI answers 422 for unparsable bodies by default
    app.add_exception_handler(RequestValidationError, input_error_handler)
    app.add_exception_handler(InputError, input_error_handler)
