"""
➡️ But : Taxonomie des erreurs métier + réponse d'erreur centralisée.

Les services lèvent des erreurs typées (NotFoundError, ForbiddenError...) ;
les handlers enregistrés ici les transforment tous en {"message": ...}
avec le bon code HTTP.

🔹 Avantages :

Les services ne connaissent pas HTTP.

Un seul format d'erreur pour tout le client.
"""

import logging
from typing import Iterable, List, Sequence, Tuple

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


class AppError(Exception):
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class ValidationError(AppError):
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, fields: Sequence[Tuple[str, str]]):
        # fields : liste de (raison, champ)
        self.fields: List[Tuple[str, str]] = list(fields)
        super().__init__(", ".join(f"{reason}: {field}" for reason, field in self.fields))


class NotAuthorizedError(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED


class ForbiddenError(AppError):
    status_code = status.HTTP_403_FORBIDDEN


class NotFoundError(AppError):
    status_code = status.HTTP_404_NOT_FOUND


class ConflictError(AppError):
    status_code = status.HTTP_409_CONFLICT


class InternalError(AppError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


# -----------------------------
# Adaptateur validation -> erreur typée
# -----------------------------
def _field_name(loc: Iterable) -> str:
    # ("body", "cat_name") -> "cat_name" ; ("path", "cat_id") -> "cat_id"
    parts = [str(p) for p in loc if p not in ("body", "query", "path", "header", "cookie", "form")]
    return ".".join(parts) if parts else "body"


def validation_error_from_request(exc: RequestValidationError) -> ValidationError:
    return ValidationError([(err.get("msg", "Invalid value"), _field_name(err.get("loc", ()))) for err in exc.errors()])


def _message(exc: AppError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"message": exc.message})


# -----------------------------
# Handlers
# -----------------------------
def register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(AppError)
    async def handle_app_error(request: Request, exc: AppError):
        if exc.status_code >= 500:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
        return _message(exc)

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        return _message(validation_error_from_request(exc))

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(request: Request, exc: StarletteHTTPException):
        return JSONResponse(status_code=exc.status_code, content={"message": str(exc.detail)}, headers=exc.headers)

    @app.exception_handler(Exception)
    async def handle_unexpected(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return _message(InternalError(str(exc)))
