"""API error types and the JSON handlers that render them."""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException

logger = logging.getLogger(__name__)


class ApiError(Exception):
    """Base error carrying an HTTP status and a client-safe message."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    message = 'Error en el servidor'

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.message)
        self.message = message or self.message


class BadRequest(ApiError):
    status_code = status.HTTP_400_BAD_REQUEST
    message = 'Faltan campos'


class Unauthorized(ApiError):
    status_code = status.HTTP_401_UNAUTHORIZED
    message = 'Unauthorized'


class InvalidCredentials(Unauthorized):
    message = 'Credenciales incorrectas'


class InvalidRecovery(Unauthorized):
    message = 'Datos incorrectos'


class InvalidToken(BadRequest):
    message = 'Token inválido'


class InvalidRole(BadRequest):
    message = 'Rol inválido'


class DuplicateEmail(BadRequest):
    message = 'El email ya existe'


class NotFound(ApiError):
    status_code = status.HTTP_404_NOT_FOUND
    message = 'No encontrado'


class ServerError(ApiError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    message = 'Error en el servidor'


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={'error': message})


def register_error_handlers(app: FastAPI) -> None:
    """Render every failure as ``{"error": <message>}``."""

    @app.exception_handler(ApiError)
    async def _handle_api_error(_request: Request, error: ApiError):
        return error_response(error.status_code, error.message)

    @app.exception_handler(HTTPException)
    async def _handle_http_exception(_request: Request, error: HTTPException):
        message = error.detail if isinstance(error.detail, str) else 'Error'
        if error.status_code == status.HTTP_404_NOT_FOUND and message == 'Not Found':
            message = NotFound.message
        response = error_response(error.status_code, message)
        if error.headers:
            response.headers.update(error.headers)
        return response

    @app.exception_handler(RequestValidationError)
    async def _handle_validation_error(_request: Request, error: RequestValidationError):
        logger.debug('Rejected request payload: %s', error.errors())
        return error_response(status.HTTP_400_BAD_REQUEST, BadRequest.message)

    @app.exception_handler(Exception)
    async def _handle_unexpected(_request: Request, error: Exception):
        logger.exception('Unhandled application error', exc_info=error)
        return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, ServerError.message)
