from fastapi.middleware.cors import CORSMiddleware
from starlette.datastructures import Headers
from starlette.responses import Response
from starlette.types import Receive, Scope, Send

from asistencia.core import config

ALLOWED_METHODS = ['GET', 'POST', 'PUT', 'DELETE', 'OPTIONS']
ALLOWED_HEADERS = ['Content-Type', 'Authorization']


class PreflightCORSMiddleware(CORSMiddleware):
    """CORSMiddleware that answers every OPTIONS request with an empty 204.

    CORS headers are only attached when the origin is on the allow-list, so
    the browser enforces the rejection instead of the server.
    """

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope['type'] == 'http' and scope['method'] == 'OPTIONS':
            response = self.options_response(Headers(scope=scope))
            await response(scope, receive, send)
            return

        await super().__call__(scope, receive, send)

    def options_response(self, request_headers: Headers) -> Response:
        headers = {}
        origin = request_headers.get('origin')
        if origin is not None and self.is_allowed_origin(origin=origin):
            headers.update(self.preflight_headers)
            headers['Access-Control-Allow-Origin'] = origin
        return Response(status_code=204, headers=headers)


def cors_options() -> dict:
    return {
        'allow_origins': config.CORS_ORIGINS,
        'allow_credentials': True,
        'allow_methods': ALLOWED_METHODS,
        'allow_headers': ALLOWED_HEADERS,
    }
