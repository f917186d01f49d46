# MIDDLEWARE DE LOGGING DE PETICIONES
# Registra cada peticion con su request id, estado y tiempo de respuesta

import time
import json
import uuid
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from language_platform.core.logging_config import get_api_logger, log_api_request


def generate_request_id() -> str:
    return f'req_{uuid.uuid4().hex[:12]}'


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    def __init__(self, app):
        super().__init__(app)
        self.logger = get_api_logger()

    async def dispatch(self, request: Request, call_next):
        request_id = generate_request_id()
        request.state.request_id = request_id
        started = time.perf_counter()

        try:
            response = await call_next(request)
        except Exception:
            self.logger.exception(
                f'Unhandled error: {request.method} {request.url.path}',
                extra={'request_id': request_id}
            )
            response = Response(
                content=json.dumps({'error': 'Internal server error', 'request_id': request_id}),
                status_code=500,
                media_type='application/json'
            )

        log_api_request(
            self.logger,
            method=request.method,
            endpoint=request.url.path,
            status_code=response.status_code,
            response_time_ms=int((time.perf_counter() - started) * 1000),
            user_id=getattr(request.state, 'user_id', None),
            request_id=request_id,
        )
        response.headers['X-Request-ID'] = request_id
        return response
