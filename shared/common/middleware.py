# shared/common/middleware.py
"""
Request tracing and access-log middleware.
"""

import uuid
import time
import logging
from typing import Callable
from django.http import HttpRequest, HttpResponse

logger = logging.getLogger(__name__)

HEALTH_PATHS = ('/health/', '/ready/')


class RequestIDMiddleware:
    """
    Attach a request id to every request and echo it in X-Request-ID.

    An id forwarded by the gateway is reused so logs can be joined across
    services.
    """

    def __init__(self, get_response: Callable):
        self.get_response = get_response

    def __call__(self, request: HttpRequest) -> HttpResponse:
        request_id = request.headers.get('X-Request-ID') or str(uuid.uuid4())
        request.request_id = request_id

        response = self.get_response(request)
        response['X-Request-ID'] = request_id
        return response


class LoggingMiddleware:
    """
    Log one line when a request starts and one when it completes.

    Responses with a 4xx/5xx status are logged at WARNING.
    """

    def __init__(self, get_response: Callable):
        self.get_response = get_response

    def __call__(self, request: HttpRequest) -> HttpResponse:
        if request.path in HEALTH_PATHS:
            return self.get_response(request)

        start_time = time.monotonic()
        actor = request.headers.get('X-User-ID')

        logger.info(
            f"Request started: {request.method} {request.path}",
            extra={
                'request_id': getattr(request, 'request_id', None),
                'method': request.method,
                'path': request.path,
                'actor': actor,
                'ip_address': get_client_ip(request),
            }
        )

        response = self.get_response(request)
        duration = time.monotonic() - start_time

        log_method = logger.warning if response.status_code >= 400 else logger.info
        log_method(
            f"Request completed: {request.method} {request.path} - {response.status_code}",
            extra={
                'request_id': getattr(request, 'request_id', None),
                'method': request.method,
                'path': request.path,
                'status_code': response.status_code,
                'duration_ms': round(duration * 1000, 2),
                'actor': actor,
            }
        )

        response['X-Response-Time'] = f"{duration * 1000:.2f}ms"
        return response


def get_client_ip(request) -> str:
    """Client IP, honouring the first hop of X-Forwarded-For."""
    meta = getattr(request, 'META', {})
    x_forwarded_for = meta.get('HTTP_X_FORWARDED_FOR')
    if x_forwarded_for:
        return x_forwarded_for.split(',')[0].strip()
    return meta.get('REMOTE_ADDR', '')
