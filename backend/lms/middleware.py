import logging
import time
from typing import Callable

from django.conf import settings
from django.http import HttpRequest, HttpResponse

logger = logging.getLogger('lms.requests')

SAFE_METHODS = ('GET', 'HEAD', 'OPTIONS')


class ApiRequestLoggingMiddleware:
    """Log API calls as structured payloads.

    Writes (photo uploads, approval decisions, registrations) are logged at
    INFO, reads at DEBUG, and anything slower than ``SLOW_REQUEST_LOG_MS`` at
    WARNING regardless of method.
    """

    def __init__(self, get_response: Callable[[HttpRequest], HttpResponse]):
        self.get_response = get_response

    def __call__(self, request: HttpRequest):
        if not request.path.startswith('/api/'):
            return self.get_response(request)

        started = time.perf_counter()
        response = self.get_response(request)
        elapsed_ms = (time.perf_counter() - started) * 1000.0

        slow = (
            bool(getattr(settings, 'SLOW_REQUEST_LOG_ENABLED', True))
            and elapsed_ms >= int(getattr(settings, 'SLOW_REQUEST_LOG_MS', 1200))
        )
        if slow:
            level = logging.WARNING
        elif request.method in SAFE_METHODS:
            level = logging.DEBUG
        else:
            level = logging.INFO

        if logger.isEnabledFor(level):
            logger.log(level, '%s', self.payload(request, response, elapsed_ms, slow))
        return response

    @staticmethod
    def payload(request, response, elapsed_ms, slow):
        match = getattr(request, 'resolver_match', None)
        user = getattr(request, 'user', None)
        return {
            'event': 'slow_api_request' if slow else 'api_request',
            'method': request.method,
            'route': match.view_name if match else None,
            'path': request.path,
            'status': getattr(response, 'status_code', None),
            'duration_ms': round(elapsed_ms, 2),
            'user_id': user.pk if user is not None and user.is_authenticated else None,
        }
