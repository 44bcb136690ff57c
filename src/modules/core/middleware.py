import time
import uuid
from typing import Callable

import structlog
from django.http import HttpRequest, HttpResponse

logger = structlog.get_logger()

REQUEST_ID_HEADER = "X-Request-ID"


class CorrelationIdMiddleware:
    """Middleware that extracts or generates a correlation ID for each request.

    Reads the X-Request-ID header from the incoming request. If absent,
    generates a new UUID4. The ID is bound into structlog's contextvars so
    every log line emitted while serving the request (service, repository,
    geolocation lookup) carries it, and is echoed back to the client via
    the X-Request-ID response header. The context is cleared once the
    response is built so nothing leaks into the next request served by
    the same worker thread.
    """

    def __init__(self, get_response: Callable[[HttpRequest], HttpResponse]) -> None:
        self.get_response = get_response

    def __call__(self, request: HttpRequest) -> HttpResponse:
        cid = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(correlation_id=cid)
        log = logger.bind(method=request.method, path=request.path)

        start = time.monotonic()
        log.info("request_started")
        try:
            response = self.get_response(request)
            log.info(
                "request_finished",
                status_code=response.status_code,
                duration_ms=round((time.monotonic() - start) * 1000, 2),
            )
            response[REQUEST_ID_HEADER] = cid
            return response
        finally:
            structlog.contextvars.clear_contextvars()
