import time
from collections.abc import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from .logging import (
    CORRELATION_HEADER,
    extract_correlation_id_from_request,
    get_structured_logger,
    set_correlation_id,
)

logger = get_structured_logger(__name__)


class CorrelationIdMiddleware(BaseHTTPMiddleware):
    """Tags each request with a correlation ID and logs its lifecycle."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        correlation_id = extract_correlation_id_from_request(request)
        set_correlation_id(correlation_id)

        start_time = time.perf_counter()
        logger.info(
            "Request started",
            method=request.method,
            path=request.url.path,
            client_ip=request.client.host if request.client else None,
        )

        try:
            response = await call_next(request)
        except Exception as e:
            logger.error(
                "Request failed",
                method=request.method,
                path=request.url.path,
                duration_ms=round((time.perf_counter() - start_time) * 1000, 2),
                error=str(e),
                exc_info=True,
            )
            raise

        response.headers[CORRELATION_HEADER] = correlation_id
        logger.info(
            "Request completed",
            method=request.method,
            path=request.url.path,
            status_code=response.status_code,
            duration_ms=round((time.perf_counter() - start_time) * 1000, 2),
        )
        return response
