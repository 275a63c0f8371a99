"""HTTP request logging middleware."""

import time
from collections.abc import Awaitable, Callable

from fastapi import Request, Response

from src.core.logging import get_logger

logger = get_logger("src.api.requests")


async def log_requests(
    request: Request, call_next: Callable[[Request], Awaitable[Response]]
) -> Response:
    """METHOD path - status - elapsed ms - client"""
    start = time.perf_counter()
    client = request.client.host if request.client else "-"
    try:
        response = await call_next(request)
    except Exception:
        elapsed_ms = (time.perf_counter() - start) * 1000
        logger.exception(
            "%s %s - 500 - %.1fms - %s",
            request.method,
            request.url.path,
            elapsed_ms,
            client,
        )
        raise

    elapsed_ms = (time.perf_counter() - start) * 1000
    log = logger.warning if response.status_code >= 400 else logger.info
    log(
        "%s %s - %d - %.1fms - %s",
        request.method,
        request.url.path,
        response.status_code,
        elapsed_ms,
        client,
    )
    return response
