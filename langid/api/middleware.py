"""HTTP middleware: security headers, body size limit, access log."""
from __future__ import annotations

import logging
import time
from typing import Awaitable, Callable

from fastapi import Request, Response, status
from fastapi.responses import JSONResponse

logger = logging.getLogger("langid.api.access")

CallNext = Callable[[Request], Awaitable[Response]]

# Same set helmet sends by default, minus Content-Security-Policy (JSON-only API).
SECURITY_HEADERS = {
    "Cross-Origin-Opener-Policy": "same-origin",
    "Cross-Origin-Resource-Policy": "same-origin",
    "Origin-Agent-Cluster": "?1",
    "Referrer-Policy": "no-referrer",
    "Strict-Transport-Security": "max-age=31536000; includeSubDomains",
    "X-Content-Type-Options": "nosniff",
    "X-DNS-Prefetch-Control": "off",
    "X-Download-Options": "noopen",
    "X-Frame-Options": "SAMEORIGIN",
    "X-Permitted-Cross-Domain-Policies": "none",
    "X-XSS-Protection": "0",
}


async def security_headers_middleware(request: Request, call_next: CallNext) -> Response:
    response = await call_next(request)
    for name, value in SECURITY_HEADERS.items():
        response.headers.setdefault(name, value)
    return response


def body_limit_middleware(limit: int) -> Callable[[Request, CallNext], Awaitable[Response]]:
    """Reject request bodies larger than ``limit`` bytes with 413.

    A declared Content-Length is checked up front. Bodies sent without one
    (chunked transfer) are read and measured before the route sees them.
    """

    async def middleware(request: Request, call_next: CallNext) -> Response:
        declared = request.headers.get("content-length")
        if declared is not None:
            try:
                size = int(declared)
            except ValueError:
                return JSONResponse(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    content={"error": "Invalid Content-Length header."},
                )
        else:
            size = len(await request.body())
        if size > limit:
            return _too_large()
        return await call_next(request)

    return middleware


def _too_large() -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
        content={"error": "Request body is too large."},
    )


async def access_log_middleware(request: Request, call_next: CallNext) -> Response:
    started = time.perf_counter()
    response = await call_next(request)
    elapsed_ms = (time.perf_counter() - started) * 1000
    logger.info(
        "%s %s -> %d (%.1f ms)",
        request.method, request.url.path, response.status_code, elapsed_ms,
        extra={
            "method": request.method,
            "path": request.url.path,
            "status": response.status_code,
            "duration_ms": round(elapsed_ms, 2),
            "client": request.client.host if request.client else None,
        },
    )
    return response
