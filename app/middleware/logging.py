"""
DocStore API — Request Logging Middleware
==========================================

What:  One access-log line per HTTP request, keyed by the route template and
       the document it touched.
How:   After the response, reads the matched route ("/users/{user_id}") and
       its path parameters from the ASGI scope the router filled in.

Example:
    PUT /users/{user_id} 404 12.3ms [1f2e3d4c] collection=users document=ghost

Request bodies are never logged; they are user documents.
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from app.config import settings
from app.middleware.request_id import request_id_var

logger = logging.getLogger("docstore.access")

# Polled every few seconds by orchestrators
SKIPPED_PATHS = {"/health"}


def level_for_status(status: int) -> int:
    """5xx are our failures, 4xx the caller's; both stay visible at WARNING+."""
    return {5: logging.ERROR, 4: logging.WARNING}.get(status // 100, logging.INFO)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Logs route, status, duration and target document for each request."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.url.path in SKIPPED_PATHS:
            return await call_next(request)

        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = round((time.perf_counter() - started) * 1000, 2)

        # Filled in by the router once a route matched
        route = request.scope.get("route")
        route_path = getattr(route, "path", request.url.path)
        document_id = request.scope.get("path_params", {}).get("user_id")
        collection = settings.users_collection if route_path.startswith("/users") else None

        logger.log(
            level_for_status(response.status_code),
            "%s %s %d %.1fms [%s] collection=%s document=%s",
            request.method,
            route_path,
            response.status_code,
            elapsed_ms,
            request_id_var.get(""),
            collection or "-",
            document_id or "-",
            extra={
                "request_id": request_id_var.get(""),
                "method": request.method,
                "route": route_path,
                "status": response.status_code,
                "duration_ms": elapsed_ms,
                "collection": collection,
                "document_id": document_id,
            },
        )
        return response
