"""
Request logging middleware.

Adds a correlation id and the processing time to every response. Each
request is logged once, with the matched route template (so
/api/tracks/12/positions and /api/tracks/40/positions group together)
and the id of the user the session resolved to.
"""

import time
import uuid
import logging
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

logger = logging.getLogger("tracklog.requests")


def route_template(request: Request) -> str:
    """Path template of the matched route, the raw path when nothing matched."""
    route = request.scope.get("route")
    return getattr(route, "path", None) or request.url.path


class ObservabilityMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next) -> Response:
        correlation_id = request.headers.get("X-Correlation-ID", str(uuid.uuid4()))
        start_time = time.time()

        response = await call_next(request)

        process_time = (time.time() - start_time) * 1000  # ms
        response.headers["X-Correlation-ID"] = correlation_id
        response.headers["X-Process-Time"] = str(process_time)

        log_data = {
            "correlation_id": correlation_id,
            "method": request.method,
            "route": route_template(request),
            "user_id": getattr(request.state, "user_id", None),
            "status_code": response.status_code,
            "duration_ms": round(process_time, 2),
        }

        if response.status_code >= 500:
            logger.error("%s %s failed", request.method, log_data["route"], extra=log_data)
        elif response.status_code >= 400:
            logger.warning("%s %s rejected", request.method, log_data["route"], extra=log_data)
        else:
            logger.info("%s %s served", request.method, log_data["route"], extra=log_data)

        return response
