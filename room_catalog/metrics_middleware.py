"""
Metrics middleware for the room catalog.

Records request count and duration for every route except the metrics
endpoint itself and static assets.
"""

import time
from typing import Callable

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

EXCLUDED_PREFIXES = ("/metrics", "/static/")


class PrometheusMiddleware(BaseHTTPMiddleware):
    """Track Prometheus request metrics by method, route and status code."""

    def __init__(self, app, track_func: Callable):
        """
        Initialize the middleware.

        Args:
            app: FastAPI application
            track_func: Called as (method, endpoint, status_code, duration)
        """
        super().__init__(app)
        self.track_func = track_func

    async def dispatch(self, request: Request, call_next):
        path = request.url.path
        if path.startswith(EXCLUDED_PREFIXES):
            return await call_next(request)

        start_time = time.perf_counter()
        response = await call_next(request)
        duration = time.perf_counter() - start_time

        # Use the route template so per-id paths share one label
        route = request.scope.get("route")
        endpoint = getattr(route, "path", path)

        self.track_func(
            method=request.method,
            endpoint=endpoint,
            status_code=response.status_code,
            duration=duration,
        )

        return response
