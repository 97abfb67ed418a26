"""FastAPI middleware for request tracing and metrics"""

import uuid
import time
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from household_budget.infrastructure.observability.metrics import record_request

# Scrapes are not worth timing
UNTRACKED_PATHS = {"/metrics"}
UNMATCHED_ROUTE = "unmatched"


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Tag each request with an id, reusing the caller's X-Request-ID when sent"""

    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        request.state.request_id = request_id

        response = await call_next(request)
        response.headers["X-Request-ID"] = request_id
        return response


class MetricsMiddleware(BaseHTTPMiddleware):
    """Time calculation requests, labelled by route template"""

    async def dispatch(self, request: Request, call_next):
        if request.url.path in UNTRACKED_PATHS:
            return await call_next(request)

        start_time = time.time()
        response = await call_next(request)

        record_request(request.method, route_label(request), response.status_code, time.time() - start_time)

        return response


def route_label(request: Request) -> str:
    """
    Full route template for the matched endpoint, e.g. /v1/debt/strategy.

    Routers included with a prefix may report their path relative to the
    prefix, which is then carried in root_path. Requests matching no route
    share one label to keep label cardinality bounded.
    """
    route = request.scope.get("route")
    path = getattr(route, "path", None)
    if path is None:
        return UNMATCHED_ROUTE

    root_path = request.scope.get("root_path", "")
    if root_path and not path.startswith(root_path):
        path = root_path + path

    # Parameter-free routes: the URL itself is the template
    if "{" not in path and path != request.url.path and request.url.path.endswith(path):
        path = request.url.path
    return path
