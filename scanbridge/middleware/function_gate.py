"""CORS and method gating for the function-style routes.

Each route behaves like a standalone HTTP function: ``OPTIONS`` answers 204,
methods the route does not declare answer 405 with a JSON error, and every
response carries the CORS headers for that route, including the 500 that
replaces an unhandled error.
"""
from typing import Callable, Dict, Iterable, List, Set

import structlog
from fastapi import Request, Response
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from scanbridge.core.errors import MethodNotAllowedError

logger = structlog.get_logger(__name__)

ALLOW_HEADERS = "Content-Type"


class FunctionGateMiddleware(BaseHTTPMiddleware):
    """
    Args:
        routes: path -> methods the path accepts
        allow_origins: allowed origins; ``["*"]`` allows any
    """

    def __init__(self, app: ASGIApp, routes: Dict[str, Set[str]], allow_origins: Iterable[str] = ("*",)):
        super().__init__(app)
        self.routes = routes
        self.allow_origins: List[str] = list(allow_origins)

    def cors_headers(self, request: Request, methods: Set[str]) -> Dict[str, str]:
        advertised = sorted(m for m in methods if m not in ("HEAD", "OPTIONS")) + ["OPTIONS"]
        headers = {
            "Access-Control-Allow-Methods": ", ".join(advertised),
            "Access-Control-Allow-Headers": ALLOW_HEADERS,
        }
        if "*" in self.allow_origins:
            headers["Access-Control-Allow-Origin"] = "*"
        else:
            origin = request.headers.get("origin")
            if origin in self.allow_origins:
                headers["Access-Control-Allow-Origin"] = origin
                headers["Vary"] = "Origin"
        return headers

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        methods = self.routes.get(request.url.path)
        if methods is None:
            return await call_next(request)

        headers = self.cors_headers(request, methods)
        if request.method == "OPTIONS":
            return Response(status_code=204, headers=headers)
        if request.method not in methods:
            error = MethodNotAllowedError()
            return JSONResponse(error.to_body(), status_code=error.status_code, headers=headers)

        try:
            response = await call_next(request)
        except Exception as exc:
            logger.exception("unhandled_exception", path=request.url.path, error_type=type(exc).__name__)
            return JSONResponse({"error": "Internal server error"}, status_code=500, headers=headers)
        response.headers.update(headers)
        return response
