"""Unit tests for middleware."""
import json

import pytest
from fastapi import APIRouter
from unittest.mock import Mock

from scanbridge.api.router import ROUTERS, function_methods
from scanbridge.middleware.function_gate import FunctionGateMiddleware
from scanbridge.middleware.logging import LoggingMiddleware


def make_request(method="GET", path="/test", headers=None):
    mock_request = Mock()
    mock_request.state = Mock(spec=[])
    mock_request.method = method
    mock_request.url = Mock()
    mock_request.url.path = path
    mock_request.client = Mock()
    mock_request.client.host = "127.0.0.1"
    mock_request.query_params = {}
    mock_request.headers = headers or {}
    return mock_request


def make_response(status_code=200):
    mock_response = Mock()
    mock_response.headers = {}
    mock_response.status_code = status_code
    return mock_response


@pytest.mark.unit
class TestLoggingMiddleware:
    """Test logging middleware."""

    @pytest.mark.asyncio
    async def test_request_id_added_to_state_and_header(self):
        """Test that request ID is set on request.state and echoed in the response."""
        mock_request = make_request()

        async def mock_call_next(request):
            # request_id is set before the request is processed
            assert isinstance(request.state.request_id, str)
            assert len(request.state.request_id) > 0
            return make_response()

        middleware = LoggingMiddleware(Mock())
        response = await middleware.dispatch(mock_request, mock_call_next)

        assert response.headers["X-Request-ID"] == mock_request.state.request_id

    @pytest.mark.asyncio
    async def test_incoming_request_id_is_reused(self):
        """A scanner retry keeps the request id it sent."""
        mock_request = make_request(method="POST", path="/addScanRecord", headers={"X-Request-ID": "scan-retry-1"})

        async def mock_call_next(request):
            return make_response()

        middleware = LoggingMiddleware(Mock())
        response = await middleware.dispatch(mock_request, mock_call_next)

        assert response.headers["X-Request-ID"] == "scan-retry-1"

    @pytest.mark.asyncio
    async def test_request_id_unique_across_requests(self):
        """Test that each request gets a unique request ID."""
        middleware = LoggingMiddleware(Mock())

        async def mock_call_next(request):
            return make_response()

        response1 = await middleware.dispatch(make_request(path="/test1"), mock_call_next)
        response2 = await middleware.dispatch(make_request(path="/test2"), mock_call_next)

        assert response1.headers["X-Request-ID"] != response2.headers["X-Request-ID"]

    @pytest.mark.asyncio
    async def test_exceptions_propagate(self):
        async def mock_call_next(request):
            raise RuntimeError("boom")

        middleware = LoggingMiddleware(Mock())
        with pytest.raises(RuntimeError):
            await middleware.dispatch(make_request(), mock_call_next)


@pytest.mark.unit
class TestFunctionGateMiddleware:
    """Test CORS and method gating for function routes."""

    ROUTES = {"/addScanRecord": {"POST"}, "/deleteTestEvent": {"GET", "DELETE"}}

    @pytest.mark.asyncio
    async def test_options_is_204_with_cors(self):
        middleware = FunctionGateMiddleware(Mock(), routes=self.ROUTES)

        async def mock_call_next(request):
            raise AssertionError("preflight must not reach the route")

        response = await middleware.dispatch(make_request("OPTIONS", "/addScanRecord"), mock_call_next)

        assert response.status_code == 204
        assert response.headers["Access-Control-Allow-Origin"] == "*"
        assert response.headers["Access-Control-Allow-Methods"] == "POST, OPTIONS"
        assert response.headers["Access-Control-Allow-Headers"] == "Content-Type"

    @pytest.mark.asyncio
    async def test_undeclared_method_is_405(self):
        middleware = FunctionGateMiddleware(Mock(), routes=self.ROUTES)

        async def mock_call_next(request):
            raise AssertionError("wrong method must not reach the route")

        response = await middleware.dispatch(make_request("GET", "/addScanRecord"), mock_call_next)

        assert response.status_code == 405
        assert json.loads(response.body) == {"error": "Method not allowed"}
        assert response.headers["Access-Control-Allow-Origin"] == "*"

    @pytest.mark.asyncio
    async def test_declared_method_gets_cors_headers(self):
        middleware = FunctionGateMiddleware(Mock(), routes=self.ROUTES)

        async def mock_call_next(request):
            return make_response()

        response = await middleware.dispatch(make_request("DELETE", "/deleteTestEvent"), mock_call_next)

        assert response.headers["Access-Control-Allow-Methods"] == "DELETE, GET, OPTIONS"

    @pytest.mark.asyncio
    async def test_unknown_path_passes_through(self):
        middleware = FunctionGateMiddleware(Mock(), routes=self.ROUTES)
        sentinel = make_response()

        async def mock_call_next(request):
            return sentinel

        response = await middleware.dispatch(make_request("GET", "/health"), mock_call_next)

        assert response is sentinel
        assert response.headers == {}

    @pytest.mark.asyncio
    async def test_restricted_origin_is_echoed(self):
        middleware = FunctionGateMiddleware(
            Mock(), routes=self.ROUTES, allow_origins=["https://admin.example.edu"]
        )
        request = make_request("OPTIONS", "/addScanRecord", headers={"origin": "https://admin.example.edu"})

        response = await middleware.dispatch(request, None)

        assert response.headers["Access-Control-Allow-Origin"] == "https://admin.example.edu"
        assert response.headers["Vary"] == "Origin"

    @pytest.mark.asyncio
    async def test_foreign_origin_gets_no_allow_origin(self):
        middleware = FunctionGateMiddleware(
            Mock(), routes=self.ROUTES, allow_origins=["https://admin.example.edu"]
        )
        request = make_request("OPTIONS", "/addScanRecord", headers={"origin": "https://evil.example"})

        response = await middleware.dispatch(request, None)

        assert "Access-Control-Allow-Origin" not in response.headers

    @pytest.mark.asyncio
    async def test_unhandled_error_is_500_with_cors(self):
        middleware = FunctionGateMiddleware(Mock(), routes=self.ROUTES)

        async def mock_call_next(request):
            raise RuntimeError("boom")

        response = await middleware.dispatch(make_request("POST", "/addScanRecord"), mock_call_next)

        assert response.status_code == 500
        assert json.loads(response.body) == {"error": "Internal server error"}
        assert response.headers["Access-Control-Allow-Origin"] == "*"
        assert response.headers["Access-Control-Allow-Methods"] == "POST, OPTIONS"


@pytest.mark.unit
class TestFunctionMethods:
    """Test the path -> methods map the gate is built from."""

    def test_every_endpoint_router_is_mapped(self):
        methods = function_methods(*ROUTERS)

        assert len(methods) == 14
        assert methods["/getEvents"] == {"GET"}
        assert methods["/addScanRecord"] == {"POST"}
        assert methods["/updateEvent"] == {"PUT"}
        assert methods["/deleteTestEvent"] == {"GET", "DELETE"}

    def test_routers_are_merged(self):
        first = APIRouter()
        second = APIRouter()

        @first.get("/shared")
        async def read():
            return {}

        @second.delete("/shared")
        async def remove():
            return {}

        assert function_methods(first, second) == {"/shared": {"GET", "DELETE"}}
