"""Middleware tests."""

import logging

import pytest
from roadrouter_core.dispatch.handler import RequestHandler
from roadrouter_core.http.request import Request
from roadrouter_core.http.response import Response
from roadrouter_core.middleware.base import (
    Middleware,
    PassthroughMiddleware,
    is_middleware_type,
)
from roadrouter_core.middleware.cors import CORSConfig, CORSMiddleware
from roadrouter_core.middleware.headers import HeadersMiddleware
from roadrouter_core.middleware.logging import LoggingConfig, LoggingMiddleware
from roadrouter_core.routing.router import Router


def ok(request=None):
    return Response.json({"ok": True})


class TestIsMiddlewareType:
    """Test middleware type validation."""

    def test_subclass(self):
        """Test concrete Middleware subclasses qualify."""
        assert is_middleware_type(PassthroughMiddleware)
        assert is_middleware_type(LoggingMiddleware)

    def test_duck_typed(self):
        """Test any class with handle(request, next) qualifies."""

        class Duck:
            def handle(self, request, next):
                return next(request)

        class Variadic:
            def handle(self, *args):
                return None

        assert is_middleware_type(Duck)
        assert is_middleware_type(Variadic)

    def test_rejected(self):
        """Test instances, abstract classes and wrong signatures."""

        class TooMany:
            def handle(self, request, next, extra):
                return None

        class NotCallable:
            handle = "handle"

        assert not is_middleware_type(PassthroughMiddleware())
        assert not is_middleware_type(Middleware)
        assert not is_middleware_type(TooMany)
        assert not is_middleware_type(NotCallable)
        assert not is_middleware_type("PassthroughMiddleware")

    def test_passthrough(self):
        """Test the passthrough middleware forwards the request."""
        request = Request("GET", "/")
        seen = []
        PassthroughMiddleware().handle(request, lambda r: seen.append(r))
        assert seen == [request]


class TestLoggingMiddleware:
    """Test LoggingMiddleware."""

    def test_request_id(self):
        """Test the request id is shared by context and response header."""
        router = Router()
        router.register_middleware("log", LoggingMiddleware)
        router.get("/users", lambda request: Response.json(request.context)).add_middleware("log")

        response = RequestHandler(router).handle(Request("GET", "/users"))

        request_id = response.get_header("X-Request-Id")
        assert len(request_id) == 8
        assert response.body == {"request_id": request_id}

    def test_logs_both_directions(self, caplog):
        """Test inbound and outbound lines are logged."""
        caplog.set_level(logging.INFO, logger="roadrouter_core")
        LoggingMiddleware().handle(Request("GET", "/users?page=2"), ok)

        messages = [r.getMessage() for r in caplog.records]
        assert any("--> GET /users" in m for m in messages)
        assert any("<-- 200" in m for m in messages)

    def test_logs_failures(self, caplog):
        """Test the outbound line is logged when a deeper layer raises."""
        caplog.set_level(logging.INFO, logger="roadrouter_core")

        def failing(request):
            raise ValueError("boom")

        with pytest.raises(ValueError):
            LoggingMiddleware().handle(Request("GET", "/users"), failing)

        outbound = [r for r in caplog.records if "<-- ValueError" in r.getMessage()]
        assert outbound and outbound[0].levelno == logging.WARNING

    def test_skip_paths(self, caplog):
        """Test skipped paths are not logged or tagged."""
        caplog.set_level(logging.INFO, logger="roadrouter_core")
        middleware = LoggingMiddleware(LoggingConfig(skip_paths=["/health"]))

        response = middleware.handle(Request("GET", "/health"), ok)

        assert "X-Request-Id" not in response.headers
        assert caplog.records == []


class TestCORSMiddleware:
    """Test CORSMiddleware."""

    def test_preflight(self):
        """Test preflight requests are answered without calling next."""
        request = Request(
            "OPTIONS",
            "/users",
            headers={"Origin": "https://app.example", "Access-Control-Request-Method": "POST"},
        )

        def never(request):
            pytest.fail("preflight reached the target")

        response = CORSMiddleware().handle(request, never)

        assert response.status == 204
        assert response.get_header("Access-Control-Allow-Origin") == "*"
        assert "POST" in response.get_header("Access-Control-Allow-Methods")
        assert response.get_header("Access-Control-Max-Age") == "86400"

    def test_simple_request(self):
        """Test allow-origin is added to normal responses."""
        request = Request("GET", "/users", headers={"Origin": "https://app.example"})
        response = CORSMiddleware().handle(request, ok)

        assert response.status == 200
        assert response.headers["Access-Control-Allow-Origin"] == "*"

    def test_credentials_echo_origin(self):
        """Test credentialed policies echo the origin."""
        config = CORSConfig(
            allow_origins=["https://app.example"],
            allow_credentials=True,
            expose_headers=["X-Request-Id"],
        )
        request = Request("GET", "/users", headers={"Origin": "https://app.example"})
        response = CORSMiddleware(config).handle(request, ok)

        assert response.headers["Access-Control-Allow-Origin"] == "https://app.example"
        assert response.headers["Access-Control-Allow-Credentials"] == "true"
        assert response.headers["Access-Control-Expose-Headers"] == "X-Request-Id"

    def test_disallowed_origin(self):
        """Test unknown origins get no CORS headers."""
        config = CORSConfig(allow_origins=["https://app.example"])
        request = Request("GET", "/users", headers={"Origin": "https://evil.example"})
        response = CORSMiddleware(config).handle(request, ok)

        assert "Access-Control-Allow-Origin" not in response.headers

    def test_no_origin(self):
        """Test same-origin requests are left alone."""
        response = CORSMiddleware().handle(Request("GET", "/users"), ok)
        assert "Access-Control-Allow-Origin" not in response.headers


class TestHeadersMiddleware:
    """Test HeadersMiddleware."""

    def test_response_headers(self):
        """Test class-level response headers are applied."""

        class SecurityHeaders(HeadersMiddleware):
            add_response = {"X-Frame-Options": "DENY"}
            remove_response = ["Server"]

        def target(request):
            return Response.json({}, headers={"Server": "roadrouter"})

        response = SecurityHeaders().handle(Request("GET", "/"), target)

        assert response.headers["X-Frame-Options"] == "DENY"
        assert "Server" not in response.headers

    def test_request_headers(self):
        """Test the inner layers receive the rewritten request."""
        middleware = HeadersMiddleware(
            add_request_headers={"X-Internal": "1"},
            remove_request_headers=["Cookie"],
        )
        original = Request("GET", "/", headers={"Cookie": "session=abc", "Accept": "*/*"})
        seen = []

        middleware.handle(original, lambda request: seen.append(request) or ok())

        assert seen[0].headers == {"Accept": "*/*", "X-Internal": "1"}
        assert original.headers == {"Cookie": "session=abc", "Accept": "*/*"}

    def test_registered_by_alias(self):
        """Test header middleware works through the router."""

        class NoSniff(HeadersMiddleware):
            add_response = {"X-Content-Type-Options": "nosniff"}

        router = Router()
        router.register_middleware("nosniff", NoSniff)
        router.get("/", lambda: "home").add_middleware("nosniff")

        response = RequestHandler(router).handle(Request("GET", "/"))
        assert response.headers["X-Content-Type-Options"] == "nosniff"
