"""Route tests."""

import pytest
from roadrouter_core.errors import (
    InvalidMethodError,
    InvalidTargetError,
    RegistrationClosedError,
    TargetResolutionError,
)
from roadrouter_core.http.request import Request
from roadrouter_core.routing.resolver import ControllerRegistry, ImportResolver
from roadrouter_core.routing.route import CallableTarget, ControllerTarget, Route


class UserController:
    """Controller used for resolution tests."""

    def show(self, id):
        return f"user {id}"

    not_callable = "nope"


class BrokenController:
    """Controller that cannot be instantiated."""

    def __init__(self, dependency):
        self.dependency = dependency

    def show(self):
        return "never"


@pytest.fixture
def user_route():
    return Route("/users", ["GET", "POST"], lambda: "Users")


@pytest.fixture
def specific_user_route():
    return Route("/users/{id}<\\d+>", ["GET", "PUT", "DELETE"], lambda id: "User!")


class TestRouteConstruction:
    """Test Route creation."""

    def test_methods_uppercased(self):
        """Test methods are normalized to uppercase."""
        route = Route("/users", ["get", "Post"], lambda: None)
        assert route.methods == ("GET", "POST")

    def test_single_method_string(self):
        """Test a single method can be passed as a string."""
        route = Route("/users", "GET", lambda: None)
        assert route.methods == ("GET",)

    def test_invalid_method(self):
        """Test unsupported methods are rejected."""
        with pytest.raises(InvalidMethodError):
            Route("/users", ["FETCH"], lambda: None)

    def test_empty_methods(self):
        """Test a route needs at least one method."""
        with pytest.raises(InvalidMethodError):
            Route("/users", [], lambda: None)

    def test_restricted_vocabulary(self):
        """Test the allowed vocabulary can be narrowed."""
        with pytest.raises(InvalidMethodError):
            Route("/users", ["PATCH"], lambda: None, allowed_methods=["GET", "POST"])

    def test_target_variants(self):
        """Test callables and controller references are both accepted."""
        assert isinstance(Route("/a", "GET", lambda: None).target, CallableTarget)
        assert isinstance(Route("/a", "GET", "UserController@show").target, ControllerTarget)

    def test_invalid_target(self):
        """Test targets must be callable or strings."""
        with pytest.raises(InvalidTargetError):
            Route("/a", "GET", 42)

    def test_pattern_kept(self, specific_user_route):
        """Test the source pattern is kept for introspection."""
        assert specific_user_route.pattern == "/users/{id}<\\d+>"
        assert specific_user_route.parameter_names == ["id"]


class TestRouteMatching:
    """Test Route.check_for_match."""

    def test_match_valid_routes(self, user_route, specific_user_route):
        """Test matching paths and methods."""
        assert user_route.check_for_match(Request("GET", "/users"))
        assert user_route.check_for_match(Request("POST", "/users"))
        assert specific_user_route.check_for_match(Request("GET", "/users/1"))
        assert specific_user_route.check_for_match(Request("PUT", "/users/1"))
        assert specific_user_route.check_for_match(Request("DELETE", "/users/123456"))

    def test_not_match_invalid_routes(self, user_route, specific_user_route):
        """Test mismatching paths and methods."""
        assert user_route.check_for_match(Request("GET", "/users/invalid")) is None
        assert user_route.check_for_match(Request("DELETE", "/users")) is None
        assert specific_user_route.check_for_match(Request("GET", "/users")) is None
        assert specific_user_route.check_for_match(Request("POST", "/users/123")) is None
        assert specific_user_route.check_for_match(Request("GET", "/users/a-string")) is None

    def test_extracts_variables(self, specific_user_route):
        """Test captured values are returned by key."""
        match = specific_user_route.check_for_match(Request("GET", "/users/42"))
        assert dict(match) == {"id": "42"}
        assert match.route is specific_user_route

    def test_match_without_captures_is_truthy(self, user_route):
        """Test an empty match is distinct from no match."""
        match = user_route.check_for_match(Request("GET", "/users"))
        assert match is not None
        assert len(match) == 0
        assert bool(match) is True

    def test_request_method_case_insensitive(self, user_route):
        """Test lowercase request methods still match."""
        assert user_route.check_for_match(Request("get", "/users"))

    def test_literal_component_equality(self):
        """Test literal routes match only identical components."""
        route = Route("/api/v1/health", "GET", lambda: None)
        assert route.check_for_match(Request("GET", "/api/v1/health/"))
        assert route.check_for_match(Request("GET", "/api/v1/healthz")) is None
        assert route.check_for_match(Request("GET", "/api/v1")) is None

    def test_query_string_ignored(self, specific_user_route):
        """Test the query string does not take part in matching."""
        match = specific_user_route.check_for_match(Request("GET", "/users/7?expand=1"))
        assert dict(match) == {"id": "7"}

    def test_root_pattern(self):
        """Test the empty pattern matches only the root path."""
        route = Route("/", "GET", lambda: None)
        assert route.check_for_match(Request("GET", "/"))
        assert route.check_for_match(Request("GET", "/users")) is None


class TestRouteTarget:
    """Test Route.get_target."""

    def test_inline_callable(self):
        """Test callables resolve to themselves."""
        func = lambda: "hi"
        assert Route("/a", "GET", func).get_target() is func

    def test_controller_method(self):
        """Test controller references resolve to bound methods."""
        registry = ControllerRegistry([UserController])
        target = Route("/a", "GET", "UserController@show").get_target(registry)
        assert target(id="5") == "user 5"

    def test_unknown_controller(self):
        """Test unknown controllers fail resolution."""
        route = Route("/a", "GET", "MissingController@show")
        with pytest.raises(TargetResolutionError):
            route.get_target(ControllerRegistry())

    def test_missing_method(self):
        """Test missing or non-callable methods fail resolution."""
        registry = ControllerRegistry([UserController])
        with pytest.raises(TargetResolutionError):
            Route("/a", "GET", "UserController@destroy").get_target(registry)
        with pytest.raises(TargetResolutionError):
            Route("/a", "GET", "UserController@not_callable").get_target(registry)

    def test_not_instantiable(self):
        """Test controllers needing constructor arguments fail resolution."""
        registry = ControllerRegistry([BrokenController])
        with pytest.raises(TargetResolutionError):
            Route("/a", "GET", "BrokenController@show").get_target(registry)

    def test_malformed_reference(self):
        """Test references without "@" fail at resolution, not registration."""
        route = Route("/a", "GET", "UserController")
        with pytest.raises(TargetResolutionError):
            route.get_target(ControllerRegistry([UserController]))

    def test_no_resolver(self):
        """Test controller references need a resolver."""
        with pytest.raises(TargetResolutionError):
            Route("/a", "GET", "UserController@show").get_target()


class TestRouteMiddleware:
    """Test middleware alias bookkeeping."""

    def test_aliases_keep_order(self):
        """Test aliases are kept in insertion order."""
        route = Route("/a", "GET", lambda: None)
        route.add_middleware("auth").add_middleware("log", "cors")
        assert route.middleware_aliases == ["auth", "log", "cors"]

    def test_locked_route(self):
        """Test aliases cannot be added once the route is locked."""
        route = Route("/a", "GET", lambda: None)
        route.lock()
        with pytest.raises(RegistrationClosedError):
            route.add_middleware("auth")


class TestResolvers:
    """Test controller resolvers."""

    def test_registry_names(self):
        """Test registry registration under explicit names."""
        registry = ControllerRegistry().register(UserController, name="Users")
        assert "Users" in registry
        assert registry.names() == ["Users"]
        assert registry.resolve("Users") is UserController

    def test_import_resolver(self):
        """Test dotted names are imported."""
        from collections import OrderedDict

        assert ImportResolver().resolve("collections.OrderedDict") is OrderedDict
        assert ImportResolver("collections").resolve("OrderedDict") is OrderedDict

    def test_import_resolver_failures(self):
        """Test import failures become resolution errors."""
        resolver = ImportResolver()
        with pytest.raises(TargetResolutionError):
            resolver.resolve("OrderedDict")
        with pytest.raises(TargetResolutionError):
            resolver.resolve("no_such_module_here.Thing")
        with pytest.raises(TargetResolutionError):
            resolver.resolve("collections.no_such_class")
