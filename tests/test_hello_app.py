"""End-to-end tests for the Hello example app."""

import pytest

from pipeweave.config import Settings
from pipeweave.container import Container
from pipeweave.errors import ConfigurationError
from pipeweave.http.request import Request
from pipeweave.http.response import Response
from pipeweave.middleware.dispatch import DISPATCH_ATTRIBUTE, Controller, Dispatch, Pipeline
from pipeweave.routing.adaptor import ROUTE_ATTRIBUTE, RouteMap
from pipeweave.routing.step import RouterStep
from pipeweave.testing import TestClient

from hello_app.app import (
    ENVIRONMENT_VARIABLE,
    configure_container,
    create_app,
    provide_middleware_pipeline,
    provide_route_configuration,
)
from hello_app.controller import Hello
from hello_app.middleware import UppercaseOwner


@pytest.fixture
def app():
    return create_app(settings={"HelloMessage": "wonderful"})


class TestGreeting:
    async def test_owner_from_path_is_uppercased(self, app) -> None:
        async with TestClient(app) as client:
            response = await client.get("/wibble")

        assert response.status == 200
        assert response.text == "Hello, wonderful WIBBLE!"
        assert response.content_type.startswith("text/plain")

    async def test_default_owner(self, app) -> None:
        async with TestClient(app) as client:
            response = await client.get("/")
        assert response.text == "Hello, wonderful WORLD!"

    async def test_message_comes_from_settings(self) -> None:
        app = create_app(settings={"HelloMessage": "Greetings"})
        async with TestClient(app) as client:
            response = await client.get("/")
        assert response.text == "Hello, Greetings WORLD!"

    @pytest.mark.parametrize(
        ("path", "expected"),
        [
            ("/alice", "Hello, wonderful ALICE!"),
            ("/Bob", "Hello, wonderful BOB!"),
            ("/already-LOUD", "Hello, wonderful ALREADY-LOUD!"),
        ],
    )
    async def test_owner_segments(self, app, path: str, expected: str) -> None:
        async with TestClient(app) as client:
            response = await client.get(path)
        assert response.text == expected

    async def test_repeated_requests_are_identical(self, app) -> None:
        async with TestClient(app) as client:
            first = await client.get("/wibble")
            second = await client.get("/wibble")
        assert first.text == second.text

    async def test_extra_segment_not_found(self, app) -> None:
        async with TestClient(app) as client:
            response = await client.get("/a/b")
        assert response.status == 404

    async def test_post_not_allowed(self, app) -> None:
        async with TestClient(app) as client:
            response = await client.post("/wibble")

        assert response.status == 405
        assert response.header("allow") == "GET"


class TestSettingsFiles:
    def test_production_message(self) -> None:
        app = create_app("production")
        assert app.settings["HelloMessage"] == "wonderful"

    def test_development_message(self) -> None:
        app = create_app("development")
        assert app.settings["HelloMessage"] == "wonderful (development)"
        assert app.config.debug is True
        assert app.config.log_level == "debug"

    def test_environment_variable(self, monkeypatch) -> None:
        monkeypatch.setenv(ENVIRONMENT_VARIABLE, "development")
        assert create_app().config.environment == "development"

    def test_missing_message_fails_at_startup(self) -> None:
        app = create_app(settings={})
        with pytest.raises(ConfigurationError, match="HelloMessage"):
            app.routes

    async def test_development_greeting(self) -> None:
        async with TestClient(create_app("development")) as client:
            response = await client.get("/wibble")
        assert response.text == "Hello, wonderful (development) WIBBLE!"


class TestPipelineProvider:
    def test_default_pipeline_routes(self) -> None:
        assert provide_middleware_pipeline() == (RouterStep,)
        assert provide_middleware_pipeline(None) == (RouterStep,)

    def test_uppercase_owner_pipeline(self) -> None:
        assert provide_middleware_pipeline("uppercaseOwner") == (UppercaseOwner, Dispatch)

    def test_unknown_name_falls_back_to_default(self) -> None:
        assert provide_middleware_pipeline("nope") == (RouterStep,)

    def test_pure(self) -> None:
        assert provide_middleware_pipeline("uppercaseOwner") == provide_middleware_pipeline(
            "uppercaseOwner"
        )


class TestRouteConfiguration:
    def test_root_route(self) -> None:
        routes = RouteMap()
        provide_route_configuration(routes)
        (route,) = routes.build()

        assert route.name == "root"
        assert route.path == "/{owner?}"
        assert route.chain == (Pipeline("uppercaseOwner"), Controller(Hello, "hello"))
        assert dict(route.defaults) == {"owner": "World"}


class TestContainerSetup:
    def test_hello_built_with_message(self) -> None:
        container = Container()
        configure_container(container, Settings({"HelloMessage": "hi"}), "production")
        assert container.get(Hello).message == "hi"

    def test_missing_message(self) -> None:
        with pytest.raises(ConfigurationError, match="HelloMessage"):
            configure_container(Container(), Settings(), "production")


class TestUppercaseOwner:
    async def test_uppercases(self) -> None:
        seen: list[object] = []

        async def next(request: Request) -> Response:
            seen.append(request.get_attribute("owner"))
            return Response()

        await UppercaseOwner()(Request("GET", "/").with_attribute("owner", "wibble"), next)
        assert seen == ["WIBBLE"]

    async def test_absent_owner_passes_through(self) -> None:
        seen: list[Request] = []

        async def next(request: Request) -> Response:
            seen.append(request)
            return Response()

        request = Request("GET", "/")
        await UppercaseOwner()(request, next)
        assert seen == [request]


class TestHelloController:
    def test_greets_owner(self) -> None:
        request = Request("GET", "/").with_attribute("owner", "WIBBLE")
        assert Hello("wonderful").hello(request).text == "Hello, wonderful WIBBLE!"

    def test_falls_back_to_world(self) -> None:
        assert Hello("wonderful").hello(Request("GET", "/")).text == "Hello, wonderful World!"

    def test_routing_attributes_present(self, app) -> None:
        router_step = app.container.get(RouterStep)
        routed = router_step._router.route(Request("GET", "/wibble"))

        assert routed.get_attribute(ROUTE_ATTRIBUTE) == "root"
        assert routed.get_attribute(DISPATCH_ATTRIBUTE)[0] == Pipeline("uppercaseOwner")
