"""Pipeweave application class.

An app is assembled from small setup functions rather than subclassed::

    app = App(
        AppConfig(environment="development", config_dir="config"),
        container_setup=configure_container,
        pipelines=provide_middleware_pipeline,
        routes=provide_route_configuration,
    )

Mutable during setup (error handlers, lifecycle hooks). Frozen at runtime
when ``app.run()`` or ``__call__()`` is first invoked: settings load, the
container is populated and sealed, routes compile, and every pipeline a
route names is checked.
"""

import inspect
import logging
import threading
from collections.abc import Callable, Mapping
from typing import Any, TypeAlias

from pipeweave._internal.asgi import Receive, Scope, Send
from pipeweave._internal.types import ErrorHandler
from pipeweave.config import AppConfig, Settings, load_settings
from pipeweave.container import Container
from pipeweave.http.factories import RequestFactory, ResponseFactory
from pipeweave.middleware.adaptor import MiddlewareAdaptor
from pipeweave.middleware.dispatch import Dispatch, Pipeline
from pipeweave.middleware.pipeline import MiddlewareDispatcher, PipelineProvider
from pipeweave.routing.adaptor import RouteMap, RouterAdaptor
from pipeweave.routing.route import Route
from pipeweave.routing.step import RouterStep
from pipeweave.server.emitter import ResponseEmitter
from pipeweave.server.handler import handle_request

logger = logging.getLogger("pipeweave.app")

ContainerSetup: TypeAlias = Callable[[Container, Settings, str], None]
RouteProvider: TypeAlias = Callable[[RouteMap], None]

# Interfaces the container setup must bind
_CAPABILITIES: tuple[type, ...] = (
    MiddlewareAdaptor,
    ResponseEmitter,
    RequestFactory,
    ResponseFactory,
    RouterAdaptor,
)


class App:
    """The pipeweave application.

    Thread safety:
        The setup phase is single-threaded. The freeze transition uses a
        Lock + double-check so exactly one thread builds the container and
        compiles routes, even if several workers receive their first
        request at the same time.
    """

    __slots__ = (
        "_container",
        "_container_setup",
        "_dispatcher",
        "_emitter",
        "_error_handlers",
        "_freeze_lock",
        "_frozen",
        "_pipelines",
        "_request_factory",
        "_response_factory",
        "_route_provider",
        "_router",
        "_settings",
        "_settings_source",
        "_shutdown_hooks",
        "_startup_hooks",
        "config",
    )

    def __init__(
        self,
        config: AppConfig | None = None,
        *,
        container_setup: ContainerSetup,
        pipelines: PipelineProvider,
        routes: RouteProvider,
        settings: Mapping[str, Any] | None = None,
    ) -> None:
        self.config: AppConfig = config or AppConfig()
        self._container_setup = container_setup
        self._pipelines = pipelines
        self._route_provider = routes
        self._settings_source = settings
        self._error_handlers: dict[int | type, ErrorHandler] = {}
        self._startup_hooks: list[Callable[..., Any]] = []
        self._shutdown_hooks: list[Callable[..., Any]] = []
        self._frozen: bool = False
        self._freeze_lock: threading.Lock = threading.Lock()

        # Compiled state — set during _freeze()
        self._settings: Settings | None = None
        self._container: Container | None = None
        self._dispatcher: MiddlewareDispatcher | None = None
        self._router: RouterAdaptor | None = None
        self._request_factory: RequestFactory | None = None
        self._response_factory: ResponseFactory | None = None
        self._emitter: ResponseEmitter | None = None

    # -- Error handlers --

    def error(
        self,
        code_or_exception: int | type[Exception],
    ) -> Callable[[ErrorHandler], ErrorHandler]:
        """Register an error handler via decorator.

        Handlers may take ``()``, ``(request)`` or ``(request, exc)`` and
        return a ``Response``, ``str`` or ``bytes``.
        """

        def decorator(func: ErrorHandler) -> ErrorHandler:
            self._check_not_frozen()
            self._error_handlers[code_or_exception] = func
            return func

        return decorator

    # -- Lifecycle hooks --

    def on_startup(self, func: Callable[..., Any]) -> Callable[..., Any]:
        """Register an async or sync startup hook via decorator."""
        self._check_not_frozen()
        self._startup_hooks.append(func)
        return func

    def on_shutdown(self, func: Callable[..., Any]) -> Callable[..., Any]:
        """Register an async or sync shutdown hook via decorator."""
        self._check_not_frozen()
        self._shutdown_hooks.append(func)
        return func

    # -- Frozen state accessors --

    @property
    def settings(self) -> Settings:
        """The loaded application settings. Freezes the app."""
        self._ensure_frozen()
        assert self._settings is not None
        return self._settings

    @property
    def container(self) -> Container:
        """The sealed container. Freezes the app."""
        self._ensure_frozen()
        assert self._container is not None
        return self._container

    @property
    def routes(self) -> list[Route]:
        """All compiled routes. Freezes the app."""
        self._ensure_frozen()
        assert self._router is not None
        return self._router.routes

    # -- Running --

    def run(self, host: str | None = None, port: int | None = None) -> None:
        """Freeze the app and serve it with uvicorn."""
        import uvicorn

        self._ensure_frozen()
        uvicorn.run(
            self,
            host=self.config.host if host is None else host,
            port=self.config.port if port is None else port,
            log_level=self.config.log_level,
        )

    # -- ASGI interface --

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        """ASGI 3.0 entry point.

        Handles the lifespan scope directly, then delegates HTTP scopes to
        the request handler.
        """
        if scope["type"] == "lifespan":
            await self._handle_lifespan(receive, send)
            return

        self._ensure_frozen()

        assert self._dispatcher is not None
        assert self._request_factory is not None
        assert self._response_factory is not None
        assert self._emitter is not None

        await handle_request(
            scope,
            receive,
            send,
            dispatcher=self._dispatcher,
            request_factory=self._request_factory,
            response_factory=self._response_factory,
            emitter=self._emitter,
            error_handlers=self._error_handlers,
            debug=self.config.debug,
        )

    async def _handle_lifespan(self, receive: Receive, send: Send) -> None:
        """Run the ASGI lifespan protocol.

        Freezes the app at startup (before the first HTTP request) so
        configuration errors stop the server instead of failing requests.
        """
        while True:
            message = await receive()
            msg_type = message["type"]

            if msg_type == "lifespan.startup":
                try:
                    self._ensure_frozen()
                    await self.startup()
                except Exception as exc:
                    logger.exception("Startup failed")
                    await send({"type": "lifespan.startup.failed", "message": str(exc)})
                    return
                await send({"type": "lifespan.startup.complete"})

            elif msg_type == "lifespan.shutdown":
                await self.shutdown()
                await send({"type": "lifespan.shutdown.complete"})
                return

    async def startup(self) -> None:
        """Run startup hooks in registration order."""
        for hook in self._startup_hooks:
            result = hook()
            if inspect.isawaitable(result):
                await result

    async def shutdown(self) -> None:
        """Run shutdown hooks in registration order."""
        for hook in self._shutdown_hooks:
            result = hook()
            if inspect.isawaitable(result):
                await result

    # -- Internal --

    def _ensure_frozen(self) -> None:
        """Thread-safe freeze with double-check locking."""
        if self._frozen:
            return
        with self._freeze_lock:
            if self._frozen:
                return
            self._freeze()

    def _load_settings(self) -> Settings:
        if self._settings_source is not None:
            return Settings(self._settings_source)
        if self.config.config_dir is not None:
            return load_settings(self.config.config_dir, self.config.environment)
        return Settings()

    def _freeze(self) -> None:
        """Build the runtime state.

        MUST only be called while holding _freeze_lock.
        """
        # 1. Settings
        settings = self._load_settings()

        # 2. Container bindings from the application
        container = Container()
        self._container_setup(container, settings, self.config.environment)

        # 3. Capabilities the request cycle needs; one instance each
        for capability in _CAPABILITIES:
            container.definition(capability).set_shared()
        request_factory = container.get(RequestFactory)
        response_factory = container.get(ResponseFactory)
        emitter = container.get(ResponseEmitter)
        adaptor = container.get(MiddlewareAdaptor)
        router = container.get(RouterAdaptor)

        dispatcher = MiddlewareDispatcher(self._pipelines, adaptor, container, response_factory)

        # 4. Routes
        router.configure(self._route_provider)

        # 5. Built-in steps, unless the application bound its own
        if not container.has(RouterStep):
            container.add(RouterStep).with_arguments(router, dispatcher).set_shared()
        if not container.has(Dispatch):
            container.add(Dispatch).with_argument(dispatcher).set_shared()

        # 6. Every pipeline a route names must exist
        for route in router.routes:
            for step in route.chain:
                if isinstance(step, Pipeline):
                    dispatcher.check_pipeline(step.name, route=route.name)

        container.freeze()

        self._settings = settings
        self._container = container
        self._dispatcher = dispatcher
        self._router = router
        self._request_factory = request_factory
        self._response_factory = response_factory
        self._emitter = emitter
        self._frozen = True

        logger.info(
            "App ready: environment=%s routes=%d bindings=%d",
            self.config.environment,
            len(router.routes),
            len(container),
        )

    def _check_not_frozen(self) -> None:
        if self._frozen:
            msg = "Cannot modify the app after it has started handling requests."
            raise RuntimeError(msg)
