"""Dependency injection container.

Bindings are keyed by type objects, never by strings::

    container = Container()
    container.add(ResponseEmitter, AsgiResponseEmitter)
    container.add(Hello).with_argument(settings["HelloMessage"])

    hello = container.get(Hello)

``add(interface, concrete)`` binds an interface (usually a ``Protocol``)
to a concrete class or factory callable. ``add(cls)`` registers a class
as its own implementation. Constructor arguments are supplied with
``with_argument()``; an argument that is itself a type registered in the
container is resolved first, anything else is passed as-is.

Instances are built on every ``get()`` unless the definition is shared.

Thread safety:
    Bindings are added during setup only. ``freeze()`` makes the table
    read-only before the first request, so lookups need no lock. Shared
    instances are built under a re-entrant lock so two workers never race
    to create the same singleton, and a shared binding may take another
    shared binding as an argument. Circular-dependency tracking is kept
    per thread.
"""

import logging
import threading
from collections.abc import Callable
from typing import Any, TypeVar, cast

from pipeweave.errors import ResolutionError

logger = logging.getLogger("pipeweave.container")

T = TypeVar("T")


class Definition:
    """How to build one interface: the factory, its arguments, and sharing."""

    __slots__ = ("_instance", "arguments", "factory", "interface", "shared")

    def __init__(self, interface: type, factory: Callable[..., Any]) -> None:
        self.interface = interface
        self.factory = factory
        self.arguments: list[Any] = []
        self.shared = False
        self._instance: Any = None

    def with_argument(self, value: Any) -> "Definition":
        """Append a constructor argument."""
        self.arguments.append(value)
        return self

    def with_arguments(self, *values: Any) -> "Definition":
        """Append several constructor arguments in order."""
        self.arguments.extend(values)
        return self

    def set_shared(self, shared: bool = True) -> "Definition":
        """Build the instance once and return it on every ``get()``."""
        self.shared = shared
        return self

    def __repr__(self) -> str:
        name = getattr(self.factory, "__qualname__", repr(self.factory))
        return f"<Definition {self.interface.__qualname__} -> {name}>"


class Container:
    """Type-keyed binding table used to build middleware and controllers."""

    __slots__ = ("_definitions", "_frozen", "_local", "_lock")

    def __init__(self) -> None:
        self._definitions: dict[type, Definition] = {}
        self._frozen = False
        self._lock = threading.RLock()
        self._local = threading.local()

    # -- Setup --

    def add(self, interface: type, concrete: Callable[..., Any] | None = None) -> Definition:
        """Bind *interface* to *concrete* (defaults to *interface* itself).

        Re-adding an interface replaces the earlier binding.
        """
        if self._frozen:
            msg = "Cannot add bindings after the container is frozen."
            raise RuntimeError(msg)
        factory = concrete if concrete is not None else interface
        if not callable(factory):
            msg = f"Binding for {interface.__qualname__} is not callable: {factory!r}"
            raise TypeError(msg)
        definition = Definition(interface, factory)
        self._definitions[interface] = definition
        logger.debug("Bound %r", definition)
        return definition

    def freeze(self) -> None:
        """Make the binding table read-only."""
        self._frozen = True

    # -- Lookup --

    def has(self, interface: type) -> bool:
        """True when *interface* has a binding."""
        return interface in self._definitions

    def definition(self, interface: type) -> Definition:
        """Return the binding for *interface*.

        Raises ``ResolutionError`` if *interface* is not bound.
        """
        try:
            return self._definitions[interface]
        except KeyError:
            raise ResolutionError(interface, "no binding registered") from None

    def get(self, interface: type[T]) -> T:
        """Build (or return the shared instance of) *interface*.

        Raises:
            ResolutionError: If *interface* is unbound, a circular argument
                chain is detected, or the factory raises.
        """
        definition = self.definition(interface)
        if not definition.shared:
            return cast(T, self._build(definition))

        if definition._instance is None:
            with self._lock:
                if definition._instance is None:
                    definition._instance = self._build(definition)
        return cast(T, definition._instance)

    def _resolving(self) -> set[type]:
        resolving: set[type] | None = getattr(self._local, "resolving", None)
        if resolving is None:
            resolving = self._local.resolving = set()
        return resolving

    def _build(self, definition: Definition) -> Any:
        interface = definition.interface
        resolving = self._resolving()
        if interface in resolving:
            raise ResolutionError(interface, "circular dependency")
        resolving.add(interface)
        try:
            args = [self._resolve_argument(arg) for arg in definition.arguments]
            try:
                return definition.factory(*args)
            except ResolutionError:
                raise
            except Exception as exc:
                raise ResolutionError(interface, f"factory raised {exc!r}") from exc
        finally:
            resolving.discard(interface)

    def _resolve_argument(self, value: Any) -> Any:
        if isinstance(value, type) and value in self._definitions:
            return self.get(value)
        return value

    def __contains__(self, interface: object) -> bool:
        return interface in self._definitions

    def __len__(self) -> int:
        return len(self._definitions)
