"""Shared type aliases used across pipeweave modules."""

from collections.abc import Callable
from typing import Any, TypeAlias

# Error handler — receives (request, error?) and returns a response value
ErrorHandler: TypeAlias = Callable[..., Any]

# An entry in a pipeline: a middleware class resolved through the
# container, or a ready middleware callable
MiddlewareRef: TypeAlias = type | Callable[..., Any]
