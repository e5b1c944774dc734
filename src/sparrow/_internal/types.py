"""Shared type aliases used across sparrow modules."""

from collections.abc import Callable
from typing import Any, TypeAlias

# Route or middleware handler: (request, response, next) -> None | Awaitable[None]
Handler: TypeAlias = Callable[..., Any]

# Lifecycle hook: () -> None | Awaitable[None]
Hook: TypeAlias = Callable[..., Any]
