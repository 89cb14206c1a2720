"""Shared type aliases used across pagestack modules."""

from collections.abc import Awaitable, Callable
from typing import Any, TypeAlias

# Operation wrapped by the mutex coordinator, expected to be ``async def``
AsyncOperation: TypeAlias = Callable[..., Awaitable[Any]]

# Application restore hook, receives (route, context), sync or async
RestoreHandler: TypeAlias = Callable[..., Any]

# Tainting predicate: (existing route, incoming route) -> instance reused?
ReusePredicate: TypeAlias = Callable[..., bool]

# Injectable sleep used for settle delays and retry backoff
Sleep: TypeAlias = Callable[[float], Awaitable[None]]

# Injectable monotonic clock, in seconds
Clock: TypeAlias = Callable[[], float]
