"""Shared type aliases used across httpschema modules."""

from collections.abc import Awaitable, Callable, MutableMapping
from typing import Any, TypeAlias

# Raw ASGI types
Scope: TypeAlias = MutableMapping[str, Any]
Receive: TypeAlias = Callable[[], Awaitable[MutableMapping[str, Any]]]
Send: TypeAlias = Callable[[MutableMapping[str, Any]], Awaitable[None]]

# Route handler: user-defined function with variable signature
Handler: TypeAlias = Callable[..., Any]

# Validation error channel: receives (error, request) and returns a response value
ErrorChannel: TypeAlias = Callable[..., Any]
