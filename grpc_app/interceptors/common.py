from __future__ import annotations

import inspect
from typing import Any, Callable

import grpc


async def invoke_unary(behavior: Callable[..., Any], request: Any, context: grpc.aio.ServicerContext) -> Any:
    """Call a unary behavior that may be sync (generated servicer defaults) or async."""
    result = behavior(request, context)
    if inspect.isawaitable(result):
        return await result
    return result


def short_method_name(full_method: str) -> str:
    """``/pkg.Service/Method`` -> ``Method``."""
    return full_method.rsplit("/", 1)[-1]


def add_trailing_metadata(context: grpc.aio.ServicerContext, pairs: tuple[tuple[str, str], ...]) -> None:
    """Append to, rather than replace, the trailing metadata set by outer interceptors."""
    existing = tuple(context.trailing_metadata() or ())
    context.set_trailing_metadata(existing + tuple(pairs))
