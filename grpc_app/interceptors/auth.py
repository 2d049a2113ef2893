from __future__ import annotations

from typing import Any, Awaitable, Callable, Iterable, Optional, Union
import contextvars
import inspect

import grpc

from core.config import settings
from core.logging_config import get_logger
from grpc_app.interceptors.common import invoke_unary


logger = get_logger(__name__)

# token -> principal (user id / name); None rejects the token
TokenVerifier = Callable[[str], Union[Optional[str], Awaitable[Optional[str]]]]

_current_principal: contextvars.ContextVar[str | None] = contextvars.ContextVar("grpc_current_principal", default=None)


def get_current_principal() -> str | None:
    return _current_principal.get()


def extract_token(metadata: dict[str, Any]) -> str | None:
    auth = metadata.get("authorization")
    if auth and auth.lower().startswith("bearer "):
        token = auth[7:].strip()
        if token:
            return token
    return metadata.get("access_token") or None


class AuthInterceptor(grpc.aio.ServerInterceptor):
    """Bearer token authentication.

    - Expects metadata `authorization: Bearer <token>` or `access_token: <token>`
    - Anonymous methods are whitelisted by full method name
    - Errors raised by the verifier propagate to the exception interceptor
    """

    def __init__(self, token_verifier: TokenVerifier, anonymous_methods: Iterable[str] | None = None) -> None:
        self._token_verifier = token_verifier
        if anonymous_methods is None:
            anonymous_methods = settings.grpc.anonymous_methods
        self._anonymous_methods = frozenset(anonymous_methods)

    async def _verify(self, token: str) -> str | None:
        principal = self._token_verifier(token)
        if inspect.isawaitable(principal):
            principal = await principal
        return principal

    async def intercept_service(
        self,
        continuation: Callable[[grpc.HandlerCallDetails], Awaitable[grpc.RpcMethodHandler]],
        handler_call_details: grpc.HandlerCallDetails,
    ) -> grpc.RpcMethodHandler:
        handler = await continuation(handler_call_details)
        if handler is None:
            return handler

        method = handler_call_details.method
        if method in self._anonymous_methods:
            return handler

        md = dict(handler_call_details.invocation_metadata or [])

        async def _unary_unary(request, context: grpc.aio.ServicerContext):
            token = extract_token(md)
            if not token:
                logger.info("grpc_auth_missing", method=method)
                await context.abort(grpc.StatusCode.UNAUTHENTICATED, "missing credentials")

            principal = await self._verify(token)
            if not principal:
                logger.info("grpc_auth_rejected", method=method)
                await context.abort(grpc.StatusCode.UNAUTHENTICATED, "invalid credentials")

            ctx_token = _current_principal.set(principal)
            try:
                return await invoke_unary(handler.unary_unary, request, context)
            finally:
                _current_principal.reset(ctx_token)

        if handler.unary_unary:
            return grpc.unary_unary_rpc_method_handler(
                _unary_unary,
                request_deserializer=handler.request_deserializer,
                response_serializer=handler.response_serializer,
            )
        return handler
