from __future__ import annotations

from typing import Callable, Awaitable

import grpc

from grpc_app.generated.v1alpha1 import binding_for
from grpc_app.interceptors.common import invoke_unary, short_method_name
from grpc_app.validation import validate


class ValidationInterceptor(grpc.aio.ServerInterceptor):
    """Runs the message-level CEL check on each request before the servicer.

    ``ValidationException`` propagates to the exception interceptor, which
    answers ``INVALID_ARGUMENT``. Methods still on the generated base servicer
    are not checked, so they answer ``UNIMPLEMENTED`` whatever the request.
    """

    async def intercept_service(
        self,
        continuation: Callable[[grpc.HandlerCallDetails], Awaitable[grpc.RpcMethodHandler]],
        handler_call_details: grpc.HandlerCallDetails,
    ) -> grpc.RpcMethodHandler:
        handler = await continuation(handler_call_details)
        if handler is None or not handler.unary_unary:
            return handler

        method = handler_call_details.method
        binding = binding_for(method)
        if binding is not None and not binding.overrides(handler.unary_unary, short_method_name(method)):
            return handler

        async def _unary_unary(request, context: grpc.aio.ServicerContext):
            validate(request)
            return await invoke_unary(handler.unary_unary, request, context)

        return grpc.unary_unary_rpc_method_handler(
            _unary_unary,
            request_deserializer=handler.request_deserializer,
            response_serializer=handler.response_serializer,
        )
