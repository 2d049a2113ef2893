from __future__ import annotations

from typing import Callable, Awaitable
import contextvars

import grpc

from core.exceptions import RegistryException
from core.logging_config import get_logger
from grpc_app.interceptors.common import add_trailing_metadata, invoke_unary, short_method_name
from grpc_app.interceptors.request_id import get_request_id
from shared.codes import ErrorCode


logger = get_logger(__name__)

# Mark that the current request has been mapped to a gRPC status
_mapped_error: contextvars.ContextVar[bool] = contextvars.ContextVar("grpc_mapped_error", default=False)


def set_mapped_error() -> None:
    _mapped_error.set(True)


def is_mapped_error() -> bool:
    return bool(_mapped_error.get())


_ERROR_CODE_TO_STATUS = {
    ErrorCode.PARAM_ERROR: grpc.StatusCode.INVALID_ARGUMENT,
    ErrorCode.PARAM_MISSING: grpc.StatusCode.INVALID_ARGUMENT,
    ErrorCode.PARAM_TYPE_ERROR: grpc.StatusCode.INVALID_ARGUMENT,
    ErrorCode.PARAM_VALIDATION_ERROR: grpc.StatusCode.INVALID_ARGUMENT,

    ErrorCode.NOT_FOUND: grpc.StatusCode.NOT_FOUND,
    ErrorCode.ALREADY_EXISTS: grpc.StatusCode.ALREADY_EXISTS,
    ErrorCode.FAILED_PRECONDITION: grpc.StatusCode.FAILED_PRECONDITION,

    ErrorCode.UNAUTHORIZED: grpc.StatusCode.UNAUTHENTICATED,
    ErrorCode.TOKEN_INVALID: grpc.StatusCode.UNAUTHENTICATED,
    ErrorCode.FORBIDDEN: grpc.StatusCode.PERMISSION_DENIED,
    ErrorCode.PERMISSION_ERROR: grpc.StatusCode.PERMISSION_DENIED,

    ErrorCode.TOO_MANY_REQUESTS: grpc.StatusCode.RESOURCE_EXHAUSTED,

    ErrorCode.SERVICE_UNAVAILABLE: grpc.StatusCode.UNAVAILABLE,
    ErrorCode.UNIMPLEMENTED: grpc.StatusCode.UNIMPLEMENTED,
    ErrorCode.SYSTEM_ERROR: grpc.StatusCode.INTERNAL,
}


def error_code_to_grpc_status(code: int) -> grpc.StatusCode:
    try:
        ec = ErrorCode(code)
    except ValueError:
        return grpc.StatusCode.UNKNOWN
    return _ERROR_CODE_TO_STATUS.get(ec, grpc.StatusCode.UNKNOWN)


class ExceptionMappingInterceptor(grpc.aio.ServerInterceptor):
    """Turns exceptions escaping a servicer into gRPC statuses.

    - ``RegistryException``: status by error code, with ``x-error-code`` and
      ``x-error-type`` trailing metadata
    - ``NotImplementedError`` (generated servicer default): ``UNIMPLEMENTED``
      naming the method
    - aborts from inner layers pass through untouched
    - anything else: ``INTERNAL`` with a generic message
    """

    async def intercept_service(
        self,
        continuation: Callable[[grpc.HandlerCallDetails], Awaitable[grpc.RpcMethodHandler]],
        handler_call_details: grpc.HandlerCallDetails,
    ) -> grpc.RpcMethodHandler:
        handler = await continuation(handler_call_details)
        if handler is None:
            return handler

        method = handler_call_details.method

        async def _abort(context, status: grpc.StatusCode, code: int, error_type: str, message: str):
            add_trailing_metadata(context, (
                ("x-error-code", str(int(code))),
                ("x-error-type", error_type),
            ))
            set_mapped_error()
            logger.error(
                "grpc_mapped_error",
                method=method,
                code=str(int(code)),
                status=str(status),
                message=message,
                request_id=get_request_id(),
            )
            await context.abort(status, message)

        async def _unary_unary(request, context: grpc.aio.ServicerContext):
            try:
                return await invoke_unary(handler.unary_unary, request, context)
            except grpc.aio.AbortError:
                raise
            except RegistryException as exc:
                status = error_code_to_grpc_status(exc.code)
                await _abort(context, status, exc.code, exc.error_type or "RegistryError", exc.message)
            except NotImplementedError:
                await _abort(
                    context,
                    grpc.StatusCode.UNIMPLEMENTED,
                    ErrorCode.UNIMPLEMENTED,
                    "Unimplemented",
                    f"method {short_method_name(method)} not implemented",
                )
            except Exception:
                logger.error("grpc_unhandled_error", method=method, exc_info=True, request_id=get_request_id())
                await _abort(
                    context,
                    grpc.StatusCode.INTERNAL,
                    ErrorCode.SYSTEM_ERROR,
                    "SystemError",
                    "internal error",
                )

        if handler.unary_unary:
            return grpc.unary_unary_rpc_method_handler(
                _unary_unary,
                request_deserializer=handler.request_deserializer,
                response_serializer=handler.response_serializer,
            )
        return handler
