from __future__ import annotations

import time
import uuid
from typing import Any, Awaitable, Callable

import grpc

from core.logging_config import get_logger
from grpc_app.interceptors.request_id import REQUEST_ID_META_KEY, get_request_id


logger = get_logger(__name__)


class RequestIdClientInterceptor(grpc.aio.UnaryUnaryClientInterceptor):
    """Adds ``x-request-id`` to outgoing calls.

    Reuses the id of the inbound request when called from inside a servicer,
    so a call chain shares one id.
    """

    async def intercept_unary_unary(
        self,
        continuation: Callable[[grpc.aio.ClientCallDetails, Any], Awaitable[grpc.aio.UnaryUnaryCall]],
        client_call_details: grpc.aio.ClientCallDetails,
        request: Any,
    ) -> grpc.aio.UnaryUnaryCall:
        metadata = grpc.aio.Metadata(*tuple(client_call_details.metadata or ()))
        if REQUEST_ID_META_KEY not in metadata:
            metadata.add(REQUEST_ID_META_KEY, get_request_id() or str(uuid.uuid4()))
        details = grpc.aio.ClientCallDetails(
            method=client_call_details.method,
            timeout=client_call_details.timeout,
            metadata=metadata,
            credentials=client_call_details.credentials,
            wait_for_ready=client_call_details.wait_for_ready,
        )
        return await continuation(details, request)


class LoggingClientInterceptor(grpc.aio.UnaryUnaryClientInterceptor):
    async def intercept_unary_unary(
        self,
        continuation: Callable[[grpc.aio.ClientCallDetails, Any], Awaitable[grpc.aio.UnaryUnaryCall]],
        client_call_details: grpc.aio.ClientCallDetails,
        request: Any,
    ) -> grpc.aio.UnaryUnaryCall:
        start = time.perf_counter()
        call = await continuation(client_call_details, request)
        # code() waits for completion without raising; the caller still sees the error
        code = await call.code()
        method = client_call_details.method
        if isinstance(method, bytes):
            method = method.decode()
        logger.info(
            "registry_client_call",
            method=method,
            code=code.name,
            elapsed_ms=round((time.perf_counter() - start) * 1000, 2),
        )
        return call


def default_client_interceptors() -> list[grpc.aio.ClientInterceptor]:
    # Request id runs first so the logged call carries it
    return [RequestIdClientInterceptor(), LoggingClientInterceptor()]
