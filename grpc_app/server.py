from __future__ import annotations

from typing import Any, Mapping, Optional, Sequence

import grpc
from grpc_health.v1 import health, health_pb2_grpc, health_pb2

from core.config import settings
from core.logging_config import get_logger
from grpc_app.generated.v1alpha1 import SERVICES
from grpc_app.interceptors.request_id import RequestIdInterceptor
from grpc_app.interceptors.logging import LoggingInterceptor
from grpc_app.interceptors.exceptions import ExceptionMappingInterceptor
from grpc_app.interceptors.auth import AuthInterceptor, TokenVerifier
from grpc_app.interceptors.validation import ValidationInterceptor


logger = get_logger(__name__)


def build_interceptors(token_verifier: Optional[TokenVerifier] = None) -> list[grpc.aio.ServerInterceptor]:
    interceptors: list[grpc.aio.ServerInterceptor] = [
        RequestIdInterceptor(),
        LoggingInterceptor(),
        ExceptionMappingInterceptor(),  # maps registry exceptions
    ]
    if token_verifier is not None:
        interceptors.append(AuthInterceptor(token_verifier))  # sets current principal
    interceptors.append(ValidationInterceptor())  # CEL message checks
    return interceptors


def register_services(server: grpc.aio.Server, servicers: Optional[Mapping[str, Any]] = None) -> health.HealthServicer:
    """Register every bound service plus health on ``server``.

    ``servicers`` maps a service name (``"LabelService"``) to an implementation;
    services without one get the generated base servicer, which answers
    ``UNIMPLEMENTED``.
    """
    servicers = dict(servicers or {})
    unknown = set(servicers) - set(SERVICES)
    if unknown:
        raise ValueError(f"unknown services: {', '.join(sorted(unknown))}")

    health_svc = health.HealthServicer()
    health_pb2_grpc.add_HealthServicer_to_server(health_svc, server)
    health_svc.set("", health_pb2.HealthCheckResponse.SERVING)

    for name, binding in SERVICES.items():
        servicer = servicers.get(name) or binding.servicer()
        binding.add_to_server(servicer, server)
        health_svc.set(binding.full_name, health_pb2.HealthCheckResponse.SERVING)
        logger.debug("grpc_service_registered", service=binding.full_name, implemented=name in servicers)
    return health_svc


def build_server(
    servicers: Optional[Mapping[str, Any]] = None,
    *,
    token_verifier: Optional[TokenVerifier] = None,
    interceptors: Optional[Sequence[grpc.aio.ServerInterceptor]] = None,
) -> grpc.aio.Server:
    """Server with interceptors and services registered, not yet bound to a port."""
    if interceptors is None:
        interceptors = build_interceptors(token_verifier)

    options = [
        ("grpc.max_concurrent_streams", max(1, settings.grpc.max_concurrent_streams)),
    ]
    server = grpc.aio.server(interceptors=interceptors, options=options)
    register_services(server, servicers)
    return server


def _read(path: str) -> bytes:
    with open(path, "rb") as f:
        return f.read()


async def create_server(
    servicers: Optional[Mapping[str, Any]] = None,
    *,
    token_verifier: Optional[TokenVerifier] = None,
) -> grpc.aio.Server:
    server = build_server(servicers, token_verifier=token_verifier)

    # Bind address
    address = f"{settings.grpc.host}:{settings.grpc.port}"

    tls = settings.grpc.tls
    if tls.enabled:
        if not (tls.cert and tls.key):
            raise RuntimeError("GRPC TLS enabled but cert/key not provided")
        root_certificates = _read(tls.ca) if tls.ca else None
        creds = grpc.ssl_server_credentials(
            [(_read(tls.key), _read(tls.cert))],
            root_certificates=root_certificates,
            require_client_auth=bool(root_certificates),
        )
        server.add_secure_port(address, creds)
    else:
        server.add_insecure_port(address)

    return server
