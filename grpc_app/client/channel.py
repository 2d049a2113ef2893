from __future__ import annotations

from typing import Optional, Sequence

import grpc

from core.config import TlsSettings, settings
from grpc_app.client.interceptors import default_client_interceptors


def _read(path: Optional[str]) -> Optional[bytes]:
    if not path:
        return None
    with open(path, "rb") as f:
        return f.read()


def create_channel(
    address: str,
    *,
    tls: Optional[TlsSettings] = None,
    interceptors: Optional[Sequence[grpc.aio.ClientInterceptor]] = None,
) -> grpc.aio.Channel:
    """Open an aio channel to ``address`` (insecure unless TLS is enabled)."""
    tls = tls or settings.registry.tls
    if interceptors is None:
        interceptors = default_client_interceptors()

    if tls.enabled:
        creds = grpc.ssl_channel_credentials(
            root_certificates=_read(tls.ca),
            private_key=_read(tls.key),
            certificate_chain=_read(tls.cert),
        )
        return grpc.aio.secure_channel(address, creds, interceptors=interceptors)
    return grpc.aio.insecure_channel(address, interceptors=interceptors)
