"""
Registry API client base.

Typed clients wrap one generated stub each and expose coroutines taking plain
keyword arguments. Errors surface unchanged as ``grpc.aio.AioRpcError``; no
retry happens at this layer.
"""
from __future__ import annotations

from typing import Any, ClassVar, Optional, Sequence

import grpc
from google.protobuf.message import Message

from grpc_app.generated.v1alpha1 import SERVICES, ServiceBinding


class BaseRegistryClient:
    service_name: ClassVar[str]

    def __init__(
        self,
        channel: grpc.aio.Channel,
        *,
        metadata: Sequence[tuple[str, str]] = (),
        timeout: Optional[float] = None,
    ) -> None:
        self._binding: ServiceBinding = SERVICES[self.service_name]
        self._stub = self._binding.stub(channel)
        self._metadata = tuple(metadata)
        self._timeout = timeout

    @property
    def pb2(self):
        """Generated message module of the service."""
        return self._binding.pb2

    async def _call(self, method: str, request: Message) -> Any:
        rpc = getattr(self._stub, method)
        return await rpc(request, metadata=self._metadata or None, timeout=self._timeout)
