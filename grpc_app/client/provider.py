from __future__ import annotations

import asyncio
from typing import Callable, Optional, Sequence, Type, TypeVar

import grpc

from core.config import TlsSettings, settings
from core.logging_config import get_logger
from grpc_app.client.authz import AuthzClient
from grpc_app.client.base import BaseRegistryClient
from grpc_app.client.channel import create_channel
from grpc_app.client.convert import ConvertClient
from grpc_app.client.doc import DocClient
from grpc_app.client.generate import GenerateClient
from grpc_app.client.labels import LabelClient
from grpc_app.client.organization import OrganizationClient
from grpc_app.client.repository import RepositoryClient
from grpc_app.client.resource import ResourceClient
from grpc_app.client.schema import SchemaClient
from grpc_app.client.search import SearchClient
from grpc_app.client.webhook import WebhookClient


logger = get_logger(__name__)

AddressMapper = Callable[[str], str]
MetadataProvider = Callable[[str], Sequence[tuple[str, str]]]
ChannelFactory = Callable[[str], grpc.aio.Channel]

C = TypeVar("C", bound=BaseRegistryClient)


def token_metadata_provider(token: Optional[str]) -> MetadataProvider:
    """Bearer ``authorization`` metadata for every address, or none without a token."""

    def _provide(address: str) -> Sequence[tuple[str, str]]:
        if not token:
            return ()
        return (("authorization", f"Bearer {token}"),)

    return _provide


class ClientProvider:
    """Builds typed registry clients for an address.

    - ``address_mapper`` rewrites the address before dialing (e.g. to a local proxy)
    - ``metadata_provider`` gives the metadata attached to every call made
      through clients for that address; defaults to the configured bearer token
    - one channel per mapped address, reused across clients until ``aclose()``
    """

    def __init__(
        self,
        address_mapper: Optional[AddressMapper] = None,
        metadata_provider: Optional[MetadataProvider] = None,
        *,
        tls: Optional[TlsSettings] = None,
        timeout: Optional[float] = None,
        channel_factory: Optional[ChannelFactory] = None,
    ) -> None:
        self._address_mapper = address_mapper or (lambda address: address)
        self._metadata_provider = metadata_provider or token_metadata_provider(settings.registry.token)
        self._tls = tls
        self._timeout = timeout if timeout is not None else settings.registry.timeout
        self._channel_factory = channel_factory or (lambda address: create_channel(address, tls=self._tls))
        self._channels: dict[str, grpc.aio.Channel] = {}

    def channel(self, address: str) -> grpc.aio.Channel:
        target = self._address_mapper(address)
        channel = self._channels.get(target)
        if channel is None:
            logger.debug("registry_channel_open", address=address, target=target)
            channel = self._channel_factory(target)
            self._channels[target] = channel
        return channel

    def client(self, client_type: Type[C], address: Optional[str] = None) -> C:
        address = address or settings.registry.address
        return client_type(
            self.channel(address),
            metadata=tuple(self._metadata_provider(address)),
            timeout=self._timeout,
        )

    def authz(self, address: Optional[str] = None) -> AuthzClient:
        return self.client(AuthzClient, address)

    def convert(self, address: Optional[str] = None) -> ConvertClient:
        return self.client(ConvertClient, address)

    def doc(self, address: Optional[str] = None) -> DocClient:
        return self.client(DocClient, address)

    def generate(self, address: Optional[str] = None) -> GenerateClient:
        return self.client(GenerateClient, address)

    def labels(self, address: Optional[str] = None) -> LabelClient:
        return self.client(LabelClient, address)

    def organization(self, address: Optional[str] = None) -> OrganizationClient:
        return self.client(OrganizationClient, address)

    def repository(self, address: Optional[str] = None) -> RepositoryClient:
        return self.client(RepositoryClient, address)

    def resource(self, address: Optional[str] = None) -> ResourceClient:
        return self.client(ResourceClient, address)

    def schema(self, address: Optional[str] = None) -> SchemaClient:
        return self.client(SchemaClient, address)

    def search(self, address: Optional[str] = None) -> SearchClient:
        return self.client(SearchClient, address)

    def webhook(self, address: Optional[str] = None) -> WebhookClient:
        return self.client(WebhookClient, address)

    async def aclose(self) -> None:
        channels, self._channels = list(self._channels.values()), {}
        await asyncio.gather(*(channel.close() for channel in channels))

    async def __aenter__(self) -> "ClientProvider":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()
