"""
Registry API clients

One typed client per registry service, built through ``ClientProvider``.
"""
from .authz import AuthzClient
from .base import BaseRegistryClient
from .convert import ConvertClient
from .doc import DocClient
from .generate import GenerateClient
from .labels import LabelClient
from .organization import OrganizationClient
from .provider import ClientProvider, token_metadata_provider
from .repository import RepositoryClient
from .resource import ResourceClient
from .schema import SchemaClient
from .search import SearchClient
from .webhook import WebhookClient

__all__ = [
    "AuthzClient",
    "BaseRegistryClient",
    "ClientProvider",
    "ConvertClient",
    "DocClient",
    "GenerateClient",
    "LabelClient",
    "OrganizationClient",
    "RepositoryClient",
    "ResourceClient",
    "SchemaClient",
    "SearchClient",
    "WebhookClient",
    "token_metadata_provider",
]
