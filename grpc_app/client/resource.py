from __future__ import annotations

from grpc_app.client.base import BaseRegistryClient
from grpc_app.generated.v1alpha1 import resource_pb2


class ResourceClient(BaseRegistryClient):
    service_name = "ResourceService"

    async def get_resource_by_name(self, owner: str, name: str) -> resource_pb2.Resource:
        """The resource is either a repository or a curated plugin; see ``WhichOneof("resource")``."""
        response = await self._call("GetResourceByName", resource_pb2.GetResourceByNameRequest(owner=owner, name=name))
        return response.resource
