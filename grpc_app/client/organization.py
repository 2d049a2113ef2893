from __future__ import annotations

from grpc_app.client.base import BaseRegistryClient
from grpc_app.generated.v1alpha1 import organization_pb2


class OrganizationClient(BaseRegistryClient):
    service_name = "OrganizationService"

    async def get_organization(self, id: str) -> organization_pb2.Organization:
        response = await self._call("GetOrganization", organization_pb2.GetOrganizationRequest(id=id))
        return response.organization

    async def get_organization_by_name(self, name: str) -> organization_pb2.Organization:
        response = await self._call("GetOrganizationByName", organization_pb2.GetOrganizationByNameRequest(name=name))
        return response.organization

    async def list_organizations(
        self, page_size: int = 0, page_token: str = "", reverse: bool = False
    ) -> tuple[list[organization_pb2.Organization], str]:
        response = await self._call(
            "ListOrganizations",
            organization_pb2.ListOrganizationsRequest(page_size=page_size, page_token=page_token, reverse=reverse),
        )
        return list(response.organizations), response.next_page_token

    async def list_user_organizations(
        self, user_id: str, page_size: int = 0, page_token: str = "", reverse: bool = False
    ) -> tuple[list[organization_pb2.OrganizationMembership], str]:
        response = await self._call(
            "ListUserOrganizations",
            organization_pb2.ListUserOrganizationsRequest(
                user_id=user_id, page_size=page_size, page_token=page_token, reverse=reverse
            ),
        )
        return list(response.organizations), response.next_page_token

    async def create_organization(self, name: str) -> organization_pb2.Organization:
        response = await self._call("CreateOrganization", organization_pb2.CreateOrganizationRequest(name=name))
        return response.organization

    async def update_organization_name(self, id: str, new_name: str) -> organization_pb2.Organization:
        response = await self._call(
            "UpdateOrganizationName",
            organization_pb2.UpdateOrganizationNameRequest(id=id, new_name=new_name),
        )
        return response.organization

    async def update_organization_name_by_name(self, name: str, new_name: str) -> organization_pb2.Organization:
        response = await self._call(
            "UpdateOrganizationNameByName",
            organization_pb2.UpdateOrganizationNameByNameRequest(name=name, new_name=new_name),
        )
        return response.organization

    async def delete_organization(self, id: str) -> None:
        await self._call("DeleteOrganization", organization_pb2.DeleteOrganizationRequest(id=id))

    async def delete_organization_by_name(self, name: str) -> None:
        await self._call("DeleteOrganizationByName", organization_pb2.DeleteOrganizationByNameRequest(name=name))

    async def add_organization_base_repository_scope(self, id: str, repository_scope: int) -> None:
        await self._call(
            "AddOrganizationBaseRepositoryScope",
            organization_pb2.AddOrganizationBaseRepositoryScopeRequest(id=id, repository_scope=repository_scope),
        )

    async def remove_organization_base_repository_scope(self, id: str, repository_scope: int) -> None:
        await self._call(
            "RemoveOrganizationBaseRepositoryScope",
            organization_pb2.RemoveOrganizationBaseRepositoryScopeRequest(id=id, repository_scope=repository_scope),
        )

    async def remove_organization_base_repository_scope_by_name(self, name: str, repository_scope: int) -> None:
        await self._call(
            "RemoveOrganizationBaseRepositoryScopeByName",
            organization_pb2.RemoveOrganizationBaseRepositoryScopeByNameRequest(
                name=name, repository_scope=repository_scope
            ),
        )
