from __future__ import annotations

from grpc_app.client.base import BaseRegistryClient
from grpc_app.generated.v1alpha1 import authz_pb2


class AuthzClient(BaseRegistryClient):
    """Authorization checks; every method answers whether the caller may act."""

    service_name = "AuthzService"

    async def _authorized(self, method: str, **fields) -> bool:
        request = getattr(authz_pb2, f"{method}Request")(**fields)
        response = await self._call(method, request)
        return response.authorized

    async def user_can_add_user_organization_scopes(self, id: str) -> bool:
        return await self._authorized("UserCanAddUserOrganizationScopes", id=id)

    async def user_can_remove_user_organization_scopes(self, id: str) -> bool:
        return await self._authorized("UserCanRemoveUserOrganizationScopes", id=id)

    async def user_can_create_organization_repository(self, id: str) -> bool:
        return await self._authorized("UserCanCreateOrganizationRepository", id=id)

    async def user_can_see_repository_settings(self, repository_id: str) -> bool:
        return await self._authorized("UserCanSeeRepositorySettings", repository_id=repository_id)

    async def user_can_see_organization_settings(self, organization_id: str) -> bool:
        return await self._authorized("UserCanSeeOrganizationSettings", organization_id=organization_id)

    async def user_can_read_plugin(self, owner: str, name: str) -> bool:
        return await self._authorized("UserCanReadPlugin", owner=owner, name=name)

    async def user_can_create_plugin_version(self, owner: str, name: str) -> bool:
        return await self._authorized("UserCanCreatePluginVersion", owner=owner, name=name)

    async def user_can_create_template_version(self, owner: str, name: str) -> bool:
        return await self._authorized("UserCanCreateTemplateVersion", owner=owner, name=name)

    async def user_can_create_organization_plugin(self, organization_id: str) -> bool:
        return await self._authorized("UserCanCreateOrganizationPlugin", organization_id=organization_id)

    async def user_can_create_organization_template(self, organization_id: str) -> bool:
        return await self._authorized("UserCanCreateOrganizationTemplate", organization_id=organization_id)

    async def user_can_see_plugin_settings(self, owner: str, name: str) -> bool:
        return await self._authorized("UserCanSeePluginSettings", owner=owner, name=name)

    async def user_can_see_template_settings(self, owner: str, name: str) -> bool:
        return await self._authorized("UserCanSeeTemplateSettings", owner=owner, name=name)

    async def user_can_create_organization_team(self, id: str) -> bool:
        return await self._authorized("UserCanCreateOrganizationTeam", id=id)

    async def user_can_list_organization_teams(self, id: str) -> bool:
        return await self._authorized("UserCanListOrganizationTeams", id=id)
