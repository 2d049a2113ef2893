from __future__ import annotations

from typing import Iterable

from grpc_app.client.base import BaseRegistryClient
from grpc_app.generated.v1alpha1 import repository_pb2


class RepositoryClient(BaseRegistryClient):
    service_name = "RepositoryService"

    async def get_repository(self, id: str) -> tuple[repository_pb2.Repository, repository_pb2.RepositoryCounts]:
        response = await self._call("GetRepository", repository_pb2.GetRepositoryRequest(id=id))
        return response.repository, response.counts

    async def get_repository_by_full_name(
        self, full_name: str
    ) -> tuple[repository_pb2.Repository, repository_pb2.RepositoryCounts]:
        """``full_name`` is ``owner/repository``."""
        response = await self._call(
            "GetRepositoryByFullName",
            repository_pb2.GetRepositoryByFullNameRequest(full_name=full_name),
        )
        return response.repository, response.counts

    async def list_repositories(
        self, page_size: int = 0, page_token: str = "", reverse: bool = False
    ) -> tuple[list[repository_pb2.Repository], str]:
        response = await self._call(
            "ListRepositories",
            repository_pb2.ListRepositoriesRequest(page_size=page_size, page_token=page_token, reverse=reverse),
        )
        return list(response.repositories), response.next_page_token

    async def list_user_repositories(
        self, user_id: str, page_size: int = 0, page_token: str = "", reverse: bool = False
    ) -> tuple[list[repository_pb2.Repository], str]:
        response = await self._call(
            "ListUserRepositories",
            repository_pb2.ListUserRepositoriesRequest(
                user_id=user_id, page_size=page_size, page_token=page_token, reverse=reverse
            ),
        )
        return list(response.repositories), response.next_page_token

    async def list_repositories_user_can_access(
        self, page_size: int = 0, page_token: str = "", reverse: bool = False
    ) -> tuple[list[repository_pb2.Repository], str]:
        response = await self._call(
            "ListRepositoriesUserCanAccess",
            repository_pb2.ListRepositoriesUserCanAccessRequest(
                page_size=page_size, page_token=page_token, reverse=reverse
            ),
        )
        return list(response.repositories), response.next_page_token

    async def list_organization_repositories(
        self, organization_id: str, page_size: int = 0, page_token: str = "", reverse: bool = False
    ) -> tuple[list[repository_pb2.Repository], str]:
        response = await self._call(
            "ListOrganizationRepositories",
            repository_pb2.ListOrganizationRepositoriesRequest(
                organization_id=organization_id, page_size=page_size, page_token=page_token, reverse=reverse
            ),
        )
        return list(response.repositories), response.next_page_token

    async def create_repository_by_full_name(
        self, full_name: str, visibility: int = repository_pb2.VISIBILITY_PRIVATE
    ) -> repository_pb2.Repository:
        response = await self._call(
            "CreateRepositoryByFullName",
            repository_pb2.CreateRepositoryByFullNameRequest(full_name=full_name, visibility=visibility),
        )
        return response.repository

    async def delete_repository(self, id: str) -> None:
        await self._call("DeleteRepository", repository_pb2.DeleteRepositoryRequest(id=id))

    async def delete_repository_by_full_name(self, full_name: str) -> None:
        await self._call(
            "DeleteRepositoryByFullName",
            repository_pb2.DeleteRepositoryByFullNameRequest(full_name=full_name),
        )

    async def deprecate_repository_by_name(
        self, owner_name: str, repository_name: str, deprecation_message: str = ""
    ) -> repository_pb2.Repository:
        response = await self._call(
            "DeprecateRepositoryByName",
            repository_pb2.DeprecateRepositoryByNameRequest(
                owner_name=owner_name,
                repository_name=repository_name,
                deprecation_message=deprecation_message,
            ),
        )
        return response.repository

    async def undeprecate_repository_by_name(self, owner_name: str, repository_name: str) -> repository_pb2.Repository:
        response = await self._call(
            "UndeprecateRepositoryByName",
            repository_pb2.UndeprecateRepositoryByNameRequest(owner_name=owner_name, repository_name=repository_name),
        )
        return response.repository

    async def get_repositories_by_full_name(self, full_names: Iterable[str]) -> list[repository_pb2.Repository]:
        response = await self._call(
            "GetRepositoriesByFullName",
            repository_pb2.GetRepositoriesByFullNameRequest(full_names=list(full_names)),
        )
        return list(response.repositories)

    async def set_repository_contributor(self, repository_id: str, user_id: str, repository_role: int) -> None:
        """``REPOSITORY_ROLE_UNSPECIFIED`` removes the user's explicit role."""
        await self._call(
            "SetRepositoryContributor",
            repository_pb2.SetRepositoryContributorRequest(
                repository_id=repository_id, user_id=user_id, repository_role=repository_role
            ),
        )

    async def list_repository_contributors(
        self,
        repository_id: str,
        page_size: int = 0,
        page_token: str = "",
        reverse: bool = False,
        query: str = "",
    ) -> tuple[list[repository_pb2.RepositoryContributor], str]:
        response = await self._call(
            "ListRepositoryContributors",
            repository_pb2.ListRepositoryContributorsRequest(
                repository_id=repository_id,
                page_size=page_size,
                page_token=page_token,
                reverse=reverse,
                query=query,
            ),
        )
        return list(response.users), response.next_page_token
