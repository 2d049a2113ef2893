from __future__ import annotations

from typing import Iterable

from grpc_app.client.base import BaseRegistryClient
from grpc_app.generated.v1alpha1 import repository_commit_pb2, repository_tag_pb2, search_pb2


class SearchClient(BaseRegistryClient):
    service_name = "SearchService"

    async def search(
        self,
        query: str,
        page_size: int = 0,
        page_token: int = 0,
        filters: Iterable[int] = (),
    ) -> tuple[list[search_pb2.SearchResult], int]:
        """Page tokens are numeric here; 0 means first page / no more pages."""
        response = await self._call(
            "Search",
            search_pb2.SearchRequest(query=query, page_size=page_size, page_token=page_token, filters=list(filters)),
        )
        return list(response.search_results), response.next_page_token

    async def search_tag(
        self,
        repository_owner: str,
        repository_name: str,
        query: str,
        page_size: int = 0,
        page_token: str = "",
        order_by: int = search_pb2.ORDER_BY_UNSPECIFIED,
        reverse: bool = False,
    ) -> tuple[list[repository_tag_pb2.RepositoryTag], str]:
        response = await self._call(
            "SearchTag",
            search_pb2.SearchTagRequest(
                repository_owner=repository_owner,
                repository_name=repository_name,
                query=query,
                page_size=page_size,
                page_token=page_token,
                order_by=order_by,
                reverse=reverse,
            ),
        )
        return list(response.repository_tags), response.next_page_token

    async def search_draft(
        self,
        repository_owner: str,
        repository_name: str,
        query: str,
        page_size: int = 0,
        page_token: str = "",
        order_by: int = search_pb2.ORDER_BY_UNSPECIFIED,
        reverse: bool = False,
    ) -> tuple[list[repository_commit_pb2.RepositoryCommit], str]:
        response = await self._call(
            "SearchDraft",
            search_pb2.SearchDraftRequest(
                repository_owner=repository_owner,
                repository_name=repository_name,
                query=query,
                page_size=page_size,
                page_token=page_token,
                order_by=order_by,
                reverse=reverse,
            ),
        )
        return list(response.repository_commits), response.next_page_token

    async def search_module_content(
        self,
        query: str,
        page_size: int = 0,
        page_token: int = 0,
        filters: Iterable[int] = (),
        repository_full_name: str = "",
        repository_owner: str = "",
    ) -> tuple[list[search_pb2.SearchModuleContentResult], int]:
        response = await self._call(
            "SearchModuleContent",
            search_pb2.SearchModuleContentRequest(
                query=query,
                page_size=page_size,
                page_token=page_token,
                filters=list(filters),
                repository_full_name=repository_full_name,
                repository_owner=repository_owner,
            ),
        )
        return list(response.search_results), response.next_page_token
