from __future__ import annotations

from grpc_app.client.base import BaseRegistryClient
from grpc_app.generated.v1alpha1 import doc_pb2


class DocClient(BaseRegistryClient):
    service_name = "DocService"

    async def get_source_directory_info(self, owner: str, repository: str, reference: str = "") -> doc_pb2.FileInfo:
        response = await self._call(
            "GetSourceDirectoryInfo",
            doc_pb2.GetSourceDirectoryInfoRequest(owner=owner, repository=repository, reference=reference),
        )
        return response.root

    async def get_source_file(self, owner: str, repository: str, reference: str, path: str) -> bytes:
        response = await self._call(
            "GetSourceFile",
            doc_pb2.GetSourceFileRequest(owner=owner, repository=repository, reference=reference, path=path),
        )
        return response.content

    async def get_module_packages(
        self, owner: str, repository: str, reference: str = ""
    ) -> tuple[str, list[doc_pb2.ModulePackage]]:
        """Returns ``(module name, packages)``."""
        response = await self._call(
            "GetModulePackages",
            doc_pb2.GetModulePackagesRequest(owner=owner, repository=repository, reference=reference),
        )
        return response.name, list(response.module_packages)

    async def get_module_documentation(
        self, owner: str, repository: str, reference: str = ""
    ) -> doc_pb2.ModuleDocumentation:
        response = await self._call(
            "GetModuleDocumentation",
            doc_pb2.GetModuleDocumentationRequest(owner=owner, repository=repository, reference=reference),
        )
        return response.module_documentation

    async def get_package_documentation(
        self, owner: str, repository: str, reference: str, package_name: str
    ) -> doc_pb2.PackageDocumentation:
        response = await self._call(
            "GetPackageDocumentation",
            doc_pb2.GetPackageDocumentationRequest(
                owner=owner, repository=repository, reference=reference, package_name=package_name
            ),
        )
        return response.package_documentation
