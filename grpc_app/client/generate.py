from __future__ import annotations

from typing import Iterable, Sequence

from grpc_app.client.base import BaseRegistryClient
from grpc_app.generated.v1alpha1 import generate_pb2, image_pb2


class GenerateClient(BaseRegistryClient):
    service_name = "GenerateService"

    async def generate_plugins(
        self,
        image: image_pb2.Image,
        plugins: Iterable[generate_pb2.PluginReference],
        include_imports: bool = False,
    ) -> tuple[list, list[generate_pb2.RuntimeLibrary]]:
        """Returns ``(CodeGeneratorResponse per plugin, runtime libraries)``, in plugin order."""
        request = generate_pb2.GeneratePluginsRequest(
            image=image,
            plugins=list(plugins),
            include_imports=include_imports,
        )
        response = await self._call("GeneratePlugins", request)
        return list(response.responses), list(response.runtime_libraries)

    async def generate_template(
        self,
        image: image_pb2.Image,
        template_owner: str,
        template_name: str,
        template_version: str = "",
    ) -> tuple[list[generate_pb2.File], list[generate_pb2.RuntimeLibrary]]:
        request = generate_pb2.GenerateTemplateRequest(
            image=image,
            template_owner=template_owner,
            template_name=template_name,
            template_version=template_version,
        )
        response = await self._call("GenerateTemplate", request)
        return list(response.files), list(response.runtime_libraries)


def plugin_reference(owner: str, name: str, version: str = "", parameters: Sequence[str] = ()) -> generate_pb2.PluginReference:
    return generate_pb2.PluginReference(owner=owner, name=name, version=version, parameters=list(parameters))
