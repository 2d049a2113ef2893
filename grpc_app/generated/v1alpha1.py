"""Bindings for ``buf.alpha.registry.v1alpha1`` and the schemas it imports.

Importing this module loads every schema file once; ``SERVICES`` describes
each bound service (stub, servicer base, registration function, methods).
"""
from __future__ import annotations

from dataclasses import dataclass
from types import ModuleType
from typing import Any, Optional

from grpc_app.generated import load_protos, load_protos_and_services


PACKAGE = "buf.alpha.registry.v1alpha1"
_PREFIX = "buf/alpha/registry/v1alpha1/"

image_pb2 = load_protos("buf/alpha/image/v1/image.proto")
validate_pb2 = load_protos("buf/alpha/validate/v1alpha1/validate.proto")

role_pb2 = load_protos(_PREFIX + "role.proto")
scope_pb2 = load_protos(_PREFIX + "scope.proto")
verification_status_pb2 = load_protos(_PREFIX + "verification_status.proto")
user_pb2 = load_protos(_PREFIX + "user.proto")
repository_tag_pb2 = load_protos(_PREFIX + "repository_tag.proto")
repository_commit_pb2 = load_protos(_PREFIX + "repository_commit.proto")
plugin_curation_pb2 = load_protos(_PREFIX + "plugin_curation.proto")

authz_pb2, authz_pb2_grpc = load_protos_and_services(_PREFIX + "authz.proto")
convert_pb2, convert_pb2_grpc = load_protos_and_services(_PREFIX + "convert.proto")
doc_pb2, doc_pb2_grpc = load_protos_and_services(_PREFIX + "doc.proto")
generate_pb2, generate_pb2_grpc = load_protos_and_services(_PREFIX + "generate.proto")
labels_pb2, labels_pb2_grpc = load_protos_and_services(_PREFIX + "labels.proto")
organization_pb2, organization_pb2_grpc = load_protos_and_services(_PREFIX + "organization.proto")
repository_pb2, repository_pb2_grpc = load_protos_and_services(_PREFIX + "repository.proto")
resource_pb2, resource_pb2_grpc = load_protos_and_services(_PREFIX + "resource.proto")
schema_pb2, schema_pb2_grpc = load_protos_and_services(_PREFIX + "schema.proto")
search_pb2, search_pb2_grpc = load_protos_and_services(_PREFIX + "search.proto")
webhook_pb2, webhook_pb2_grpc = load_protos_and_services(_PREFIX + "webhook.proto")


@dataclass(frozen=True)
class ServiceBinding:
    """Generated artifacts of one service, looked up by naming convention."""

    name: str
    pb2: ModuleType
    pb2_grpc: ModuleType

    @property
    def full_name(self) -> str:
        return f"{PACKAGE}.{self.name}"

    @property
    def descriptor(self):
        return self.pb2.DESCRIPTOR.services_by_name[self.name]

    @property
    def methods(self) -> tuple[str, ...]:
        return tuple(m.name for m in self.descriptor.methods)

    @property
    def stub(self) -> type:
        return getattr(self.pb2_grpc, f"{self.name}Stub")

    @property
    def servicer(self) -> type:
        return getattr(self.pb2_grpc, f"{self.name}Servicer")

    def method_path(self, method: str) -> str:
        return f"/{self.full_name}/{method}"

    def add_to_server(self, servicer: Any, server: Any) -> None:
        getattr(self.pb2_grpc, f"add_{self.name}Servicer_to_server")(servicer, server)

    def overrides(self, behavior: Any, method: str) -> bool:
        """True when ``behavior`` is not the generated base servicer's ``method``."""
        return getattr(behavior, "__func__", behavior) is not getattr(self.servicer, method, None)


SERVICES: dict[str, ServiceBinding] = {
    binding.name: binding
    for binding in (
        ServiceBinding("AuthzService", authz_pb2, authz_pb2_grpc),
        ServiceBinding("ConvertService", convert_pb2, convert_pb2_grpc),
        ServiceBinding("DocService", doc_pb2, doc_pb2_grpc),
        ServiceBinding("GenerateService", generate_pb2, generate_pb2_grpc),
        ServiceBinding("LabelService", labels_pb2, labels_pb2_grpc),
        ServiceBinding("OrganizationService", organization_pb2, organization_pb2_grpc),
        ServiceBinding("RepositoryService", repository_pb2, repository_pb2_grpc),
        ServiceBinding("ResourceService", resource_pb2, resource_pb2_grpc),
        ServiceBinding("SchemaService", schema_pb2, schema_pb2_grpc),
        ServiceBinding("SearchService", search_pb2, search_pb2_grpc),
        ServiceBinding("WebhookService", webhook_pb2, webhook_pb2_grpc),
    )
}


def binding_for(method_path: str) -> Optional[ServiceBinding]:
    """``/buf.alpha.registry.v1alpha1.LabelService/GetLabels`` -> the LabelService binding."""
    service = method_path.lstrip("/").split("/", 1)[0]
    package, _, name = service.rpartition(".")
    if package != PACKAGE:
        return None
    return SERVICES.get(name)
