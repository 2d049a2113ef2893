from __future__ import annotations

from typing import Iterable, Optional

from google.protobuf import descriptor_pb2

from grpc_app.client.base import BaseRegistryClient
from grpc_app.generated.v1alpha1 import schema_pb2


class SchemaClient(BaseRegistryClient):
    service_name = "SchemaService"

    async def get_schema(
        self,
        owner: str,
        repository: str,
        *,
        version: str = "",
        types: Iterable[str] = (),
        if_not_commit: str = "",
        exclude_custom_options: bool = False,
        exclude_known_extensions: bool = False,
    ) -> tuple[str, descriptor_pb2.FileDescriptorSet]:
        """Returns ``(resolved commit, file descriptors)``.

        The descriptor set is empty when ``if_not_commit`` matched the resolved commit.
        """
        request = schema_pb2.GetSchemaRequest(
            owner=owner,
            repository=repository,
            version=version,
            types=list(types),
            if_not_commit=if_not_commit,
            exclude_custom_options=exclude_custom_options,
            exclude_known_extensions=exclude_known_extensions,
        )
        response = await self._call("GetSchema", request)
        return response.commit, response.schema_files

    async def convert_message(
        self,
        owner: str,
        repository: str,
        message_name: str,
        input_data: bytes,
        *,
        input_format: int = schema_pb2.FORMAT_BINARY,
        version: str = "",
        discard_unknown: bool = False,
        output_binary: Optional[schema_pb2.BinaryOutputOptions] = None,
        output_json: Optional[schema_pb2.JSONOutputOptions] = None,
        output_text: Optional[schema_pb2.TextOutputOptions] = None,
    ) -> tuple[str, bytes]:
        """Returns ``(resolved commit, output data)``; at most one output option may be given."""
        outputs = {
            "output_binary": output_binary,
            "output_json": output_json,
            "output_text": output_text,
        }
        chosen = {k: v for k, v in outputs.items() if v is not None}
        if len(chosen) > 1:
            raise ValueError(f"only one output format may be set, got {', '.join(sorted(chosen))}")
        request = schema_pb2.ConvertMessageRequest(
            owner=owner,
            repository=repository,
            version=version,
            message_name=message_name,
            input_format=input_format,
            input_data=input_data,
            discard_unknown=discard_unknown,
            **chosen,
        )
        response = await self._call("ConvertMessage", request)
        return response.commit, response.output_data
