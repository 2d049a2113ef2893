from __future__ import annotations

from typing import Optional

from grpc_app.client.base import BaseRegistryClient
from grpc_app.generated.v1alpha1 import convert_pb2, image_pb2


class ConvertClient(BaseRegistryClient):
    service_name = "ConvertService"

    async def convert(
        self,
        type_name: str,
        payload: bytes,
        *,
        image: Optional[image_pb2.Image] = None,
        request_format: int = convert_pb2.CONVERT_FORMAT_BIN,
        response_format: int = convert_pb2.CONVERT_FORMAT_JSON,
    ) -> bytes:
        """Convert ``payload`` of ``type_name`` between binary and JSON; returns the converted payload."""
        request = convert_pb2.ConvertRequest(
            type_name=type_name,
            image=image,
            payload=payload,
            request_format=request_format,
            response_format=response_format,
        )
        response = await self._call("Convert", request)
        return response.payload
