from __future__ import annotations

from datetime import datetime
from typing import Optional

from grpc_app.client.base import BaseRegistryClient
from grpc_app.generated.v1alpha1 import labels_pb2
from grpc_app.mappers.messages import to_timestamp


class LabelClient(BaseRegistryClient):
    service_name = "LabelService"

    async def create_label(
        self,
        namespace: int,
        name: str,
        commit_id: str,
        *,
        author: Optional[str] = None,
        create_time: Optional[datetime] = None,
    ) -> str:
        """Create a label pointing at ``commit_id``; returns the commit id."""
        request = labels_pb2.CreateLabelRequest(
            label=labels_pb2.Label(
                namespace=namespace,
                name=name,
                label_value=labels_pb2.LabelValue(commit_id=commit_id),
            ),
        )
        if author is not None:
            request.author = author
        if create_time is not None:
            request.create_time.CopyFrom(to_timestamp(create_time))
        response = await self._call("CreateLabel", request)
        return response.commit_id

    async def move_label(self, namespace: int, name: str, from_commit_id: str, to_commit_id: str) -> None:
        # "from" is a Python keyword, hence the kwargs dict
        request = labels_pb2.MoveLabelRequest(
            label=labels_pb2.Label(namespace=namespace, name=name),
            **{
                "from": labels_pb2.LabelValue(commit_id=from_commit_id),
                "to": labels_pb2.LabelValue(commit_id=to_commit_id),
            },
        )
        await self._call("MoveLabel", request)

    async def get_labels(
        self,
        name: str,
        module_entity_id: str,
        namespace: Optional[int] = None,
    ) -> list[labels_pb2.Label]:
        request = labels_pb2.GetLabelsRequest(name=name, module_entity_id=module_entity_id)
        if namespace is not None:
            request.namespace = namespace
        response = await self._call("GetLabels", request)
        return list(response.label)
