from __future__ import annotations

from grpc_app.client.base import BaseRegistryClient
from grpc_app.generated.v1alpha1 import webhook_pb2


class WebhookClient(BaseRegistryClient):
    service_name = "WebhookService"

    async def create_webhook(
        self,
        owner_name: str,
        repository_name: str,
        callback_url: str,
        webhook_event: int = webhook_pb2.WEBHOOK_EVENT_REPOSITORY_PUSH,
    ) -> webhook_pb2.Webhook:
        request = webhook_pb2.CreateWebhookRequest(
            webhook_event=webhook_event,
            owner_name=owner_name,
            repository_name=repository_name,
            callback_url=callback_url,
        )
        response = await self._call("CreateWebhook", request)
        return response.webhook

    async def delete_webhook(self, webhook_id: str) -> None:
        await self._call("DeleteWebhook", webhook_pb2.DeleteWebhookRequest(webhook_id=webhook_id))

    async def list_webhooks(
        self, owner_name: str, repository_name: str, page_token: str = ""
    ) -> tuple[list[webhook_pb2.Webhook], str]:
        response = await self._call(
            "ListWebhooks",
            webhook_pb2.ListWebhooksRequest(
                owner_name=owner_name, repository_name=repository_name, page_token=page_token
            ),
        )
        return list(response.webhooks), response.next_page_token
