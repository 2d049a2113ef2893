from datetime import datetime, timezone

import grpc
import pytest

from grpc_app.client import ClientProvider, token_metadata_provider
from grpc_app.generated.v1alpha1 import (
    authz_pb2,
    authz_pb2_grpc,
    labels_pb2,
    labels_pb2_grpc,
    repository_pb2,
    repository_pb2_grpc,
    webhook_pb2,
    webhook_pb2_grpc,
)
from grpc_app.interceptors.request_id import REQUEST_ID_META_KEY


class FakeLabels(labels_pb2_grpc.LabelServiceServicer):
    def __init__(self):
        self.labels = {}
        self.metadata = []

    async def CreateLabel(self, request, context):  # type: ignore[override]
        self.metadata.append(dict(context.invocation_metadata()))
        label = labels_pb2.Label()
        label.CopyFrom(request.label)
        author = request.author if request.HasField("author") else None
        self.labels[label.name] = (label, author)
        return labels_pb2.CreateLabelResponse(commit_id=label.label_value.commit_id)

    async def MoveLabel(self, request, context):  # type: ignore[override]
        label, _ = self.labels[request.label.name]
        if label.label_value.commit_id != getattr(request, "from").commit_id:
            await context.abort(grpc.StatusCode.FAILED_PRECONDITION, "label moved concurrently")
        label.label_value.CopyFrom(request.to)
        return labels_pb2.MoveLabelResponse()

    async def GetLabels(self, request, context):  # type: ignore[override]
        labels = [label for label, _ in self.labels.values()]
        if request.HasField("namespace"):
            labels = [label for label in labels if label.namespace == request.namespace]
        return labels_pb2.GetLabelsResponse(label=labels)


class FakeRepositories(repository_pb2_grpc.RepositoryServiceServicer):
    async def ListRepositories(self, request, context):  # type: ignore[override]
        start = int(request.page_token or 0)
        names = [f"repo-{i}" for i in range(5)]
        page = names[start:start + request.page_size]
        next_token = str(start + request.page_size) if start + request.page_size < len(names) else ""
        return repository_pb2.ListRepositoriesResponse(
            repositories=[repository_pb2.Repository(name=n) for n in page],
            next_page_token=next_token,
        )

    async def GetRepositoryByFullName(self, request, context):  # type: ignore[override]
        await context.abort(grpc.StatusCode.NOT_FOUND, f"{request.full_name} not found")


class FakeAuthz(authz_pb2_grpc.AuthzServiceServicer):
    async def UserCanReadPlugin(self, request, context):  # type: ignore[override]
        return authz_pb2.UserCanReadPluginResponse(authorized=request.owner == "acme")


class FakeWebhooks(webhook_pb2_grpc.WebhookServiceServicer):
    async def CreateWebhook(self, request, context):  # type: ignore[override]
        return webhook_pb2.CreateWebhookResponse(webhook=webhook_pb2.Webhook(
            event=request.webhook_event,
            webhook_id="wh-1",
            owner_name=request.owner_name,
            repository_name=request.repository_name,
            callback_url=request.callback_url,
        ))


@pytest.fixture
async def registry(start_server):
    labels = FakeLabels()
    target = await start_server({
        "LabelService": labels,
        "RepositoryService": FakeRepositories(),
        "AuthzService": FakeAuthz(),
        "WebhookService": FakeWebhooks(),
    })
    return target, labels


async def test_label_client_round_trip(registry):
    target, _ = registry
    async with ClientProvider(address_mapper=lambda address: target) as provider:
        client = provider.labels("buf.build")
        commit_id = await client.create_label(
            labels_pb2.LABEL_NAMESPACE_TAG,
            "v1.0.0",
            "c1",
            author="alice",
            create_time=datetime(2024, 1, 1, tzinfo=timezone.utc),
        )
        assert commit_id == "c1"
        await client.create_label(labels_pb2.LABEL_NAMESPACE_BRANCH, "main", "c1")

        await client.move_label(labels_pb2.LABEL_NAMESPACE_TAG, "v1.0.0", "c1", "c2")

        tags = await client.get_labels("acme/weather", "", namespace=labels_pb2.LABEL_NAMESPACE_TAG)
        assert [(l.name, l.label_value.commit_id) for l in tags] == [("v1.0.0", "c2")]
        assert len(await client.get_labels("acme/weather", "")) == 2

        with pytest.raises(grpc.aio.AioRpcError) as ei:
            await client.move_label(labels_pb2.LABEL_NAMESPACE_TAG, "v1.0.0", "c1", "c3")
        assert ei.value.code() == grpc.StatusCode.FAILED_PRECONDITION


async def test_optional_fields_only_sent_when_given(registry):
    target, labels = registry
    async with ClientProvider(address_mapper=lambda address: target) as provider:
        client = provider.labels()
        await client.create_label(labels_pb2.LABEL_NAMESPACE_TAG, "a", "c1")
        await client.create_label(labels_pb2.LABEL_NAMESPACE_TAG, "b", "c1", author="")
    assert labels.labels["a"][1] is None
    assert labels.labels["b"][1] == ""


async def test_list_methods_return_items_and_next_page_token(registry):
    target, _ = registry
    async with ClientProvider(address_mapper=lambda address: target) as provider:
        client = provider.repository()
        seen, token = [], ""
        while True:
            repos, token = await client.list_repositories(page_size=2, page_token=token)
            seen.extend(r.name for r in repos)
            if not token:
                break
        assert seen == [f"repo-{i}" for i in range(5)]


async def test_errors_propagate_unchanged(registry):
    target, _ = registry
    async with ClientProvider(address_mapper=lambda address: target) as provider:
        with pytest.raises(grpc.aio.AioRpcError) as ei:
            await provider.repository().get_repository_by_full_name("acme/missing")
        assert ei.value.code() == grpc.StatusCode.NOT_FOUND
        assert ei.value.details() == "acme/missing not found"

        with pytest.raises(grpc.aio.AioRpcError) as ei:
            await provider.search().search("weather")
        assert ei.value.code() == grpc.StatusCode.UNIMPLEMENTED


async def test_authz_and_webhook_clients(registry):
    target, _ = registry
    async with ClientProvider(address_mapper=lambda address: target) as provider:
        assert await provider.authz().user_can_read_plugin("acme", "protoc-gen-go") is True
        assert await provider.authz().user_can_read_plugin("other", "protoc-gen-go") is False

        webhook = await provider.webhook().create_webhook("acme", "weather", "https://example.com/hook")
        assert webhook.webhook_id == "wh-1"
        assert webhook.event == webhook_pb2.WEBHOOK_EVENT_REPOSITORY_PUSH

        with pytest.raises(grpc.aio.AioRpcError) as ei:
            await provider.webhook().create_webhook("acme", "", "https://example.com/hook")
        assert ei.value.code() == grpc.StatusCode.INVALID_ARGUMENT


async def test_metadata_provider_and_request_id(registry):
    target, labels = registry
    provider = ClientProvider(
        address_mapper=lambda address: target,
        metadata_provider=token_metadata_provider("secret"),
    )
    try:
        await provider.labels().create_label(labels_pb2.LABEL_NAMESPACE_TAG, "v1", "c1")
    finally:
        await provider.aclose()
    md = labels.metadata[-1]
    assert md["authorization"] == "Bearer secret"
    assert md[REQUEST_ID_META_KEY]


async def test_metadata_provider_receives_unmapped_address(registry):
    target, labels = registry
    asked = []

    def metadata_for(address):
        asked.append(address)
        return (("x-remote", address),)

    async with ClientProvider(address_mapper=lambda address: target, metadata_provider=metadata_for) as provider:
        await provider.labels("buf.build").create_label(labels_pb2.LABEL_NAMESPACE_TAG, "v1", "c1")
    assert asked == ["buf.build"]
    assert labels.metadata[-1]["x-remote"] == "buf.build"


async def test_channels_cached_per_mapped_address():
    opened = []

    def factory(address):
        opened.append(address)
        return grpc.aio.insecure_channel(address)

    mapping = {"buf.build": "127.0.0.1:1", "mirror.buf.build": "127.0.0.1:1", "other": "127.0.0.1:2"}
    provider = ClientProvider(address_mapper=mapping.__getitem__, channel_factory=factory)
    try:
        provider.labels("buf.build")
        provider.webhook("buf.build")
        provider.repository("mirror.buf.build")
        provider.search("other")
        assert opened == ["127.0.0.1:1", "127.0.0.1:2"]
        assert provider.channel("buf.build") is provider.channel("mirror.buf.build")
    finally:
        await provider.aclose()
    provider.labels("buf.build")
    assert opened == ["127.0.0.1:1", "127.0.0.1:2", "127.0.0.1:1"]
    await provider.aclose()


def test_token_metadata_provider_without_token():
    assert tuple(token_metadata_provider(None)("buf.build")) == ()
