from datetime import datetime, timezone

import pytest

from core.exceptions import ValidationException
from grpc_app.enums import enum_name, enum_names, enum_value
from grpc_app.generated.v1alpha1 import (
    labels_pb2,
    repository_commit_pb2,
    repository_pb2,
    resource_pb2,
    search_pb2,
    webhook_pb2,
)
from grpc_app.mappers.messages import (
    decode,
    encode,
    from_dict,
    from_json,
    from_timestamp,
    to_dict,
    to_json,
    to_timestamp,
)


def _repository() -> repository_pb2.Repository:
    repo = repository_pb2.Repository(
        id="r-1",
        name="weather",
        organization_id="org-1",
        visibility=repository_pb2.VISIBILITY_PUBLIC,
        owner_name="acme",
        default_branch="main",
    )
    repo.create_time.CopyFrom(to_timestamp(datetime(2024, 5, 1, 12, 30, tzinfo=timezone.utc)))
    return repo


def test_binary_round_trip():
    repo = _repository()
    decoded = decode(repository_pb2.Repository, encode(repo))
    assert decoded == repo
    assert decoded.WhichOneof("owner") == "organization_id"
    assert from_timestamp(decoded.create_time) == datetime(2024, 5, 1, 12, 30, tzinfo=timezone.utc)


def test_json_round_trip():
    repo = _repository()
    text = to_json(repo)
    assert '"ownerName": "acme"' in text
    assert '"visibility": "VISIBILITY_PUBLIC"' in text
    assert from_json(repository_pb2.Repository, text) == repo


def test_dict_uses_proto_field_names():
    data = to_dict(_repository())
    assert data["owner_name"] == "acme"
    assert "deprecated" not in data
    assert from_dict(repository_pb2.Repository, data) == _repository()


def test_decode_rejects_truncated_payload():
    with pytest.raises(ValidationException):
        decode(repository_pb2.Repository, b"\x0a\x05ab")


def test_from_json_unknown_field():
    with pytest.raises(ValidationException):
        from_json(labels_pb2.LabelValue, '{"commitId": "c1", "bogus": 1}')
    msg = from_json(labels_pb2.LabelValue, '{"commitId": "c1", "bogus": 1}', ignore_unknown_fields=True)
    assert msg.commit_id == "c1"


def test_field_numbers():
    def number(message_type, field):
        return message_type.DESCRIPTOR.fields_by_name[field].number

    assert number(repository_pb2.Repository, "default_branch") == 13
    assert number(repository_pb2.Repository, "user_id") == 5
    assert number(labels_pb2.Label, "label_value") == 3
    assert number(labels_pb2.MoveLabelRequest, "to") == 3
    assert number(webhook_pb2.CreateWebhookRequest, "callback_url") == 4
    assert number(repository_commit_pb2.RepositoryCommit, "b5_digest") == 14
    assert number(resource_pb2.Resource, "plugin") == 2
    assert number(search_pb2.SearchResult, "curated_plugin") == 7


def test_optional_presence():
    req = labels_pb2.CreateLabelRequest(label=labels_pb2.Label(name="v1"))
    assert not req.HasField("author")
    assert not req.HasField("create_time")
    req.author = ""
    assert req.HasField("author")


def test_keyword_named_field():
    req = labels_pb2.MoveLabelRequest(**{"from": labels_pb2.LabelValue(commit_id="a")})
    assert getattr(req, "from").commit_id == "a"
    assert decode(labels_pb2.MoveLabelRequest, encode(req)) == req


def test_unknown_enum_value_falls_back_to_unspecified():
    assert enum_name(labels_pb2.LabelNamespace, labels_pb2.LABEL_NAMESPACE_BRANCH) == "LABEL_NAMESPACE_BRANCH"
    assert enum_name(labels_pb2.LabelNamespace, 99) == "LABEL_NAMESPACE_UNSPECIFIED"
    assert enum_name(webhook_pb2.WebhookEvent, -1) == "WEBHOOK_EVENT_UNSPECIFIED"
    assert enum_value(labels_pb2.LabelNamespace, "LABEL_NAMESPACE_TAG") == 1
    assert enum_value(labels_pb2.LabelNamespace, "NOPE") == 0


def test_unknown_enum_value_survives_the_wire():
    label = labels_pb2.Label(namespace=42, name="x")
    decoded = decode(labels_pb2.Label, encode(label))
    assert decoded.namespace == 42
    assert enum_name(labels_pb2.LabelNamespace, decoded.namespace) == "LABEL_NAMESPACE_UNSPECIFIED"


def test_enum_names_in_declaration_order():
    assert enum_names(search_pb2.SearchFilter)[:4] == [
        "SEARCH_FILTER_UNSPECIFIED",
        "SEARCH_FILTER_USER",
        "SEARCH_FILTER_ORGANIZATION",
        "SEARCH_FILTER_REPOSITORY",
    ]


def test_naive_datetime_is_utc():
    ts = to_timestamp(datetime(2024, 1, 1))
    assert ts.seconds == 1704067200
    assert to_timestamp(None) is None
