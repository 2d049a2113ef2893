import pytest

from core.exceptions import ValidationException
from grpc_app import validation
from grpc_app.generated.v1alpha1 import convert_pb2, image_pb2, labels_pb2, organization_pb2, webhook_pb2
from grpc_app.validation import compile_expression, expression_for, is_valid, message_to_cel, parse_bool, validate


GENERIC = "CreateWebhookRequest is invalid; see the message definition for details"


def _webhook_request(**overrides) -> webhook_pb2.CreateWebhookRequest:
    fields = dict(
        webhook_event=webhook_pb2.WEBHOOK_EVENT_REPOSITORY_PUSH,
        owner_name="acme",
        repository_name="weather",
        callback_url="https://example.com/buf.alpha.webhook.v1alpha1.EventService/Event",
    )
    fields.update(overrides)
    return webhook_pb2.CreateWebhookRequest(**fields)


def _override(monkeypatch, message_type, expression: str) -> None:
    monkeypatch.setitem(
        validation._programs,
        message_type.DESCRIPTOR.full_name,
        compile_expression(expression),
    )


def test_expression_read_from_message_option():
    expr = expression_for(webhook_pb2.CreateWebhookRequest.DESCRIPTOR)
    assert expr == "has(this.owner_name) && has(this.repository_name) && has(this.callback_url)"
    assert expression_for(labels_pb2.GetLabelsRequest.DESCRIPTOR) is None


def test_complete_request_passes():
    validate(_webhook_request())
    assert is_valid(_webhook_request())


@pytest.mark.parametrize("missing", ["owner_name", "repository_name", "callback_url"])
def test_missing_field_fails_with_generic_message(missing):
    with pytest.raises(ValidationException) as ei:
        validate(_webhook_request(**{missing: ""}))
    assert ei.value.message == GENERIC
    assert ei.value.details == {"message_type": "buf.alpha.registry.v1alpha1.CreateWebhookRequest"}


def test_message_without_expression_passes():
    validate(labels_pb2.GetLabelsRequest())


def test_string_result_true_passes(monkeypatch):
    _override(monkeypatch, webhook_pb2.CreateWebhookRequest, '"true"')
    validate(webhook_pb2.CreateWebhookRequest())


def test_string_result_false_fails_generic(monkeypatch):
    _override(monkeypatch, webhook_pb2.CreateWebhookRequest, '"F"')
    with pytest.raises(ValidationException) as ei:
        validate(webhook_pb2.CreateWebhookRequest())
    assert ei.value.message == GENERIC


def test_non_boolean_string_is_the_error_message(monkeypatch):
    _override(
        monkeypatch,
        webhook_pb2.CreateWebhookRequest,
        'has(this.callback_url) ? "true" : "callback_url is required"',
    )
    with pytest.raises(ValidationException) as ei:
        validate(_webhook_request(callback_url=""))
    assert ei.value.message == "callback_url is required"
    validate(_webhook_request())


def test_non_boolean_result_fails_generic(monkeypatch):
    _override(monkeypatch, webhook_pb2.CreateWebhookRequest, "1 + 1")
    with pytest.raises(ValidationException) as ei:
        validate(_webhook_request())
    assert ei.value.message == GENERIC


def test_evaluation_error_fails_generic(monkeypatch):
    # owner_name is unset so the map lookup errors
    _override(monkeypatch, webhook_pb2.CreateWebhookRequest, 'this.owner_name == "acme"')
    with pytest.raises(ValidationException) as ei:
        validate(webhook_pb2.CreateWebhookRequest())
    assert ei.value.message == GENERIC
    validate(_webhook_request())


def test_enum_fields_are_numbers(monkeypatch):
    _override(monkeypatch, webhook_pb2.CreateWebhookRequest, "this.webhook_event == 1")
    validate(_webhook_request())


def test_unsigned_fields_compare_as_numbers(monkeypatch):
    _override(monkeypatch, organization_pb2.ListOrganizationsRequest, "this.page_size <= 100u")
    assert is_valid(organization_pb2.ListOrganizationsRequest(page_size=50))
    assert not is_valid(organization_pb2.ListOrganizationsRequest(page_size=500))


def test_timestamps_compare_as_timestamps(monkeypatch):
    _override(
        monkeypatch,
        labels_pb2.CreateLabelRequest,
        '!has(this.create_time) || this.create_time > timestamp("2020-01-01T00:00:00Z")',
    )
    request = labels_pb2.CreateLabelRequest()
    assert is_valid(request)
    request.create_time.FromSeconds(1_700_000_000)
    assert is_valid(request)
    request.create_time.FromSeconds(1_500_000_000)
    assert not is_valid(request)


def test_bytes_and_repeated_fields(monkeypatch):
    _override(monkeypatch, convert_pb2.ConvertRequest, 'this.payload == b"abc" && size(this.image.file) == 2')
    image = image_pb2.Image(file=[image_pb2.ImageFile(name="a.proto"), image_pb2.ImageFile(name="b.proto")])
    assert is_valid(convert_pb2.ConvertRequest(payload=b"abc", image=image))
    assert not is_valid(convert_pb2.ConvertRequest(payload=b"abd", image=image))


def test_message_to_cel_keeps_only_populated_fields():
    value = message_to_cel(_webhook_request(repository_name=""))
    assert set(value) == {"webhook_event", "owner_name", "callback_url"}
    assert value["webhook_event"] == webhook_pb2.WEBHOOK_EVENT_REPOSITORY_PUSH


def test_empty_expression_is_rejected():
    with pytest.raises(ValueError):
        compile_expression("   ")


@pytest.mark.parametrize(
    "text,expected",
    [
        ("1", True), ("t", True), ("T", True), ("TRUE", True), ("true", True), ("True", True),
        ("0", False), ("f", False), ("F", False), ("FALSE", False), ("false", False), ("False", False),
        ("yes", None), ("tRuE", None), ("", None),
    ],
)
def test_parse_bool(text, expected):
    assert parse_bool(text) is expected
