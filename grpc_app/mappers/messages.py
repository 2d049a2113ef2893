from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Optional, Type, TypeVar

from google.protobuf import json_format, timestamp_pb2
from google.protobuf.message import DecodeError, Message

from core.exceptions import ValidationException


M = TypeVar("M", bound=Message)


def encode(message: Message) -> bytes:
    return message.SerializeToString()


def decode(message_type: Type[M], data: bytes) -> M:
    message = message_type()
    try:
        message.ParseFromString(data)
    except DecodeError as exc:
        raise ValidationException(
            f"invalid {message_type.DESCRIPTOR.full_name} payload: {exc}",
            details={"message_type": message_type.DESCRIPTOR.full_name},
        ) from exc
    return message


def to_json(message: Message, *, indent: Optional[int] = None, use_proto_names: bool = False) -> str:
    """Canonical proto3 JSON (lowerCamelCase names unless ``use_proto_names``)."""
    return json_format.MessageToJson(
        message,
        indent=indent,
        preserving_proto_field_name=use_proto_names,
    )


def from_json(message_type: Type[M], text: str | bytes, *, ignore_unknown_fields: bool = False) -> M:
    message = message_type()
    try:
        json_format.Parse(text, message, ignore_unknown_fields=ignore_unknown_fields)
    except json_format.ParseError as exc:
        raise ValidationException(
            str(exc),
            details={"message_type": message_type.DESCRIPTOR.full_name},
        ) from exc
    return message


def to_dict(message: Message, *, use_proto_names: bool = True) -> dict[str, Any]:
    return json_format.MessageToDict(message, preserving_proto_field_name=use_proto_names)


def from_dict(message_type: Type[M], data: dict[str, Any], *, ignore_unknown_fields: bool = False) -> M:
    message = message_type()
    try:
        json_format.ParseDict(data, message, ignore_unknown_fields=ignore_unknown_fields)
    except json_format.ParseError as exc:
        raise ValidationException(
            str(exc),
            details={"message_type": message_type.DESCRIPTOR.full_name},
        ) from exc
    return message


def to_timestamp(dt: Optional[datetime]) -> Optional[timestamp_pb2.Timestamp]:
    if dt is None:
        return None
    if dt.tzinfo is None:
        # naive datetimes are taken as UTC
        dt = dt.replace(tzinfo=timezone.utc)
    ts = timestamp_pb2.Timestamp()
    ts.FromDatetime(dt)
    return ts


def from_timestamp(ts: Optional[timestamp_pb2.Timestamp]) -> Optional[datetime]:
    if ts is None:
        return None
    return ts.ToDatetime(tzinfo=timezone.utc)
