"""Message-level validation driven by the ``(buf.alpha.validate.v1alpha1.expr)`` option.

The option carries a CEL expression evaluated with ``this`` bound to the
message. A ``true`` result passes. A string result is read as a boolean
(``1``, ``t``, ``T``, ``TRUE``, ``true``, ``True`` and their false
counterparts); a string that is not a boolean is the error message itself.
Anything else fails with a generic message naming the type.

``this`` is a typed CEL map of the populated fields (see ``message_to_cel``),
so integers, bytes and timestamps compare as their CEL types.
"""
from __future__ import annotations

import threading
from datetime import timezone
from typing import Optional

import celpy
from celpy import celtypes
from google.protobuf import json_format
from google.protobuf.descriptor import Descriptor, FieldDescriptor
from google.protobuf.message import Message

from core.exceptions import ValidationException
from core.logging_config import get_logger
from grpc_app.generated.v1alpha1 import validate_pb2


logger = get_logger(__name__)

_TRUE_STRINGS = frozenset({"1", "t", "T", "TRUE", "true", "True"})
_FALSE_STRINGS = frozenset({"0", "f", "F", "FALSE", "false", "False"})

_env = celpy.Environment()
_lock = threading.Lock()
# full message name -> compiled program, or None when the type has no expression
_programs: dict[str, Optional[celpy.Runner]] = {}


def parse_bool(value: str) -> Optional[bool]:
    if value in _TRUE_STRINGS:
        return True
    if value in _FALSE_STRINGS:
        return False
    return None


def expression_for(descriptor: Descriptor) -> Optional[str]:
    """The CEL expression attached to a message type, or None."""
    options = descriptor.GetOptions()
    if not options.HasExtension(validate_pb2.expr):
        return None
    return options.Extensions[validate_pb2.expr].expression


def compile_expression(expression: str) -> celpy.Runner:
    if not expression.strip():
        raise ValueError("validation expression is empty")
    return _env.program(_env.compile(expression))


def _compile(descriptor: Descriptor) -> Optional[celpy.Runner]:
    expression = expression_for(descriptor)
    if expression is None:
        return None
    try:
        return compile_expression(expression)
    except ValueError as exc:
        raise ValueError(f"{descriptor.full_name}: {exc}") from exc


def program_for(descriptor: Descriptor) -> Optional[celpy.Runner]:
    with _lock:
        if descriptor.full_name not in _programs:
            _programs[descriptor.full_name] = _compile(descriptor)
        return _programs[descriptor.full_name]


_WRAPPERS = frozenset({
    "google.protobuf.DoubleValue",
    "google.protobuf.FloatValue",
    "google.protobuf.Int64Value",
    "google.protobuf.UInt64Value",
    "google.protobuf.Int32Value",
    "google.protobuf.UInt32Value",
    "google.protobuf.BoolValue",
    "google.protobuf.StringValue",
    "google.protobuf.BytesValue",
})
_JSON_TYPES = frozenset({"google.protobuf.Struct", "google.protobuf.Value", "google.protobuf.ListValue"})

_SCALARS = {
    FieldDescriptor.CPPTYPE_INT32: celtypes.IntType,
    FieldDescriptor.CPPTYPE_INT64: celtypes.IntType,
    FieldDescriptor.CPPTYPE_UINT32: celtypes.UintType,
    FieldDescriptor.CPPTYPE_UINT64: celtypes.UintType,
    FieldDescriptor.CPPTYPE_DOUBLE: celtypes.DoubleType,
    FieldDescriptor.CPPTYPE_FLOAT: celtypes.DoubleType,
    FieldDescriptor.CPPTYPE_BOOL: celtypes.BoolType,
    FieldDescriptor.CPPTYPE_ENUM: celtypes.IntType,
}


def _scalar_to_cel(field: FieldDescriptor, value):
    if field.cpp_type == FieldDescriptor.CPPTYPE_STRING:
        if field.type == FieldDescriptor.TYPE_BYTES:
            return celtypes.BytesType(value)
        return celtypes.StringType(value)
    return _SCALARS[field.cpp_type](value)


def _value_to_cel(field: FieldDescriptor, value):
    if field.cpp_type == FieldDescriptor.CPPTYPE_MESSAGE:
        return message_to_cel(value)
    return _scalar_to_cel(field, value)


def message_to_cel(message: Message):
    """Typed CEL value of ``message``.

    Only populated fields appear, so ``has(this.field)`` follows proto
    presence. int64 stays an int, bytes stay bytes, enums are numbers and
    ``Timestamp``/``Duration`` become CEL timestamps and durations.
    """
    full_name = message.DESCRIPTOR.full_name
    if full_name == "google.protobuf.Timestamp":
        return celtypes.TimestampType(message.ToDatetime(tzinfo=timezone.utc))
    if full_name == "google.protobuf.Duration":
        return celtypes.DurationType(message.seconds, message.nanos)
    if full_name in _WRAPPERS:
        return _scalar_to_cel(message.DESCRIPTOR.fields_by_name["value"], message.value)
    if full_name in _JSON_TYPES:
        return celpy.json_to_cel(json_format.MessageToDict(message))

    fields = {}
    for field, value in message.ListFields():
        if field.message_type is not None and field.message_type.GetOptions().map_entry:
            key_field = field.message_type.fields_by_name["key"]
            value_field = field.message_type.fields_by_name["value"]
            converted = celtypes.MapType({
                _scalar_to_cel(key_field, k): _value_to_cel(value_field, v) for k, v in value.items()
            })
        elif field.label == FieldDescriptor.LABEL_REPEATED:
            converted = celtypes.ListType([_value_to_cel(field, v) for v in value])
        else:
            converted = _value_to_cel(field, value)
        fields[celtypes.StringType(field.name)] = converted
    return celtypes.MapType(fields)


def _activation(message: Message) -> dict:
    return {"this": message_to_cel(message)}


def validate(message: Message) -> None:
    """Raise ``ValidationException`` when ``message`` fails its expression."""
    descriptor = message.DESCRIPTOR
    program = program_for(descriptor)
    if program is None:
        return

    generic = f"{descriptor.name} is invalid; see the message definition for details"
    try:
        result = program.evaluate(_activation(message))
    except celpy.CELEvalError as exc:
        logger.debug("validation_eval_error", message_type=descriptor.full_name, error=str(exc))
        raise ValidationException(generic, details={"message_type": descriptor.full_name}) from exc

    if isinstance(result, celtypes.BoolType):
        if result:
            return
    elif isinstance(result, celtypes.StringType):
        parsed = parse_bool(str(result))
        if parsed is None:
            raise ValidationException(str(result), details={"message_type": descriptor.full_name})
        if parsed:
            return
    raise ValidationException(generic, details={"message_type": descriptor.full_name})


def is_valid(message: Message) -> bool:
    try:
        validate(message)
    except ValidationException:
        return False
    return True
