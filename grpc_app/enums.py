"""Name/number lookups for generated enums that never raise.

Unknown numbers map to the zero (``*_UNSPECIFIED``) value's name and unknown
names map to ``0``, matching how open proto3 enums are read off the wire.
"""
from __future__ import annotations

from typing import Any


def _descriptor(enum_type: Any):
    # Accepts an EnumTypeWrapper (e.g. labels_pb2.LabelNamespace) or an EnumDescriptor
    return getattr(enum_type, "DESCRIPTOR", enum_type)


def enum_name(enum_type: Any, value: int) -> str:
    descriptor = _descriptor(enum_type)
    value_descriptor = descriptor.values_by_number.get(int(value))
    if value_descriptor is None:
        return descriptor.values_by_number[0].name
    return value_descriptor.name


def enum_value(enum_type: Any, name: str) -> int:
    value_descriptor = _descriptor(enum_type).values_by_name.get(name)
    if value_descriptor is None:
        return 0
    return value_descriptor.number


def enum_names(enum_type: Any) -> list[str]:
    """Declared value names in declaration order."""
    return [v.name for v in _descriptor(enum_type).values]
