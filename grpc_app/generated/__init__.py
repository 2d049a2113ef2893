"""Protobuf/gRPC bindings compiled from ``grpc_app/protos`` at import time.

``grpc.protos`` / ``grpc.protos_and_services`` (grpcio-tools) resolve proto
paths against ``sys.path``, so the proto root is appended there once. Module
names mirror the proto paths, e.g. ``buf/alpha/registry/v1alpha1/labels.proto``
becomes ``buf.alpha.registry.v1alpha1.labels_pb2``.
"""
from __future__ import annotations

import functools
import os
import sys
from types import ModuleType

import grpc
import grpc_tools


PROTO_ROOT = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "protos")
# google/protobuf/*.proto shipped with grpcio-tools, for imports of well-known types
WELL_KNOWN_PROTO_ROOT = os.path.join(os.path.dirname(os.path.abspath(grpc_tools.__file__)), "_proto")

for _include in (PROTO_ROOT, WELL_KNOWN_PROTO_ROOT):
    if _include not in sys.path:
        sys.path.append(_include)


@functools.lru_cache(maxsize=None)
def load_protos(path: str) -> ModuleType:
    """Message and enum module (``*_pb2``) for a proto path relative to ``PROTO_ROOT``."""
    return grpc.protos(path)


@functools.lru_cache(maxsize=None)
def load_protos_and_services(path: str) -> tuple[ModuleType, ModuleType]:
    """``(*_pb2, *_pb2_grpc)`` pair for a proto path that declares a service."""
    return grpc.protos_and_services(path)
