"""gRPC layer for the buf registry v1alpha1 API.

This package hosts:
- Protocol buffers (in `protos/`) and the bindings compiled from them (in `generated/`).
- Server bootstrap, interceptors and the CEL message validator.
- Typed registry clients (in `client/`).
"""
