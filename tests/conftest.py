"""Pytest bootstrap configuration.

Settings are read at import time, so environment overrides are applied
before any application module is imported.
"""
import os

os.environ.setdefault("DEBUG", "false")
os.environ.setdefault("LOG_LEVEL", "WARNING")

from typing import Any, AsyncIterator, Callable, Mapping, Optional

import pytest


@pytest.fixture
async def start_server() -> AsyncIterator[Callable[..., Any]]:
    """Factory starting an in-process registry server on an ephemeral port.

    Returns the ``host:port`` target; every server started is stopped at teardown.
    """
    from grpc_app.server import build_server

    servers = []

    async def _start(servicers: Optional[Mapping[str, Any]] = None, **kwargs) -> str:
        server = build_server(servicers, **kwargs)
        port = server.add_insecure_port("127.0.0.1:0")
        await server.start()
        servers.append(server)
        return f"127.0.0.1:{port}"

    try:
        yield _start
    finally:
        for server in servers:
            await server.stop(grace=None)
