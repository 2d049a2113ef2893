"""
structlog setup shared by the server, the interceptors and the registry clients.

stdlib ``logging`` records (grpc, asyncio) go through the same processor chain,
so every line carries the request id bound by the request-id interceptors.
"""
import logging
import json
from typing import Any, List, Optional

import structlog
from structlog.processors import TimeStamper, add_log_level, JSONRenderer
from structlog.dev import ConsoleRenderer
from structlog.contextvars import merge_contextvars
from structlog.stdlib import ProcessorFormatter

from core.config import settings


def get_renderer(debug: bool) -> Any:
    """Console output while debugging, one JSON object per line otherwise."""
    if debug:
        return ConsoleRenderer(colors=True)

    # structlog passes default= and sort_keys= through to the serializer
    def _dumps(obj, default=None, **kwargs):
        return json.dumps(obj, ensure_ascii=False, default=default, **kwargs)
    return JSONRenderer(serializer=_dumps)


def resolve_level(name: str, debug: bool = False) -> int:
    if debug:
        return logging.DEBUG
    level = logging.getLevelName(name.upper())
    return level if isinstance(level, int) else logging.INFO


def configure_logging(level: Optional[str] = None, debug: Optional[bool] = None) -> None:
    """Configure structlog and bridge stdlib logging onto the same chain.

    ``level`` and ``debug`` default to ``LOG_LEVEL`` and ``DEBUG`` from settings.
    """
    debug = settings.DEBUG if debug is None else debug
    shared_pre_chain: List[Any] = [
        merge_contextvars,
        add_log_level,
        TimeStamper(fmt="iso"),
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    structlog.configure(
        processors=[
            *shared_pre_chain,
            ProcessorFormatter.wrap_for_formatter,
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    formatter = ProcessorFormatter(
        foreign_pre_chain=shared_pre_chain,
        processors=[
            ProcessorFormatter.remove_processors_meta,
            get_renderer(debug),
        ],
    )

    handler = logging.StreamHandler()
    handler.setFormatter(formatter)

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(resolve_level(level or settings.LOG_LEVEL, debug))


def get_logger(name: str = __name__) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)


configure_logging()
