"""Run the registry gRPC server: ``python grpc_main.py``."""
import asyncio
import signal

from core.config import settings
from core.logging_config import get_logger
from grpc_app.generated.v1alpha1 import SERVICES
from grpc_app.server import create_server


logger = get_logger(__name__)


async def main() -> None:
    if not settings.grpc.enabled:
        logger.warning("grpc_disabled", message="gRPC disabled by config (GRPC__ENABLED=false)")
        return

    server = await create_server()
    address = f"{settings.grpc.host}:{settings.grpc.port}"
    logger.info(
        "grpc_starting",
        address=address,
        project=settings.PROJECT_NAME,
        version=settings.VERSION,
        tls=settings.grpc.tls.enabled,
        services=sorted(b.full_name for b in SERVICES.values()),
    )
    await server.start()
    logger.info("grpc_started", address=address)

    stopping = asyncio.Event()
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, stopping.set)
        except NotImplementedError:
            # Windows event loops have no signal handlers; Ctrl+C cancels main() instead
            pass

    try:
        await stopping.wait()
    finally:
        logger.info("grpc_stopping", grace=settings.grpc.shutdown_grace)
        await server.stop(grace=settings.grpc.shutdown_grace)
        logger.info("grpc_stopped")


if __name__ == "__main__":
    asyncio.run(main())
