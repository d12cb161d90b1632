from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from typing import Any

import uvicorn

from vedabeam.api.main import create_app
from vedabeam.config import get_settings

logger = logging.getLogger(__name__)


def _shutdown_on_unhandled_error(
    server: uvicorn.Server,
) -> Callable[[asyncio.AbstractEventLoop, dict[str, Any]], None]:
    def handler(loop: asyncio.AbstractEventLoop, context: dict[str, Any]) -> None:
        logger.critical(
            "Unhandled error in event loop: %s",
            context.get("message"),
            exc_info=context.get("exception"),
            extra={"event_type": "app.fatal"},
        )
        server.should_exit = True

    return handler


async def serve() -> None:
    settings = get_settings()
    config = uvicorn.Config(
        create_app(settings),
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
        proxy_headers=True,
        forwarded_allow_ips=settings.forwarded_allow_ips,
        timeout_graceful_shutdown=settings.shutdown_timeout_seconds,
    )
    server = uvicorn.Server(config)
    asyncio.get_running_loop().set_exception_handler(_shutdown_on_unhandled_error(server))
    logger.info(
        "Starting VedaBeam landing page on %s:%d (environment=%s)",
        settings.host,
        settings.port,
        settings.environment,
    )
    await server.serve()


def main() -> None:
    asyncio.run(serve())


if __name__ == "__main__":
    main()
