"""Process entry point: uvicorn with shutdown handled by ShutdownCoordinator."""
from __future__ import annotations

import asyncio
import contextlib
import logging
from typing import Iterator

import uvicorn

from langid.api.main import create_app
from langid.config.service import ServiceConfig, load_service_config
from langid.core.logger import configure
from langid.gateway.shutdown import ShutdownCoordinator

logger = logging.getLogger(__name__)


class _Server(uvicorn.Server):
    """uvicorn server that leaves SIGTERM/SIGINT to the coordinator."""

    @contextlib.contextmanager
    def capture_signals(self) -> Iterator[None]:
        yield

    def install_signal_handlers(self) -> None:
        # Older uvicorn releases call this instead of capture_signals().
        return None


def build_server(config: ServiceConfig) -> _Server:
    app = create_app(config)
    return _Server(
        uvicorn.Config(
            app,
            host=config.host,
            port=config.port,
            proxy_headers=config.trust_proxy,
            forwarded_allow_ips="*" if config.trust_proxy else None,
            log_config=None,
            access_log=False,
        )
    )


async def serve(config: ServiceConfig) -> None:
    server = build_server(config)
    serve_task = asyncio.ensure_future(server.serve())

    async def drain() -> None:
        # uvicorn stops listening, waits for open requests, then runs lifespan shutdown.
        server.should_exit = True
        await asyncio.shield(serve_task)

    coordinator = ShutdownCoordinator(server.config.app.state.pipeline.lifecycle, drain=drain)
    coordinator.install(asyncio.get_running_loop())

    logger.info("listening on %s:%d", config.host, config.port)
    await serve_task
    await coordinator.wait()


def run() -> None:
    configure()
    asyncio.run(serve(load_service_config()))


if __name__ == "__main__":
    run()
