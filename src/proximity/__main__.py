"""
Service entrypoint: python -m proximity
"""

import logging

import uvicorn

from proximity.app import app
from proximity.settings import settings

logger = logging.getLogger("proximity.app")


class ProximityServer(uvicorn.Server):
    """uvicorn server that ends open event streams as soon as shutdown starts.

    uvicorn waits for open connections to finish before it runs the lifespan
    shutdown, and an event stream only finishes once its subscriber is
    detached, so the broadcaster has to be closed first.
    """

    async def shutdown(self, sockets=None):
        broadcaster = getattr(self.config.app.state, "broadcaster", None)
        if broadcaster is not None:
            logger.info("Shutdown requested, closing open streams")
            broadcaster.close()
        await super().shutdown(sockets=sockets)


def main() -> None:
    config = uvicorn.Config(
        app,
        host=settings.api_host,
        port=settings.port,
        reload=False,
        timeout_graceful_shutdown=settings.shutdown_grace_seconds,
    )
    ProximityServer(config).run()


if __name__ == "__main__":
    main()
