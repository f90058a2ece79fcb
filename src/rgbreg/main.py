"""Main entry point - runs the API server and the optional keepalive."""

import asyncio
import logging
import signal

import uvicorn

from rgbreg.api.app import create_app
from rgbreg.config import get_settings
from rgbreg.keepalive import run_keepalive
from rgbreg.registry.store import RegistrationStore

logger = logging.getLogger(__name__)


class Application:
    """Owns the store and the long-running tasks of the process."""

    def __init__(self):
        self.settings = get_settings()
        self.store = None
        self._shutdown_event = asyncio.Event()

    async def start(self):
        """Start all services and block until shutdown is requested."""
        log_level = logging.DEBUG if self.settings.debug else logging.INFO
        logging.basicConfig(
            level=log_level,
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        )

        logger.info("Starting rgbreg...")
        logger.info(f"Environment: {self.settings.environment}")

        self.settings.ensure_data_dir()
        self.store = RegistrationStore(
            self.settings.database_url,
            echo=self.settings.debug and not self.settings.is_production,
        )
        await self.store.init()
        logger.info(f"Database initialized at: {self.store.database_url}")

        tasks = [asyncio.create_task(self._run_api())]

        if self.settings.keepalive_enabled:
            tasks.append(
                asyncio.create_task(
                    run_keepalive(self.settings.origin, self.settings.keepalive_interval_seconds)
                )
            )
        else:
            logger.info("ORIGIN not set - keepalive disabled")

        await self._shutdown_event.wait()

        for task in tasks:
            task.cancel()

        await asyncio.gather(*tasks, return_exceptions=True)

        await self._cleanup()

    async def _run_api(self):
        """Run the FastAPI server."""
        try:
            app = create_app(self.settings, store=self.store)
            config = uvicorn.Config(
                app,
                host=self.settings.api_host,
                port=self.settings.api_port,
                log_level="debug" if self.settings.debug else "info",
            )
            server = uvicorn.Server(config)
            origin = self.settings.origin or f"http://localhost:{self.settings.api_port}"
            logger.info(f"Starting API server on {self.settings.api_host}:{self.settings.api_port}")
            logger.info(f"API endpoint: POST {origin}/submit")
            logger.info(f"Health check: GET {origin}/ping")
            await server.serve()
        except asyncio.CancelledError:
            logger.info("API server cancelled")
        except Exception as e:
            logger.error(f"API error: {e}")
            raise
        finally:
            # uvicorn also returns after handling SIGINT/SIGTERM itself
            self.shutdown()

    async def _cleanup(self):
        """Close the store so every committed write is on disk."""
        logger.info("Shutting down server...")
        if self.store is not None:
            await self.store.close()
        logger.info("Cleanup complete")

    def shutdown(self):
        """Signal shutdown."""
        logger.info("Shutdown requested")
        self._shutdown_event.set()


def main():
    """Main entry point."""
    loop = asyncio.new_event_loop()
    asyncio.set_event_loop(loop)

    app = Application()

    for sig in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(sig, app.shutdown)

    try:
        loop.run_until_complete(app.start())
    except KeyboardInterrupt:
        logger.info("Keyboard interrupt received")
    finally:
        loop.close()


if __name__ == "__main__":
    main()
