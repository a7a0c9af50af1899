"""
Service runner for the sqlbrowse HTTP gateway.

Startup resolves the connection URI, creates the pool and probes it once; any
failure there is fatal. Shutdown is driven by SIGINT/SIGTERM: the listener
stops, in-flight requests finish, then the pool is closed.
"""

import asyncio
import logging
import signal
from typing import Optional

from aiohttp import web

from .browser import TableBrowser
from .config import SqlBrowseConfig
from .database.connection import ConnectionDescriptor, ConnectionPool
from .exceptions import SqlBrowseError, StartupError
from .web.app import create_app

logger = logging.getLogger(__name__)


class BrowserService:
    """Owns the pool and the HTTP listener for one process run."""

    def __init__(self, config: SqlBrowseConfig, database_url: str):
        self.config = config
        self.database_url = database_url
        self.pool: Optional[ConnectionPool] = None
        self.runner: Optional[web.AppRunner] = None
        self._stop_event: Optional[asyncio.Event] = None
        self.running = False

    async def start(self) -> None:
        """Connect to the database and start listening."""
        try:
            descriptor = ConnectionDescriptor.from_url(self.database_url)
            self.pool = ConnectionPool(descriptor, self.config.pool)
            await self.pool.initialize()
            await self.pool.test_connectivity()
        except SqlBrowseError as e:
            await self._close_pool()
            raise StartupError(f"Could not connect to the database: {e.message}", cause=e) from e

        browser = TableBrowser(self.pool, self.config.browse)
        app = create_app(browser)

        self.runner = web.AppRunner(app, shutdown_timeout=self.config.server.shutdown_timeout)
        await self.runner.setup()
        site = web.TCPSite(self.runner, self.config.server.host, self.config.server.port)
        try:
            await site.start()
        except OSError as e:
            await self.stop()
            raise StartupError(
                f"Could not listen on {self.config.server.host}:{self.config.server.port}: {e}",
                cause=e,
            ) from e

        self.running = True
        logger.info(
            f"JSON:API running at http://{self.config.server.host}:{self.config.server.port}"
        )
        logger.info("Available endpoints:")
        logger.info("- GET /api - API information")
        logger.info("- GET /api/tables - List all tables")
        logger.info("- GET /api/tables/{tableName} - Get table data (page, limit or 'all')")
        logger.info("- POST /api/query - Run a raw SQL query")

    async def stop(self) -> None:
        """Stop accepting requests, let in-flight ones finish, close the pool."""
        if self.runner is not None:
            logger.info("Shutting down server...")
            runner, self.runner = self.runner, None
            await runner.cleanup()
        await self._close_pool()
        self.running = False

    def request_stop(self) -> None:
        if self._stop_event is not None:
            self._stop_event.set()

    async def run(self) -> None:
        """Start the service and block until a termination signal arrives."""
        self._stop_event = asyncio.Event()
        await self.start()

        loop = asyncio.get_running_loop()
        for sig in (signal.SIGINT, signal.SIGTERM):
            try:
                loop.add_signal_handler(sig, self.request_stop)
            except NotImplementedError:
                # add_signal_handler is unavailable on Windows event loops
                pass

        try:
            await self._stop_event.wait()
        finally:
            for sig in (signal.SIGINT, signal.SIGTERM):
                try:
                    loop.remove_signal_handler(sig)
                except NotImplementedError:
                    pass
            await self.stop()

    async def _close_pool(self) -> None:
        if self.pool is not None:
            await self.pool.close()


def run_service(config: SqlBrowseConfig, database_url: str) -> int:
    """Run the gateway until shutdown and return the process exit status."""
    service = BrowserService(config, database_url)
    try:
        asyncio.run(service.run())
    except StartupError as e:
        logger.error(f"FATAL: {e.message}")
        return 1
    except KeyboardInterrupt:
        pass
    logger.info("Server stopped")
    return 0
