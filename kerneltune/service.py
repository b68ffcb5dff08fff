"""
Tunables Service

Long-running bus service exposing kernel tunables:
- CPU frequency scaling (cpufreq, governors, stats)
- TCP congestion control
- Compressed swap (compcache)
- Boot-time replay of the above (sticky scripts)
- Performance profiles, delegated to the application manager
"""

import asyncio
import signal

from .bus.server import BusServer
from .common.config import ServiceConfig
from .common.logging_setup import get_service_logger
from .methods import build_registry
from .services.context import ServiceContext

logger = get_service_logger("service")


class TunablesService:
    """Owns the method registry and the bus server"""

    def __init__(self, config: ServiceConfig | None = None):
        self.config = config or ServiceConfig.load()
        self.context = ServiceContext.from_config(self.config)
        self.registry = build_registry(self.context)
        self.server = BusServer(
            self.registry,
            host=self.config.server.host,
            port=self.config.server.port,
        )

        self._shutdown_event = asyncio.Event()

    async def start(self) -> None:
        """Start serving and block until a shutdown signal arrives"""
        logger.info(
            "Starting tunables service",
            extra={"config_source": self.config.source},
        )

        await self.server.start()
        self._setup_signal_handlers()

        await self._shutdown_event.wait()

    async def stop(self) -> None:
        """Stop the bus server"""
        logger.info("Stopping tunables service")
        await self.server.stop()

    def request_shutdown(self) -> None:
        self._shutdown_event.set()

    def _setup_signal_handlers(self) -> None:
        """Setup graceful shutdown signal handlers"""
        loop = asyncio.get_running_loop()

        for sig in (signal.SIGTERM, signal.SIGINT):
            try:
                loop.add_signal_handler(sig, self._handle_shutdown)
            except NotImplementedError:
                signal.signal(sig, lambda s, f: self._handle_shutdown())

    def _handle_shutdown(self) -> None:
        """Handle shutdown signal"""
        logger.info("Received shutdown signal")
        self.request_shutdown()
