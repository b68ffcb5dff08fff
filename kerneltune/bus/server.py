"""
Bus Server

Exposes the method registry over HTTP on the local bus:
- POST /{method} with a JSON object body, answered with the JSON reply
- GET /health for liveness checks
"""

import time
from datetime import datetime, timezone

from aiohttp import web

from ..common.exceptions import InvalidRequestError
from ..common.logging_setup import get_service_logger
from .codec import decode_request, encode_reply
from .registry import MethodRegistry

logger = get_service_logger("bus.server")


def _json(data: dict, status: int = 200) -> web.Response:
    return web.json_response(data, status=status, dumps=encode_reply)


class BusServer:
    """HTTP front for a MethodRegistry"""

    def __init__(self, registry: MethodRegistry, host: str = "127.0.0.1", port: int = 8090):
        self.registry = registry
        self.host = host
        self.port = port
        self._runner: web.AppRunner | None = None
        self._started_at: float | None = None

    def create_app(self) -> web.Application:
        app = web.Application()
        app.router.add_get("/health", self._health_handler)
        app.router.add_post("/{method}", self._method_handler)
        return app

    async def start(self) -> None:
        """Start serving"""
        self._runner = web.AppRunner(self.create_app())
        await self._runner.setup()

        site = web.TCPSite(self._runner, self.host, self.port)
        await site.start()
        self._started_at = time.monotonic()

        logger.info(
            f"Bus server listening on {self.host}:{self.port} "
            f"({len(self.registry)} methods)"
        )

    async def stop(self) -> None:
        """Stop serving"""
        if self._runner:
            await self._runner.cleanup()
            self._runner = None
        logger.info("Bus server stopped")

    async def _health_handler(self, request: web.Request) -> web.Response:
        uptime = 0
        if self._started_at is not None:
            uptime = int(time.monotonic() - self._started_at)
        return _json({
            "status": "healthy",
            "service": "kerneltune",
            "methods": len(self.registry),
            "uptime": uptime,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        })

    async def _method_handler(self, request: web.Request) -> web.Response:
        name = request.match_info["method"]

        try:
            payload = decode_request(await request.read())
        except InvalidRequestError as e:
            logger.warning(f"Rejected request for {name}: {e.message}")
            return _json(e.to_reply())

        try:
            reply = await self.registry.dispatch(name, payload)
        except Exception:
            logger.exception(f"Unhandled error in {name}", extra={"method": name})
            return _json(
                {"returnValue": False, "errorCode": -1, "errorText": "Internal error"},
                status=500,
            )

        return _json(reply)
