"""
Bus Client

Issues nested calls to other services on the bus and waits for their single
reply. There is no retry; the configured timeout bounds the wait.
"""

from typing import Any

import httpx

from ..common.exceptions import BusCallError
from ..common.logging_setup import get_service_logger

logger = get_service_logger("bus.client")


class BusClient:
    """Calls methods of peer services over HTTP"""

    def __init__(
        self,
        timeout_s: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.timeout_s = timeout_s
        self._transport = transport

    async def call(self, uri: str, payload: dict[str, Any]) -> dict[str, Any]:
        """
        Call a peer method.

        Args:
            uri: Method URL, e.g. http://127.0.0.1:8091/com.palm.applicationManager/launch
            payload: Request object

        Returns:
            The peer's reply object, unchanged

        Raises:
            BusCallError: transport failure or a reply that is not a JSON object
        """
        logger.debug(f"Calling {uri}", extra={"uri": uri})

        try:
            async with httpx.AsyncClient(
                timeout=self.timeout_s, transport=self._transport
            ) as client:
                response = await client.post(uri, json=payload)
                response.raise_for_status()
                reply = response.json()
        except httpx.HTTPError as e:
            logger.error(f"Bus call to {uri} failed: {e}", exc_info=True)
            raise BusCallError(str(e) or type(e).__name__, uri) from e
        except ValueError as e:
            logger.error(f"Bus call to {uri} returned invalid JSON: {e}")
            raise BusCallError("reply is not valid JSON", uri) from e

        if not isinstance(reply, dict):
            logger.error(f"Bus call to {uri} returned {type(reply).__name__}")
            raise BusCallError("reply is not a JSON object", uri)

        return reply
