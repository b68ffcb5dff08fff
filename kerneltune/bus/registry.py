"""
Method Registry

Maps bus method names to handler coroutines and turns every outcome into a
single reply object.
"""

from typing import TYPE_CHECKING, Any, Awaitable, Callable

from ..common.exceptions import ConfigError, InvalidRequestError, KerneltuneError
from ..common.logging_setup import get_service_logger

if TYPE_CHECKING:
    from ..services.context import ServiceContext

logger = get_service_logger("bus.registry")

Handler = Callable[["ServiceContext", dict[str, Any]], Awaitable[dict[str, Any] | None]]


class MethodRegistry:
    """
    Registry of named bus methods.

    Handlers receive the shared read-only ServiceContext and the parsed
    request payload. They return the reply fields on success, or raise a
    KerneltuneError which is rendered as a failed reply.
    """

    def __init__(self, context: "ServiceContext"):
        self.context = context
        self._handlers: dict[str, Handler] = {}

    def add(self, name: str, handler: Handler) -> None:
        if name in self._handlers:
            raise ConfigError(f"Method '{name}' registered twice")
        self._handlers[name] = handler

    def method(self, name: str) -> Callable[[Handler], Handler]:
        """Decorator form of add()"""
        def decorator(handler: Handler) -> Handler:
            self.add(name, handler)
            return handler
        return decorator

    def names(self) -> list[str]:
        return sorted(self._handlers)

    def __contains__(self, name: str) -> bool:
        return name in self._handlers

    def __len__(self) -> int:
        return len(self._handlers)

    async def dispatch(self, name: str, payload: dict[str, Any]) -> dict[str, Any]:
        """
        Run the handler bound to name.

        Returns:
            Reply dict, always containing returnValue
        """
        log = logger.bind(method=name)
        handler = self._handlers.get(name)
        if handler is None:
            log.warning(f"Unknown method {name}")
            return InvalidRequestError(f"Unknown method: {name}").to_reply()

        try:
            reply = await handler(self.context, payload)
        except KerneltuneError as e:
            log.warning(f"{name} failed: {e.message}", extra={"error_code": e.error_code})
            return e.to_reply()

        log.debug(f"{name} succeeded")
        # Relayed replies keep their own returnValue
        reply = dict(reply or {})
        reply.setdefault("returnValue", True)
        return reply
