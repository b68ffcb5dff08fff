"""
Custom Exception Classes for kerneltune

Hierarchical exception structure for error handling across method handlers.
Each error knows how to render itself as a bus reply.
"""

from typing import Any


class KerneltuneError(Exception):
    """Base exception for all kerneltune errors"""

    def __init__(
        self,
        message: str,
        error_code: int | None = -1,
        extra: dict[str, Any] | None = None,
    ):
        self.message = message
        self.error_code = error_code
        self.extra = extra or {}
        super().__init__(message)

    def to_reply(self) -> dict[str, Any]:
        """Render as a failed method reply"""
        reply: dict[str, Any] = {"errorText": self.message, **self.extra}
        reply["returnValue"] = False
        if self.error_code is not None:
            reply["errorCode"] = self.error_code
        return reply


class ConfigError(KerneltuneError):
    """Configuration-related errors"""

    def __init__(self, message: str):
        super().__init__(f"Config Error: {message}")


class InvalidRequestError(KerneltuneError):
    """Malformed or missing request field, raised before any side effect"""


class AttributeAccessError(KerneltuneError):
    """Kernel attribute file could not be opened, parsed, written or closed"""

    def __init__(
        self,
        message: str,
        path: str | None = None,
        error_code: int | None = -1,
    ):
        self.path = path
        super().__init__(message, error_code)


class StickyScriptError(AttributeAccessError):
    """Startup script could not be written"""


class CommandError(KerneltuneError):
    """External command failed to start or exited non-zero"""

    def __init__(
        self,
        argv: list[str],
        output: list[str] | None = None,
        returncode: int | None = None,
    ):
        self.argv = argv
        self.output = output or []
        self.returncode = returncode
        super().__init__(
            f"Unable to run command: {' '.join(argv)}",
            extra={"stdErr": self.output},
        )


class BusCallError(KerneltuneError):
    """Nested call to another bus service failed at the transport level"""

    def __init__(self, message: str, uri: str | None = None):
        self.uri = uri
        super().__init__(f"Bus call failed: {message}")
