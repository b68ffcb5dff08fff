"""
Common Utilities

Shared modules used across the service:
- config.py - Configuration dataclasses and YAML loading
- exceptions.py - Custom exception classes
- logging_setup.py - Structured logging setup
- escape.py - JSON string escaping for raw kernel text
- validation.py - Path-safe token checks
"""

from .config import (
    ServiceConfig,
    ServerSettings,
    PathSettings,
    ToolSettings,
    CompcacheSettings,
    BusSettings,
    StickySettings,
    LoggingSettings,
    load_service_config,
)
from .escape import json_escape, json_quote
from .exceptions import (
    KerneltuneError,
    ConfigError,
    InvalidRequestError,
    AttributeAccessError,
    StickyScriptError,
    CommandError,
    BusCallError,
)
from .logging_setup import (
    setup_logging,
    get_service_logger,
    log_attribute_write,
    log_command,
)
from .validation import is_valid_token

__all__ = [
    # Config
    "ServiceConfig",
    "ServerSettings",
    "PathSettings",
    "ToolSettings",
    "CompcacheSettings",
    "BusSettings",
    "StickySettings",
    "LoggingSettings",
    "load_service_config",
    # Escaping
    "json_escape",
    "json_quote",
    # Exceptions
    "KerneltuneError",
    "ConfigError",
    "InvalidRequestError",
    "AttributeAccessError",
    "StickyScriptError",
    "CommandError",
    "BusCallError",
    # Logging
    "setup_logging",
    "get_service_logger",
    "log_attribute_write",
    "log_command",
    # Validation
    "is_valid_token",
]
