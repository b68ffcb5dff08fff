"""
kerneltune Services

I/O helpers used by the method handlers:
- command_runner.py - External tool execution with captured output
- attributes.py - sysfs/procfs attribute reads and writes
- sticky_script.py - Boot-time replay scripts
- context.py - Shared handler context
"""

from .attributes import (
    list_parameters,
    read_single_integer,
    read_single_line,
    write_value,
)
from .command_runner import CommandResult, CommandRunner
from .context import ServiceContext
from .sticky_script import StickyScript, StickyScriptWriter

__all__ = [
    "CommandResult",
    "CommandRunner",
    "ServiceContext",
    "StickyScript",
    "StickyScriptWriter",
    "list_parameters",
    "read_single_integer",
    "read_single_line",
    "write_value",
]
