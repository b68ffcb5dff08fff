"""
Service Context

Read-only collaborators shared by every method handler, plus the lock that
serialises compressed swap transitions.
"""

import asyncio
from dataclasses import dataclass, field

from ..bus.client import BusClient
from ..common.config import ServiceConfig
from .command_runner import CommandRunner
from .sticky_script import StickyScriptWriter


@dataclass(frozen=True)
class ServiceContext:
    """Configuration plus the I/O helpers handlers use"""
    config: ServiceConfig
    runner: CommandRunner
    bus: BusClient
    sticky: StickyScriptWriter
    # Held across a whole compcache transition, settle delay included
    compcache_lock: asyncio.Lock = field(default_factory=asyncio.Lock, compare=False)

    @classmethod
    def from_config(cls, config: ServiceConfig) -> "ServiceContext":
        return cls(
            config=config,
            runner=CommandRunner(),
            bus=BusClient(timeout_s=config.bus.timeout_s),
            sticky=StickyScriptWriter(),
        )
