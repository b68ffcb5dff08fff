"""
System Information Methods

Status probe, /proc dumps and board temperature sensors.
"""

import os

from ..bus.registry import MethodRegistry
from ..services.attributes import read_single_integer
from ..services.context import ServiceContext
from .base import file_dump


async def status(ctx: ServiceContext, payload: dict) -> dict:
    return {}


def _proc_dump(entry: str):
    async def handler(ctx: ServiceContext, payload: dict) -> dict:
        return file_dump(ctx, os.path.join(ctx.config.paths.proc_dir, entry))
    handler.__name__ = f"get_proc_{entry}"
    return handler


async def get_omap34xx_temp(ctx: ServiceContext, payload: dict) -> dict:
    """OMAP34xx on-die sensor (Pre)"""
    return {"value": read_single_integer(ctx.config.paths.omap34xx_temp)}


async def get_tmp105_temp(ctx: ServiceContext, payload: dict) -> dict:
    """TMP105 board sensor (Pixi)"""
    return {"value": read_single_integer(ctx.config.paths.tmp105_temp)}


def register(registry: MethodRegistry) -> None:
    registry.add("status", status)
    for entry in ("cpuinfo", "meminfo", "loadavg"):
        registry.add(f"get_proc_{entry}", _proc_dump(entry))
    registry.add("get_omap34xx_temp", get_omap34xx_temp)
    registry.add("get_tmp105_temp", get_tmp105_temp)
