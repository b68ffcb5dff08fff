"""
TCP Congestion Control Methods
"""

import os

from ..bus.registry import MethodRegistry
from ..services.attributes import write_value
from ..services.context import ServiceContext
from .base import file_dump
from .schemas import ValueRequest, parse_request


def _tcp_file(ctx: ServiceContext, name: str) -> str:
    return os.path.join(ctx.config.paths.tcp_dir, name)


async def get_tcp_congestion_control(ctx: ServiceContext, payload: dict) -> dict:
    return file_dump(ctx, _tcp_file(ctx, "tcp_congestion_control"))


async def set_tcp_congestion_control(ctx: ServiceContext, payload: dict) -> dict:
    request = parse_request(ValueRequest, payload)
    write_value(_tcp_file(ctx, "tcp_congestion_control"), request.value)
    return {}


async def get_tcp_allowed_congestion_control(ctx: ServiceContext, payload: dict) -> dict:
    return file_dump(ctx, _tcp_file(ctx, "tcp_allowed_congestion_control"))


async def get_tcp_available_congestion_control(ctx: ServiceContext, payload: dict) -> dict:
    return file_dump(ctx, _tcp_file(ctx, "tcp_available_congestion_control"))


def register(registry: MethodRegistry) -> None:
    registry.add("get_tcp_congestion_control", get_tcp_congestion_control)
    registry.add("set_tcp_congestion_control", set_tcp_congestion_control)
    registry.add("get_tcp_allowed_congestion_control", get_tcp_allowed_congestion_control)
    registry.add("get_tcp_available_congestion_control", get_tcp_available_congestion_control)
