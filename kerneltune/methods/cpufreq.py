"""
CPU Frequency Scaling Methods

Generic parameters live in the cpufreq directory of cpu0; each governor may
expose its own parameters in a subdirectory named after it. Governor
parameters only make sense together with the governor that owns them, so
they are applied only when the request also selects that governor through a
scaling_governor generic parameter.
"""

from ..bus.registry import MethodRegistry
from ..common.logging_setup import get_service_logger
from ..services.attributes import (
    list_parameters,
    parameter_path,
    read_single_integer,
    read_single_line,
    write_value,
)
from ..services.context import ServiceContext
from ..services.sticky_script import StickyScript
from .base import file_dump
from .schemas import CpufreqParamsRequest, GovernorQuery, Param, parse_request

logger = get_service_logger("cpufreq")


def _planned_writes(cpufreq_dir: str, request: CpufreqParamsRequest) -> list[tuple[str, Param]]:
    """(directory, param) pairs in application order"""
    writes = [(cpufreq_dir, param) for param in request.genericParams]
    governor = request.governor
    if governor is not None:
        governor_dir = parameter_path(cpufreq_dir, governor)
        writes += [(governor_dir, param) for param in request.governorParams]
    return writes


async def get_scaling_cur_freq(ctx: ServiceContext, payload: dict) -> dict:
    path = parameter_path(ctx.config.paths.cpufreq_dir, "scaling_cur_freq")
    return {"value": read_single_integer(path)}


async def get_scaling_governor(ctx: ServiceContext, payload: dict) -> dict:
    path = parameter_path(ctx.config.paths.cpufreq_dir, "scaling_governor")
    return {"value": read_single_line(path)}


async def get_cpufreq_params(ctx: ServiceContext, payload: dict) -> dict:
    query = parse_request(GovernorQuery, payload)
    directory = ctx.config.paths.cpufreq_dir
    if query.governor is not None:
        directory = parameter_path(directory, query.governor)

    reply = {"params": list_parameters(directory)}
    if query.governor is not None:
        reply["governor"] = query.governor
    return reply


async def set_cpufreq_params(ctx: ServiceContext, payload: dict) -> dict:
    request = parse_request(CpufreqParamsRequest, payload)
    writes = _planned_writes(ctx.config.paths.cpufreq_dir, request)

    logger.info(
        f"Applying {len(writes)} cpufreq parameters",
        extra={"governor": request.governor},
    )
    # Stops at the first failed write
    for directory, param in writes:
        write_value(parameter_path(directory, param.name), param.value)

    return {}


async def stick_cpufreq_params(ctx: ServiceContext, payload: dict) -> dict:
    request = parse_request(CpufreqParamsRequest, payload)

    commands = [
        f"echo -n '{param.value}' > {parameter_path(directory, param.name)}"
        for directory, param in _planned_writes(ctx.config.paths.cpufreq_dir, request)
    ]
    script = StickyScript(
        description="Govnah Settings",
        commands=commands,
        boot_gates=ctx.config.sticky.boot_gates,
    )
    ctx.sticky.write(ctx.config.paths.cpufreq_script, script)
    return {}


async def unstick_cpufreq_params(ctx: ServiceContext, payload: dict) -> dict:
    ctx.sticky.remove(ctx.config.paths.cpufreq_script)
    return {}


def _stats_dump(entry: str):
    async def handler(ctx: ServiceContext, payload: dict) -> dict:
        return file_dump(ctx, parameter_path(ctx.config.paths.cpufreq_stats_dir, entry))
    handler.__name__ = f"get_{entry}"
    return handler


def register(registry: MethodRegistry) -> None:
    registry.add("get_scaling_cur_freq", get_scaling_cur_freq)
    registry.add("get_scaling_governor", get_scaling_governor)
    registry.add("get_cpufreq_params", get_cpufreq_params)
    registry.add("set_cpufreq_params", set_cpufreq_params)
    registry.add("stick_cpufreq_params", stick_cpufreq_params)
    registry.add("unstick_cpufreq_params", unstick_cpufreq_params)
    for entry in ("time_in_state", "total_trans", "trans_table"):
        registry.add(f"get_{entry}", _stats_dump(entry))
