"""
Compressed Swap (compcache) Methods

Compcache is the ramzswap kernel module (with its xvmalloc allocator) layered
over the regular backing swap device. It is switched by unloading all swap,
loading or unloading the modules, and re-enabling swap on the device that
is active afterwards.
"""

import asyncio
import os

from ..bus.registry import MethodRegistry
from ..common.exceptions import KerneltuneError
from ..common.logging_setup import get_service_logger
from ..services.context import ServiceContext
from ..services.sticky_script import StickyScript
from .schemas import CompcacheConfigRequest, parse_request

logger = get_service_logger("compcache")


def kernel_release(ctx: ServiceContext) -> str:
    """Running kernel release, as reported by uname -r"""
    result = ctx.runner.run([ctx.config.tools.uname, "-r"])
    release = result.text("").strip()
    if not result.ok or not release:
        raise KerneltuneError("Unable to determine kernel version")
    return release


def module_dir(ctx: ServiceContext, release: str) -> str:
    return os.path.join(ctx.config.compcache.modules_dir, release, "extra")


def current_memlimit(ctx: ServiceContext) -> str | None:
    """Memory limit of the loaded ramzswap device, None when not loaded"""
    try:
        with open(ctx.config.compcache.proc_file, "r", encoding="latin-1") as f:
            for line in f:
                if "MemLimit" in line:
                    fields = line.split()
                    if len(fields) > 1:
                        return fields[1]
    except OSError:
        pass
    return None


def _param(name: str, value: str) -> dict:
    return {"name": name, "value": value, "writeable": True}


async def get_compcache_config(ctx: ServiceContext, payload: dict) -> dict:
    release = kernel_release(ctx)
    if not os.path.isfile(os.path.join(module_dir(ctx, release), "ramzswap.ko")):
        return {"params": []}

    memlimit = current_memlimit(ctx)
    if memlimit:
        enabled = "1"
    else:
        enabled, memlimit = "0", ctx.config.compcache.default_memlimit

    return {
        "params": [
            _param("compcache_enabled", enabled),
            _param("compcache_memlimit", memlimit),
        ]
    }


async def set_compcache_config(ctx: ServiceContext, payload: dict) -> dict:
    request = parse_request(CompcacheConfigRequest, payload)
    memlimit = request.memlimit
    enable = request.enable

    # The state read and the whole command sequence form one transition
    async with ctx.compcache_lock:
        await _transition(ctx, enable, memlimit)
    return {}


async def _transition(ctx: ServiceContext, enable: bool, memlimit: str) -> None:
    extra = module_dir(ctx, kernel_release(ctx))
    enabled = current_memlimit(ctx) is not None

    settings = ctx.config.compcache
    tools = ctx.config.tools
    run = ctx.runner.run_or_raise
    priority = str(settings.swap_priority)

    if enable and not enabled:
        logger.info(f"Enabling compcache (memlimit {memlimit} kB)")
        run([tools.swapoff, "-a"])
        run([tools.insmod, os.path.join(extra, "xvmalloc.ko")])
        run([
            tools.insmod,
            os.path.join(extra, "ramzswap.ko"),
            f"backing_swap={settings.backing_swap}",
            f"memlimit_kb={memlimit}",
        ])
        # ramzswap0 appears asynchronously after the module loads
        await asyncio.sleep(settings.settle_seconds)
        run([tools.swapon, settings.ramzswap_device, "-p", priority])
    elif enabled and not enable:
        logger.info("Disabling compcache")
        run([tools.swapoff, "-a"])
        run([tools.rmmod, "ramzswap"])
        run([tools.rmmod, "xvmalloc"])
        run([tools.swapon, settings.backing_swap, "-p", priority])
    else:
        logger.debug(f"compcache already {'enabled' if enabled else 'disabled'}")


async def stick_compcache_config(ctx: ServiceContext, payload: dict) -> dict:
    request = parse_request(CompcacheConfigRequest, payload)
    memlimit = request.memlimit
    path = ctx.config.paths.compcache_script

    if not request.enable:
        ctx.sticky.remove(path)
        return {}

    settings = ctx.config.compcache
    extra = f"{settings.modules_dir}/`uname -r`/extra"
    script = StickyScript(
        description="Govnah CompCache Configuration",
        stop_on="runlevel [!2]",
        commands=[
            "swapoff -a",
            f"insmod {extra}/xvmalloc.ko",
            f"insmod {extra}/ramzswap.ko memlimit_kb={memlimit} backing_swap={settings.backing_swap}",
            f"sleep {settings.settle_seconds:g}",
            f"swapon {settings.ramzswap_device} -p {settings.boot_swap_priority}",
        ],
        boot_gates=ctx.config.sticky.boot_gates,
    )
    ctx.sticky.write(path, script)
    return {}


async def unstick_compcache_config(ctx: ServiceContext, payload: dict) -> dict:
    ctx.sticky.remove(ctx.config.paths.compcache_script)
    return {}


def register(registry: MethodRegistry) -> None:
    registry.add("get_compcache_config", get_compcache_config)
    registry.add("set_compcache_config", set_compcache_config)
    registry.add("stick_compcache_config", stick_compcache_config)
    registry.add("unstick_compcache_config", unstick_compcache_config)
