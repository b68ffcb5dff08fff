"""
Bus Methods

Handlers grouped by subsystem; build_registry() binds all of them.
"""

from ..bus.registry import MethodRegistry
from ..services.context import ServiceContext
from . import compcache, cpufreq, network, profiles, system

METHOD_GROUPS = (system, network, cpufreq, compcache, profiles)


def build_registry(context: ServiceContext) -> MethodRegistry:
    """Create a registry with every bus method bound"""
    registry = MethodRegistry(context)
    for group in METHOD_GROUPS:
        group.register(registry)
    return registry


__all__ = ["METHOD_GROUPS", "build_registry"]
