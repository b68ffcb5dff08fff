"""
Performance Profile Methods

Profiles are owned by the front-end application. The service forwards the
request to the application manager, which launches the application with the
request parameters, and relays the manager's reply to the original caller.
"""

from ..bus.registry import MethodRegistry
from ..common.logging_setup import get_service_logger
from ..services.context import ServiceContext
from .schemas import ProfileSelection, ProfilesQuery, parse_request

logger = get_service_logger("profiles")


async def _launch(ctx: ServiceContext, params: dict) -> dict:
    bus = ctx.config.bus
    uri = f"{bus.application_manager_url.rstrip('/')}/launch"
    logger.info(f"Launching {bus.app_id} ({params['type']})", extra={"uri": uri})
    return await ctx.bus.call(uri, {"id": bus.app_id, "params": params})


async def get_profiles(ctx: ServiceContext, payload: dict) -> dict:
    query = parse_request(ProfilesQuery, payload)
    return await _launch(ctx, {"type": "get-profiles", "returnid": query.returnid})


async def set_profile(ctx: ServiceContext, payload: dict) -> dict:
    selection = parse_request(ProfileSelection, payload)
    return await _launch(ctx, {"type": "set-profile", "profileid": selection.profileid})


def register(registry: MethodRegistry) -> None:
    registry.add("getProfiles", get_profiles)
    registry.add("setProfile", set_profile)
