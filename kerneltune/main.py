#!/usr/bin/env python3
"""
kerneltune - Main Entry Point

Loads the configuration and serves the tunables methods on the local bus.

Usage:
    python -m kerneltune.main                    # Search the default config paths
    python -m kerneltune.main --config my.yaml   # Use custom config file
    python -m kerneltune.main --dry-run          # Print config and methods, then exit
"""

import argparse
import asyncio
import sys

from .common.config import ServiceConfig
from .common.exceptions import ConfigError
from .common.logging_setup import get_service_logger, setup_logging
from .service import TunablesService

logger = get_service_logger("main")


def print_summary(service: TunablesService) -> None:
    """Print a summary of the configuration and registered methods"""
    config = service.config
    print("\n" + "=" * 60)
    print("  KERNELTUNE")
    print("=" * 60)
    print(f"\n  Config: {config.source or '(defaults)'}")
    print(f"  Listen: {config.server.host}:{config.server.port}")
    print(f"  cpufreq: {config.paths.cpufreq_dir}")
    print(f"  Application manager: {config.bus.application_manager_url}")
    print(f"\n  Methods ({len(service.registry)}):")
    for name in service.registry.names():
        print(f"    - {name}")
    print()


async def run(service: TunablesService) -> None:
    try:
        await service.start()
    finally:
        await service.stop()


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Kernel tunables bus service")
    parser.add_argument("--config", "-c", help="Path to configuration file")
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Print configuration and registered methods, then exit",
    )
    args = parser.parse_args(argv)

    try:
        config = ServiceConfig.load(args.config)
    except ConfigError as e:
        print(e.message, file=sys.stderr)
        return 1

    setup_logging(config.logging.level, config.logging.format.lower() == "json")

    service = TunablesService(config)
    if args.dry_run:
        print_summary(service)
        return 0

    try:
        asyncio.run(run(service))
    except KeyboardInterrupt:
        logger.info("Interrupted")
    return 0


if __name__ == "__main__":
    sys.exit(main())
