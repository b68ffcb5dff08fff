"""
Configuration Dataclasses

Type-safe configuration structures for the tunables service.
Configuration is read once at startup from a YAML file; environment
variables override the server and logging settings.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path

import yaml

from .exceptions import ConfigError
from .logging_setup import get_service_logger

logger = get_service_logger("config")

# Upstart checks that the previous boot was healthy before replaying settings
DEFAULT_BOOT_GATES = [
    '[ "`/usr/bin/lunaprop -m com.palm.properties.prevBootPanicked`" = "false" ] || exit 0',
    '[ "`/usr/bin/lunaprop -m com.palm.properties.prevShutdownClean`" = "true" ] || exit 0',
    '[ "`/usr/bin/lunaprop -m -n com.palm.system last_umount_clean`"  = "true" ] || exit 0',
]


@dataclass
class ServerSettings:
    """Bus server listen address"""
    host: str = "127.0.0.1"
    port: int = 8090


@dataclass
class PathSettings:
    """Kernel files and persisted script locations"""
    cpufreq_dir: str = "/sys/devices/system/cpu/cpu0/cpufreq"
    proc_dir: str = "/proc"
    tcp_dir: str = "/proc/sys/net/ipv4"
    omap34xx_temp: str = "/sys/devices/platform/omap34xx_temp/temp1_input"
    tmp105_temp: str = "/sys/devices/platform/tmp105/celsius"
    cpufreq_script: str = "/var/palm/event.d/org.webosinternals.govnah-settings"
    compcache_script: str = "/var/palm/event.d/org.webosinternals.govnah-compcache"

    @property
    def cpufreq_stats_dir(self) -> str:
        return f"{self.cpufreq_dir}/stats"


@dataclass
class ToolSettings:
    """Absolute paths of the external tools the service may run"""
    cat: str = "/bin/cat"
    uname: str = "/bin/uname"
    swapoff: str = "/sbin/swapoff"
    swapon: str = "/sbin/swapon"
    insmod: str = "/sbin/insmod"
    rmmod: str = "/sbin/rmmod"


@dataclass
class CompcacheSettings:
    """Compressed swap (ramzswap) module layout"""
    modules_dir: str = "/lib/modules"
    proc_file: str = "/proc/ramzswap"
    backing_swap: str = "/dev/mapper/store-swap"
    ramzswap_device: str = "/dev/ramzswap0"
    default_memlimit: str = "16384"
    settle_seconds: float = 3.0
    swap_priority: int = 0
    boot_swap_priority: int = 1


@dataclass
class BusSettings:
    """Peer services reached over the bus"""
    application_manager_url: str = "http://127.0.0.1:8091/com.palm.applicationManager"
    app_id: str = "org.webosinternals.govnah"
    timeout_s: float = 30.0


@dataclass
class StickySettings:
    """Startup script generation"""
    boot_gates: list[str] = field(default_factory=lambda: list(DEFAULT_BOOT_GATES))


@dataclass
class LoggingSettings:
    """Log output settings"""
    level: str = "INFO"
    format: str = "json"


@dataclass
class ServiceConfig:
    """Complete service configuration"""
    server: ServerSettings = field(default_factory=ServerSettings)
    paths: PathSettings = field(default_factory=PathSettings)
    tools: ToolSettings = field(default_factory=ToolSettings)
    compcache: CompcacheSettings = field(default_factory=CompcacheSettings)
    bus: BusSettings = field(default_factory=BusSettings)
    sticky: StickySettings = field(default_factory=StickySettings)
    logging: LoggingSettings = field(default_factory=LoggingSettings)
    source: str | None = None

    @classmethod
    def load(cls, path: str | os.PathLike | None = None) -> "ServiceConfig":
        """Find, read and parse the configuration file"""
        config_path = Path(path) if path else find_config_path()
        data = read_yaml(config_path)
        config = load_service_config(data)
        config.source = str(config_path) if config_path.exists() else None
        apply_env_overrides(config)
        return config


def find_config_path() -> Path:
    """Find configuration file"""
    env_path = os.environ.get("KERNELTUNE_CONFIG")
    if env_path:
        return Path(env_path)

    possible_paths = [
        Path("/etc/kerneltune/config.yaml"),
        Path("/opt/kerneltune/config.yaml"),
        Path(__file__).parent.parent.parent / "config.yaml",
    ]

    for path in possible_paths:
        if path.exists():
            return path

    return possible_paths[0]


def read_yaml(path: Path) -> dict:
    """Load configuration from YAML file"""
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except FileNotFoundError:
        logger.warning(f"Config file not found: {path}, using defaults")
        return {}
    except yaml.YAMLError as e:
        raise ConfigError(f"Error parsing {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"{path} must contain a mapping")
    return data


def _section(data: dict, name: str) -> dict:
    section = data.get(name) or {}
    if not isinstance(section, dict):
        raise ConfigError(f"Section '{name}' must be a mapping")
    return section


def _build(settings_cls, data: dict, name: str):
    section = _section(data, name)
    known = settings_cls.__dataclass_fields__
    unknown = sorted(set(section) - set(known))
    if unknown:
        raise ConfigError(f"Unknown keys in '{name}': {', '.join(unknown)}")
    return settings_cls(**section)


def load_service_config(data: dict) -> ServiceConfig:
    """
    Parse a configuration dictionary into ServiceConfig.

    Args:
        data: Configuration dictionary from YAML

    Returns:
        ServiceConfig instance
    """
    return ServiceConfig(
        server=_build(ServerSettings, data, "server"),
        paths=_build(PathSettings, data, "paths"),
        tools=_build(ToolSettings, data, "tools"),
        compcache=_build(CompcacheSettings, data, "compcache"),
        bus=_build(BusSettings, data, "bus"),
        sticky=_build(StickySettings, data, "sticky"),
        logging=_build(LoggingSettings, data, "logging"),
    )


def apply_env_overrides(config: ServiceConfig) -> None:
    """Apply the flat set of environment overrides"""
    host = os.environ.get("KERNELTUNE_HOST")
    if host:
        config.server.host = host

    port = os.environ.get("KERNELTUNE_PORT")
    if port:
        try:
            config.server.port = int(port)
        except ValueError as e:
            raise ConfigError(f"KERNELTUNE_PORT must be an integer, got {port!r}") from e

    level = os.environ.get("KERNELTUNE_LOG_LEVEL")
    if level:
        config.logging.level = level

    log_format = os.environ.get("KERNELTUNE_LOG_FORMAT")
    if log_format:
        config.logging.format = log_format
