"""Tests for configuration loading"""

import pytest

from kerneltune.common.config import DEFAULT_BOOT_GATES, ServiceConfig
from kerneltune.common.exceptions import ConfigError


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in (
        "KERNELTUNE_CONFIG",
        "KERNELTUNE_HOST",
        "KERNELTUNE_PORT",
        "KERNELTUNE_LOG_LEVEL",
        "KERNELTUNE_LOG_FORMAT",
    ):
        monkeypatch.delenv(name, raising=False)


def test_missing_file_uses_defaults(tmp_path):
    config = ServiceConfig.load(tmp_path / "absent.yaml")

    assert config.source is None
    assert config.server.port == 8090
    assert config.paths.cpufreq_dir == "/sys/devices/system/cpu/cpu0/cpufreq"
    assert config.paths.cpufreq_stats_dir == "/sys/devices/system/cpu/cpu0/cpufreq/stats"
    assert config.compcache.default_memlimit == "16384"
    assert config.sticky.boot_gates == DEFAULT_BOOT_GATES


def test_partial_file_overrides_section(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text(
        "server:\n"
        "  port: 9000\n"
        "compcache:\n"
        "  settle_seconds: 0.5\n"
    )

    config = ServiceConfig.load(path)

    assert config.source == str(path)
    assert config.server.port == 9000
    assert config.server.host == "127.0.0.1"
    assert config.compcache.settle_seconds == 0.5
    assert config.compcache.backing_swap == "/dev/mapper/store-swap"


def test_env_overrides(tmp_path, monkeypatch):
    monkeypatch.setenv("KERNELTUNE_PORT", "9100")
    monkeypatch.setenv("KERNELTUNE_LOG_LEVEL", "DEBUG")

    config = ServiceConfig.load(tmp_path / "absent.yaml")

    assert config.server.port == 9100
    assert config.logging.level == "DEBUG"


def test_config_path_from_env(tmp_path, monkeypatch):
    path = tmp_path / "custom.yaml"
    path.write_text("logging:\n  format: text\n")
    monkeypatch.setenv("KERNELTUNE_CONFIG", str(path))

    assert ServiceConfig.load().logging.format == "text"


@pytest.mark.parametrize("content, message", [
    ("server:\n  prot: 1\n", "Unknown keys in 'server': prot"),
    ("server: [1]\n", "Section 'server' must be a mapping"),
    ("- a\n- b\n", "must contain a mapping"),
    ("server: {port: 1\n", "Error parsing"),
])
def test_invalid_files(tmp_path, content, message):
    path = tmp_path / "config.yaml"
    path.write_text(content)

    with pytest.raises(ConfigError, match=message.replace("[", r"\[")):
        ServiceConfig.load(path)


def test_bad_port_env(tmp_path, monkeypatch):
    monkeypatch.setenv("KERNELTUNE_PORT", "eighty")

    with pytest.raises(ConfigError) as exc_info:
        ServiceConfig.load(tmp_path / "absent.yaml")
    assert exc_info.value.message.startswith("Config Error: KERNELTUNE_PORT")
