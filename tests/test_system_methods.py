"""Tests for status, /proc dumps, temperatures and TCP congestion control"""

import pytest


async def test_status(registry):
    assert await registry.dispatch("status", {}) == {"returnValue": True}


@pytest.mark.parametrize("method, entry, lines", [
    ("get_proc_cpuinfo", "cpuinfo", ["Processor\t: ARMv7", "BogoMIPS\t: 598.90"]),
    ("get_proc_meminfo", "meminfo", ["MemTotal:  250000 kB"]),
    ("get_proc_loadavg", "loadavg", ["0.10 0.20 0.30 1/80 1234"]),
])
async def test_proc_dumps(registry, runner, config, method, entry, lines):
    reply = await registry.dispatch(method, {})

    assert reply == {"stdOut": lines, "returnValue": True}
    assert runner.calls == [["cat", f"{config.paths.proc_dir}/{entry}"]]


async def test_proc_dump_failure_reports_output(registry, kernel_tree, config):
    (kernel_tree / "proc" / "loadavg").unlink()

    reply = await registry.dispatch("get_proc_loadavg", {})

    path = f"{config.paths.proc_dir}/loadavg"
    assert reply == {
        "errorText": f"Unable to run command: cat {path}",
        "stdErr": [f"cat: {path}: No such file or directory"],
        "returnValue": False,
        "errorCode": -1,
    }


async def test_temperatures(registry):
    assert await registry.dispatch("get_omap34xx_temp", {}) == {"value": 38, "returnValue": True}
    assert await registry.dispatch("get_tmp105_temp", {}) == {"value": -4, "returnValue": True}


async def test_missing_sensor(registry, kernel_tree, config):
    (kernel_tree / "sensors" / "celsius").unlink()

    reply = await registry.dispatch("get_tmp105_temp", {})
    assert reply == {
        "errorText": f"Unable to open {config.paths.tmp105_temp}",
        "returnValue": False,
        "errorCode": -1,
    }


@pytest.mark.parametrize("method, lines", [
    ("get_tcp_congestion_control", ["cubic"]),
    ("get_tcp_allowed_congestion_control", ["cubic reno"]),
    ("get_tcp_available_congestion_control", ["cubic reno westwood"]),
])
async def test_tcp_dumps(registry, method, lines):
    assert await registry.dispatch(method, {}) == {"stdOut": lines, "returnValue": True}


async def test_set_tcp_congestion_control(registry, kernel_tree):
    reply = await registry.dispatch("set_tcp_congestion_control", {"value": "westwood"})

    assert reply == {"returnValue": True}
    assert (kernel_tree / "tcp" / "tcp_congestion_control").read_bytes() == b"westwood"


@pytest.mark.parametrize("payload", [{}, {"value": 3}, {"value": ""}, {"value": "reno\ncubic"}])
async def test_set_tcp_congestion_control_rejects(registry, kernel_tree, payload):
    reply = await registry.dispatch("set_tcp_congestion_control", payload)

    assert reply == {"errorText": "Invalid or missing value", "returnValue": False, "errorCode": -1}
    assert (kernel_tree / "tcp" / "tcp_congestion_control").read_text() == "cubic\n"
