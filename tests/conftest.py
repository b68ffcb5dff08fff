"""
Pytest configuration for kerneltune unit tests.

Builds a fake sysfs/procfs tree under tmp_path, and replaces command
execution and the nested bus transport with recording fakes.
"""

import json
import os
from pathlib import Path

import httpx
import pytest

from kerneltune.bus.client import BusClient
from kerneltune.common.config import ServiceConfig
from kerneltune.methods import build_registry
from kerneltune.services.command_runner import CommandResult, CommandRunner
from kerneltune.services.context import ServiceContext
from kerneltune.services.sticky_script import StickyScriptWriter


class FakeRunner(CommandRunner):
    """
    Records every argv instead of executing it.

    `cat` returns the real content of the file it is pointed at. Other tools
    succeed with the output configured for them, unless their name or full
    command line is listed in fail_on.
    """

    def __init__(self, outputs: dict[str, list[str]] | None = None, fail_on=()):
        super().__init__()
        self.calls: list[list[str]] = []
        self.outputs = outputs or {}
        self.fail_on = set(fail_on)

    def run(self, argv: list[str]) -> CommandResult:
        self.calls.append(list(argv))
        tool = os.path.basename(argv[0])

        if tool in self.fail_on or " ".join(argv) in self.fail_on:
            lines = self.outputs.get(tool, [f"{tool}: failed"])
            return CommandResult(argv=list(argv), started=True, returncode=1, lines=lines)

        if tool == "cat":
            try:
                content = Path(argv[1]).read_bytes()
            except OSError as e:
                return CommandResult(
                    argv=list(argv), started=True, returncode=1,
                    lines=[f"cat: {argv[1]}: {e.strerror}"],
                )
            lines = content.decode("latin-1").split("\n")
            if lines[-1] == "":
                lines.pop()
            return CommandResult(argv=list(argv), started=True, returncode=0, lines=lines)

        return CommandResult(
            argv=list(argv), started=True, returncode=0,
            lines=list(self.outputs.get(tool, [])),
        )

    def tools_called(self) -> list[str]:
        return [" ".join([os.path.basename(argv[0]), *argv[1:]]) for argv in self.calls]


class BusRecorder:
    """httpx MockTransport handler recording nested calls"""

    def __init__(self, reply: dict | None = None, status: int = 200):
        self.reply = reply if reply is not None else {"returnValue": True}
        self.status = status
        self.requests: list[tuple[str, dict]] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append((str(request.url), json.loads(request.content)))
        return httpx.Response(self.status, json=self.reply)


def write(path: Path, content: str, mode: int = 0o644) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content)
    path.chmod(mode)
    return path


@pytest.fixture
def kernel_tree(tmp_path) -> Path:
    """A minimal cpu0 cpufreq, procfs and module tree"""
    root = tmp_path / "kernel"
    cpufreq = root / "cpufreq"

    write(cpufreq / "scaling_governor", "ondemand\n")
    write(cpufreq / "scaling_cur_freq", "600000\n", 0o444)
    write(cpufreq / "scaling_max_freq", "800000\n")
    write(cpufreq / "scaling_min_freq", "125000\n")
    write(cpufreq / "scaling_available_governors", "ondemand userspace performance\n", 0o444)
    write(cpufreq / "affected_cpus", "0\n", 0o444)
    write(cpufreq / "scaling_driver", "omap\n", 0o444)
    write(cpufreq / "stats" / "time_in_state", "125000 10\n250000 20\n", 0o444)
    write(cpufreq / "stats" / "total_trans", "42\n", 0o444)
    write(cpufreq / "stats" / "trans_table", "   From  :    To\n", 0o444)
    write(cpufreq / "ondemand" / "up_threshold", "80\n")
    write(cpufreq / "ondemand" / "sampling_rate", "100000\n")
    write(cpufreq / "ondemand" / "sampling_rate_min", "50000\n", 0o444)

    write(root / "proc" / "cpuinfo", "Processor\t: ARMv7\nBogoMIPS\t: 598.90\n", 0o444)
    write(root / "proc" / "meminfo", "MemTotal:  250000 kB\n", 0o444)
    write(root / "proc" / "loadavg", "0.10 0.20 0.30 1/80 1234\n", 0o444)
    write(root / "tcp" / "tcp_congestion_control", "cubic\n")
    write(root / "tcp" / "tcp_allowed_congestion_control", "cubic reno\n", 0o444)
    write(root / "tcp" / "tcp_available_congestion_control", "cubic reno westwood\n", 0o444)
    write(root / "sensors" / "temp1_input", "38\n", 0o444)
    write(root / "sensors" / "celsius", "-4\n", 0o444)

    write(root / "modules" / "2.6.24-palm-joplin-3430" / "extra" / "ramzswap.ko", "")
    write(root / "modules" / "2.6.24-palm-joplin-3430" / "extra" / "xvmalloc.ko", "")
    (root / "event.d").mkdir()

    return root


@pytest.fixture
def config(kernel_tree) -> ServiceConfig:
    config = ServiceConfig()
    paths = config.paths
    paths.cpufreq_dir = str(kernel_tree / "cpufreq")
    paths.proc_dir = str(kernel_tree / "proc")
    paths.tcp_dir = str(kernel_tree / "tcp")
    paths.omap34xx_temp = str(kernel_tree / "sensors" / "temp1_input")
    paths.tmp105_temp = str(kernel_tree / "sensors" / "celsius")
    paths.cpufreq_script = str(kernel_tree / "event.d" / "govnah-settings")
    paths.compcache_script = str(kernel_tree / "event.d" / "govnah-compcache")

    tools = config.tools
    for name in ("cat", "uname", "swapoff", "swapon", "insmod", "rmmod"):
        setattr(tools, name, name)

    config.compcache.modules_dir = str(kernel_tree / "modules")
    config.compcache.proc_file = str(kernel_tree / "proc" / "ramzswap")
    config.compcache.settle_seconds = 0
    config.bus.application_manager_url = "http://bus.test/com.palm.applicationManager"
    return config


@pytest.fixture
def runner() -> FakeRunner:
    return FakeRunner(outputs={"uname": ["2.6.24-palm-joplin-3430"]})


@pytest.fixture
def bus_recorder() -> BusRecorder:
    return BusRecorder()


@pytest.fixture
def context(config, runner, bus_recorder) -> ServiceContext:
    return ServiceContext(
        config=config,
        runner=runner,
        bus=BusClient(timeout_s=5, transport=httpx.MockTransport(bus_recorder)),
        sticky=StickyScriptWriter(),
    )


@pytest.fixture
def registry(context):
    return build_registry(context)
