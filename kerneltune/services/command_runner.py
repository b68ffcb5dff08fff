"""
Command Runner

Runs a fixed external tool with an argument list (no shell), merging stderr
into stdout and capturing the output line by line.
"""

import subprocess
from dataclasses import dataclass, field

from ..common.exceptions import CommandError
from ..common.logging_setup import get_service_logger, log_command

logger = get_service_logger("command")


@dataclass
class CommandResult:
    """Outcome of one command run"""
    argv: list[str]
    started: bool
    returncode: int | None = None
    lines: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.started and self.returncode == 0

    def text(self, separator: str = "<br>") -> str:
        """Plain mode: output lines joined with a separator"""
        return separator.join(self.lines)


def split_output(raw: bytes) -> list[str]:
    """Split raw output into lines, chomping newlines; bytes map 1:1 to chars"""
    if not raw:
        return []
    lines = raw.split(b"\n")
    if lines[-1] == b"":
        lines.pop()
    return [line.decode("latin-1") for line in lines]


class CommandRunner:
    """Executes commands synchronously and captures their output"""

    def __init__(self, timeout: float | None = None):
        self.timeout = timeout

    def run(self, argv: list[str]) -> CommandResult:
        """
        Run a command.

        Args:
            argv: Executable path followed by its arguments

        Returns:
            CommandResult; started is False if the process could not be spawned
        """
        try:
            completed = subprocess.run(
                argv,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                stdin=subprocess.DEVNULL,
                timeout=self.timeout,
                check=False,
            )
        except OSError as e:
            logger.error(
                f"Unable to start {argv[0]}: {e}",
                extra={"argv": argv},
            )
            return CommandResult(argv=list(argv), started=False)
        except subprocess.TimeoutExpired as e:
            logger.error(
                f"Command {' '.join(argv)} timed out after {self.timeout}s",
                extra={"argv": argv},
            )
            return CommandResult(
                argv=list(argv),
                started=True,
                lines=split_output(e.output or b""),
            )

        log_command(logger, argv, completed.returncode)
        return CommandResult(
            argv=list(argv),
            started=True,
            returncode=completed.returncode,
            lines=split_output(completed.stdout),
        )

    def run_or_raise(self, argv: list[str]) -> CommandResult:
        """Run a command, raising CommandError unless it exits 0"""
        result = self.run(argv)
        if not result.ok:
            raise CommandError(result.argv, result.lines, result.returncode)
        return result
