"""
Sticky Scripts

Settings applied at runtime are lost on reboot. A sticky script is an
upstart job that replays them once the boot has finished, provided the
previous boot and shutdown were healthy.
"""

import os
import tempfile
from dataclasses import dataclass
from pathlib import Path

from ..common.exceptions import StickyScriptError
from ..common.logging_setup import get_service_logger

logger = get_service_logger("sticky")


@dataclass
class StickyScript:
    """An upstart job replaying a list of shell commands"""
    description: str
    commands: list[str]
    boot_gates: list[str]
    stop_on: str | None = None
    start_on: str = "stopped finish"

    def render(self) -> str:
        lines = [f'description "{self.description}"', "", f"start on {self.start_on}"]
        if self.stop_on:
            lines.append(f"stop on {self.stop_on}")
        lines += ["", "script", ""]
        lines.extend(self.boot_gates)
        lines.append("")
        lines.extend(self.commands)
        lines += ["", "end script"]
        return "\n".join(lines) + "\n"


class StickyScriptWriter:
    """Installs and removes sticky scripts"""

    def write(self, path: str | os.PathLike, script: StickyScript) -> None:
        """
        Atomically replace the script at path.

        The content goes to a temporary file beside the target, which is
        then renamed over it. On any failure the temporary file is removed,
        so the target is either the old script or the complete new one.

        Raises:
            StickyScriptError: the script could not be written
        """
        path = Path(path)
        try:
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{path.name}.", suffix=".tmp", dir=path.parent
            )
        except OSError as e:
            raise StickyScriptError(f"Unable to open {path}", str(path)) from e

        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(script.render())
            os.chmod(tmp_name, 0o644)
            os.replace(tmp_name, path)
        except OSError as e:
            self._discard(tmp_name)
            logger.error(
                f"Unable to write sticky script {path}: {e}",
                extra={"path": str(path)},
            )
            raise StickyScriptError(f"Unable to write to {path}", str(path)) from e

        logger.info(
            f"Installed sticky script {path} ({len(script.commands)} commands)",
            extra={"path": str(path)},
        )

    def remove(self, path: str | os.PathLike) -> None:
        """Delete the script; a missing script is not an error"""
        path = Path(path)
        try:
            path.unlink()
        except FileNotFoundError:
            return
        except OSError as e:
            # Removal is best effort, the reply still succeeds
            logger.warning(f"Unable to remove sticky script {path}: {e}")
            return
        logger.info(f"Removed sticky script {path}", extra={"path": str(path)})

    @staticmethod
    def _discard(tmp_name: str) -> None:
        try:
            os.unlink(tmp_name)
        except FileNotFoundError:
            pass
