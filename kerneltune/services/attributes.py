"""
Kernel Attribute Access

Helpers for sysfs/procfs attribute files: read one line or one integer,
enumerate a parameter directory, write one value. Contents are handled as
bytes and decoded latin-1 so every byte survives into the reply.
"""

import os
import re
import stat
from pathlib import Path

from ..common.exceptions import AttributeAccessError
from ..common.logging_setup import get_service_logger, log_attribute_write

logger = get_service_logger("attributes")

# Entries in a cpufreq directory that are not tunable parameters
EXCLUDED_PARAMETERS = frozenset(("stats", "affected_cpus", "scaling_driver"))

_INTEGER = re.compile(rb"\s*([+-]?\d+)")


def _open_for_read(path: str):
    try:
        return open(path, "rb")
    except OSError as e:
        raise AttributeAccessError(f"Unable to open {path}", path) from e


def _read_first_line(path: str) -> bytes:
    f = _open_for_read(path)
    with f:
        try:
            line = f.readline()
        except OSError as e:
            raise AttributeAccessError(f"Unable to parse {path}", path) from e
    if not line:
        raise AttributeAccessError(f"Unable to parse {path}", path)
    return line


def read_single_line(path: str | os.PathLike) -> str:
    """Read the first line of a file, without its newline"""
    path = str(path)
    line = _read_first_line(path)
    return line.rstrip(b"\n").decode("latin-1")


def read_single_integer(path: str | os.PathLike) -> int:
    """Read the leading integer of a file"""
    path = str(path)
    f = _open_for_read(path)
    with f:
        try:
            data = f.read(64)
        except OSError as e:
            raise AttributeAccessError(f"Unable to parse {path}", path) from e
    match = _INTEGER.match(data)
    if not match:
        raise AttributeAccessError(f"Unable to parse {path}", path)
    return int(match.group(1))


def list_parameters(directory: str | os.PathLike) -> list[dict]:
    """
    Enumerate the parameter files of a directory.

    Subdirectories and the non-parameter entries in EXCLUDED_PARAMETERS are
    skipped. Each remaining file is reported with its owner-write bit and
    the first line of its content.

    Args:
        directory: cpufreq (or governor) directory

    Returns:
        List of {"name", "writeable", "value"} dicts sorted by name

    Raises:
        AttributeAccessError: directory cannot be opened (no errorCode, since
            some governors have no parameter directory), or a parameter file
            cannot be read (errorCode -1)
    """
    directory = str(directory)
    try:
        names = sorted(os.listdir(directory))
    except OSError as e:
        raise AttributeAccessError(
            f"Unable to open {directory}", directory, error_code=None
        ) from e

    params = []
    for name in names:
        if name in EXCLUDED_PARAMETERS:
            continue

        path = os.path.join(directory, name)
        writeable = False
        try:
            st = os.stat(path)
        except OSError:
            st = None
        if st is not None:
            if stat.S_ISDIR(st.st_mode):
                continue
            writeable = bool(st.st_mode & stat.S_IWUSR)

        params.append({
            "name": name,
            "writeable": writeable,
            "value": read_single_line(path),
        })

    return params


def write_value(path: str | os.PathLike, value: str) -> None:
    """
    Write a single value into an attribute file, without a newline.

    Raises:
        AttributeAccessError: open, write or close failed
    """
    path = str(path)
    data = value.encode("latin-1")

    try:
        # Unbuffered so a rejected value surfaces at write time
        f = open(path, "wb", buffering=0)
    except OSError as e:
        log_attribute_write(logger, path, value, success=False)
        raise AttributeAccessError(f"Unable to open {path}", path) from e

    write_error = None
    try:
        f.write(data)
    except OSError as e:
        write_error = e

    try:
        f.close()
    except OSError as e:
        log_attribute_write(logger, path, value, success=False)
        raise AttributeAccessError(f"Unable to close {path}", path) from e

    if write_error is not None:
        log_attribute_write(logger, path, value, success=False)
        raise AttributeAccessError(f"Unable to write to {path}", path) from write_error

    log_attribute_write(logger, path, value)


def parameter_path(directory: str, *names: str) -> str:
    """Join validated tokens onto a directory"""
    return str(Path(directory).joinpath(*names))
