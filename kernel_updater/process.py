"""
External program execution.

All stages reach external programs through run_command/run_command_output,
which translate failures into the kernel updater error kinds. Commands take
an explicit working directory instead of relying on the process-wide current
directory.

run_command goes through archinstall's SysCommand, which runs the child on a
pty and echoes everything it prints. A pty merges stdout and stderr, so
run_command_output pipes only stdout and leaves stderr attached to the
operator's terminal.
"""

from __future__ import annotations

import os
import subprocess
from pathlib import Path

from archinstall import debug
from archinstall.lib.exceptions import RequirementError, SysCallError
from archinstall.lib.general import SysCommand, locate_binary

from kernel_updater.errors import CommandFailedError, IOFailureError, OutputDecodeError


def run_command(program: str, args: list[str], cwd: Path | None = None) -> None:
    """Run a program with its output shown live; raise on non-zero exit."""
    debug(f"Executing: {' '.join([program, *args])} (in {cwd or '.'})")
    working_directory = str(cwd) if cwd is not None else "./"
    try:
        SysCommand([program, *args], peek_output=True, working_directory=working_directory)
    except SysCallError as e:
        raise CommandFailedError(program, args, e.exit_code) from e
    except RequirementError as e:
        # Raised by archinstall when the binary cannot be located
        raise IOFailureError(f"cannot run {program}: {e}") from e
    except OSError as e:
        raise IOFailureError(f"cannot run {program}: {e}") from e


def run_command_output(program: str, args: list[str], cwd: Path | None = None) -> str:
    """Run a program and return its standard output as text.

    Standard error is never captured; it reaches the terminal as the child
    writes it.
    """
    debug(f"Executing (capturing output): {' '.join([program, *args])} (in {cwd or '.'})")
    try:
        cmd = [locate_binary(program), *args]
        result = subprocess.run(cmd, cwd=cwd, stdout=subprocess.PIPE, env={**os.environ, "LC_ALL": "C"}, check=True)  # noqa: S603
    except subprocess.CalledProcessError as e:
        raise CommandFailedError(program, args, e.returncode) from e
    except RequirementError as e:
        raise IOFailureError(f"cannot run {program}: {e}") from e
    except OSError as e:
        raise IOFailureError(f"cannot run {program}: {e}") from e

    try:
        return result.stdout.decode("utf-8", errors="strict")
    except UnicodeDecodeError as e:
        raise OutputDecodeError(program, e) from e


def get_cores(free: int = 1) -> int:
    """Number of parallel build jobs: all logical cores minus ``free``, at least one."""
    cpus = os.cpu_count() or 1
    return max(cpus - free, 1)
