"""
Error taxonomy for the kernel updater.

Every failure a stage or validation step can produce is a subclass of
KernelUpdaterError. Each kind keeps the values needed to describe it as
attributes, and str() gives the operator-facing message.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from kernel_updater.shared import OperationMode
    from kernel_updater.version import Version


class KernelUpdaterError(Exception):
    """Base class for all kernel updater failures."""


class IOFailureError(KernelUpdaterError):
    """A filesystem operation failed or a program could not be started."""

    def __init__(self, message: str, path: Path | None = None) -> None:
        super().__init__(f"I/O error: {message}")
        self.path = path


class CommandFailedError(KernelUpdaterError):
    """An external program ran and exited with a non-zero status."""

    def __init__(self, program: str, args: list[str], exit_code: int | None) -> None:
        self.program = program
        self.args_list = list(args)
        self.exit_code = exit_code
        super().__init__(f"Command '{self.command_line}' failed with status: {exit_code}")

    @property
    def command_line(self) -> str:
        return " ".join([self.program, *self.args_list])


class OutputDecodeError(KernelUpdaterError):
    def __init__(self, program: str, reason: Any) -> None:
        self.program = program
        super().__init__(f"Command '{program}' succeeded but output is not valid UTF-8: {reason}")


class VersionOrderError(KernelUpdaterError):
    def __init__(self, new: Version, old: Version) -> None:
        self.new = new
        self.old = old
        super().__init__(f"Configuration validation failed: --new version ({new}) must be strictly greater than --old version ({old})")


class MissingArgumentError(KernelUpdaterError):
    def __init__(self, argument: str, mode: OperationMode) -> None:
        self.argument = argument
        self.mode = mode
        super().__init__(f"Configuration validation failed: {argument} argument is required for mode '{mode.value}'")


class DkmsModuleNotFoundError(KernelUpdaterError):
    def __init__(self, module: str = "nvidia") -> None:
        self.module = module
        super().__init__(f"DKMS module '{module}' not found in `dkms status`. Is the driver installed via DKMS?")


class DkmsParseError(KernelUpdaterError):
    def __init__(self, output: str, reason: str) -> None:
        self.output = output
        self.reason = reason
        super().__init__(f"Failed to parse module version from `dkms status` output: {reason}. Output was:\n{output}")


class ConfigTemplateNotFoundError(KernelUpdaterError):
    def __init__(self, path: Path) -> None:
        self.path = path
        super().__init__(f"Kernel config file not found at {path}")


class TreeNotConfiguredError(KernelUpdaterError):
    def __init__(self, src_dir: Path, version: Version) -> None:
        self.src_dir = src_dir
        self.version = version
        super().__init__(
            f"Kernel source tree ({src_dir}) for version {version} is not configured.\n"
            "Required '.config' file is missing.\n"
            "Did `make olddefconfig` fail or not run?"
        )


class BinaryNotFoundError(KernelUpdaterError):
    def __init__(self, path: Path, src_dir: Path, version: Version) -> None:
        self.path = path
        self.src_dir = src_dir
        self.version = version
        super().__init__(
            f"Compiled kernel binary not found at {path}.\n"
            f"Kernel source tree ({src_dir}) for version {version} does not appear to be compiled."
        )


class VersionParseError(KernelUpdaterError):
    """Base for version text that cannot be parsed."""

    def __init__(self, text: str, message: str) -> None:
        self.text = text
        super().__init__(message)


class VersionFormatError(VersionParseError):
    def __init__(self, text: str) -> None:
        super().__init__(text, f"Invalid version format '{text}': expected exactly three dot-separated numbers (e.g. 6.15.3)")


class VersionIntegerError(VersionParseError):
    def __init__(self, text: str, component: str) -> None:
        self.component = component
        super().__init__(text, f"Invalid version component '{component}' in '{text}': not a non-negative integer")


class InvalidOptionError(KernelUpdaterError):
    """An option value was rejected by configuration validation."""

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(f"Configuration validation failed: {reason}")
