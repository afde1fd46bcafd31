"""
DKMS handling for the out-of-tree NVIDIA driver.

The module version is read from ``dkms status`` rather than configured, so a
driver upgrade between kernel updates needs no change here.
"""

from __future__ import annotations

from archinstall import debug, info

from kernel_updater.config import UpdaterConfig
from kernel_updater.errors import DkmsModuleNotFoundError, DkmsParseError
from kernel_updater.process import run_command, run_command_output


def parse_dkms_status(output: str, module: str = "nvidia") -> str:
    """Extract the module version from ``dkms status`` output.

    Status lines look like ``nvidia/550.135, 6.11.10-2-OTHER, x86_64: installed``;
    the first line starting with ``<module>/`` that carries a comma is used,
    so lines like ``nvidia/550.135: added`` are skipped.

    Raises:
        DkmsModuleNotFoundError: no line starts with ``<module>/``
        DkmsParseError: no such line has a comma, or its version is empty
    """
    prefix = f"{module}/"
    candidates = [line.strip() for line in output.splitlines() if line.strip().startswith(prefix)]
    if not candidates:
        raise DkmsModuleNotFoundError(module)

    line = next((line for line in candidates if "," in line), None)
    if line is None:
        raise DkmsParseError(output, "could not extract version from line format")

    version = line[len(prefix) : line.index(",")].strip()
    if not version:
        raise DkmsParseError(output, f"empty version in line '{line}'")

    return version


def get_module_version(module: str = "nvidia") -> str:
    info(f"Getting {module} DKMS module version")
    version = parse_dkms_status(run_command_output("dkms", ["status"]), module)
    info(f"Detected {module} DKMS module version: {version}")
    return version


def dkms_install(config: UpdaterConfig) -> None:
    """Build and install the driver module for the new kernel, forcing a rebuild."""
    module = config.dkms_module
    module_spec = f"{module}/{get_module_version(module)}"
    kernel = config.kernel_ident_name_new

    info(f"Building and installing {module_spec} for kernel {kernel}")
    run_command("dkms", ["install", "--force", module_spec, "-k", kernel])
    info(f"DKMS module {module_spec} built and installed for kernel {kernel}")


def dkms_remove(config: UpdaterConfig) -> None:
    """Remove the driver module registered for the old kernel.

    Errors propagate; the pipeline decides which of them are tolerated.
    """
    kernel = config.kernel_ident_name_old
    if kernel is None:
        raise ValueError("dkms_remove needs a configuration with an old version")

    module = config.dkms_module
    info(f"Removing {module} DKMS module for old kernel {config.version_old} ({kernel})")
    module_spec = f"{module}/{get_module_version(module)}"

    output = run_command_output("dkms", ["remove", module_spec, "-k", kernel])
    debug(output)
    info(f"Removed DKMS module {module_spec} for kernel {kernel}")
