"""
Kernel source compilation and installation stages.
"""

from __future__ import annotations

from pathlib import Path

from archinstall import debug, info

from kernel_updater.config import UpdaterConfig
from kernel_updater.errors import BinaryNotFoundError, ConfigTemplateNotFoundError, TreeNotConfiguredError
from kernel_updater.fs import ensure_directory, path_exists, replace_symlink
from kernel_updater.process import get_cores, run_command
from kernel_updater.shared import Downloader

BZIMAGE_RELATIVE_PATH = Path("arch/x86/boot/bzImage")


def download_command(config: UpdaterConfig) -> tuple[str, list[str]]:
    """Return (program, args) fetching the tarball into the current directory."""
    if config.downloader is Downloader.WGET:
        return "wget", [config.download_link]
    return "curl", ["-fL", config.download_link, "-o", config.tarball_name]


def kernel_compile(config: UpdaterConfig) -> None:
    """Download, extract, configure and build the new kernel source tree.

    Raises:
        ConfigTemplateNotFoundError: the suffix's config template does not exist
        TreeNotConfiguredError: ``make olddefconfig`` left no .config behind
        CommandFailedError: any external step exited non-zero
    """
    info(f"Starting kernel compilation for version {config.version_new}")

    src_base = config.kernel_src_base
    src_dir = config.kernel_src_dir_path
    template = config.config_file_path

    info(f"Ensuring kernel source base directory exists: {src_base}")
    ensure_directory(src_base)

    info(f"Downloading kernel source from {config.download_link}")
    program, args = download_command(config)
    run_command(program, args, cwd=src_base)

    info(f"Extracting {config.tarball_name}")
    run_command("tar", ["-Jxvf", config.tarball_name], cwd=src_base)

    if not path_exists(template):
        raise ConfigTemplateNotFoundError(template)

    info(f"Copying config from {template} to {src_dir / '.config'}")
    run_command("cp", [str(template), ".config"], cwd=src_dir)

    info("Running 'make olddefconfig' to update kernel configuration")
    run_command("make", ["olddefconfig"], cwd=src_dir)

    if not path_exists(src_dir / ".config"):
        raise TreeNotConfiguredError(src_dir, config.version_new)
    debug(".config confirmed to exist after olddefconfig")

    cores = get_cores(1)
    info(f"Running 'make -j {cores}'")
    run_command("make", ["-j", str(cores)], cwd=src_dir)

    info(f"Kernel compilation completed successfully in {src_dir}")


def kernel_install(config: UpdaterConfig) -> None:
    """Install modules and kernel image, then link the module tree to the sources.

    Raises:
        BinaryNotFoundError: the source tree holds no compiled bzImage
    """
    info(f"Starting kernel installation for version {config.version_new}")

    src_dir = config.kernel_src_dir_path
    bzimage = src_dir / BZIMAGE_RELATIVE_PATH
    modules_path = config.modules_install_path

    if not path_exists(bzimage):
        raise BinaryNotFoundError(bzimage, src_dir, config.version_new)
    debug(f"Verified compiled kernel binary exists at {bzimage}")

    info("Running 'make modules_install'")
    run_command("make", ["modules_install"], cwd=src_dir)
    info(f"Kernel modules installed to {modules_path}")

    info(f"Copying bzImage to {config.vmlinuz_install_path}")
    run_command("cp", [str(BZIMAGE_RELATIVE_PATH), str(config.vmlinuz_install_path)], cwd=src_dir)

    for link_name in ("build", "source"):
        replace_symlink(modules_path / link_name, src_dir)

    info(f"Kernel {config.kernel_ident_name_new} installed")
