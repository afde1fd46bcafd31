from __future__ import annotations

from archinstall import info

from kernel_updater.config import UpdaterConfig
from kernel_updater.process import run_command


def update_grub(config: UpdaterConfig) -> None:
    """Regenerate the GRUB configuration so it lists the new kernel."""
    info(f"Updating GRUB boot configuration for kernel {config.kernel_ident_name_new}")
    run_command("update-grub", [])
    info("GRUB update completed successfully")
