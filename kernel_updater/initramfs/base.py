from __future__ import annotations

from abc import ABC, abstractmethod

from archinstall import info

from kernel_updater.config import UpdaterConfig
from kernel_updater.process import run_command


class InitramfsHandler(ABC):
    """Abstract base class for initramfs generators."""

    def __init__(self, config: UpdaterConfig) -> None:
        self.config: UpdaterConfig = config

    @abstractmethod
    def command(self) -> tuple[str, list[str]]:
        """Return (program, args) regenerating the initramfs for the new kernel."""

    def generate_initramfs(self) -> None:
        program, args = self.command()
        info(f"Running {program} for kernel {self.config.kernel_ident_name_new}")
        run_command(program, args)
        info(f"{program} completed successfully")
