from __future__ import annotations

from .base import InitramfsHandler


class MkinitcpioInitramfsHandler(InitramfsHandler):
    """Builds the image through the suffix-specific mkinitcpio preset.

    The preset (``/etc/mkinitcpio.d/linux615_<suffix>.preset``) is expected to
    exist already; it names the kernel image and the initramfs output paths.
    """

    def command(self) -> tuple[str, list[str]]:
        return "mkinitcpio", ["-p", self.config.mkinitcpio_profile]
