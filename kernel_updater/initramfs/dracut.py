from __future__ import annotations

from .base import InitramfsHandler


class DracutInitramfsHandler(InitramfsHandler):
    def command(self) -> tuple[str, list[str]]:
        kver = self.config.kernel_ident_name_new
        image = self.config.settings.boot_dir / f"initramfs-{kver}.img"
        return "dracut", ["--force", str(image), "--kver", kver]
