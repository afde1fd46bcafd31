from __future__ import annotations

from kernel_updater.config import UpdaterConfig
from kernel_updater.shared import InitramfsTool

from .base import InitramfsHandler
from .dracut import DracutInitramfsHandler
from .mkinitcpio import MkinitcpioInitramfsHandler

__all__ = [
    "DracutInitramfsHandler",
    "InitramfsHandler",
    "MkinitcpioInitramfsHandler",
    "create_initramfs_handler",
    "regenerate_initramfs",
]


def create_initramfs_handler(config: UpdaterConfig) -> InitramfsHandler:
    if config.initramfs is InitramfsTool.DRACUT:
        return DracutInitramfsHandler(config)
    return MkinitcpioInitramfsHandler(config)


def regenerate_initramfs(config: UpdaterConfig) -> None:
    create_initramfs_handler(config).generate_initramfs()
