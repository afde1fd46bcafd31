from __future__ import annotations

from enum import Enum


class Downloader(Enum):
    """Program used to fetch the kernel tarball."""

    CURL = "curl"
    WGET = "wget"


class OperationMode(Enum):
    """Which part of the update pipeline a run executes."""

    COMPILE = "compile"
    INSTALL = "install"
    DKMS = "dkms"
    FULL = "full"

    @property
    def requires_old_version(self) -> bool:
        return self in (OperationMode.DKMS, OperationMode.FULL)


class InitramfsTool(Enum):
    MKINITCPIO = "mkinitcpio"
    DRACUT = "dracut"
