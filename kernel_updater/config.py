from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from kernel_updater.errors import InvalidOptionError, MissingArgumentError, VersionOrderError
from kernel_updater.shared import Downloader, InitramfsTool, OperationMode
from kernel_updater.version import Version

DEFAULT_SUFFIX = "ClaudioFSR"
KERNEL_CDN = "https://cdn.kernel.org/pub/linux/kernel"


class PathSettings(BaseModel):
    """Host layout the updater works against.

    The defaults match an Arch/Manjaro-style host that keeps custom source
    trees next to the installed module directories.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    kernel_src_base: Path = Path("/lib/modules")
    kernel_module_base: Path = Path("/lib/modules")
    kernel_config_base: Path = Path("/lib/modules")
    boot_dir: Path = Path("/boot")
    kernel_url_base: str | None = None  # None: derived from the major version
    dkms_module: str = "nvidia"

    @field_validator("kernel_url_base")
    @classmethod
    def _validate_url_base(cls, v: str | None) -> str | None:
        if v is None:
            return v
        if not v.startswith(("https://", "http://")):
            raise ValueError("Kernel URL base must be an http(s) URL")
        return v.rstrip("/")

    @field_validator("dkms_module")
    @classmethod
    def _validate_dkms_module(cls, v: str) -> str:
        if not v or "/" in v or any(c.isspace() for c in v):
            raise ValueError("DKMS module name must be a single word without '/'")
        return v


class UpdaterConfig(BaseModel):
    """Validated execution plan for one run.

    Built once through build(); every path and name a stage needs is derived
    from the version pair and the suffix, without touching the host.
    """

    model_config = ConfigDict(frozen=True)

    version_new: Version
    version_old: Version | None = None
    suffix: str = DEFAULT_SUFFIX
    downloader: Downloader = Downloader.CURL
    mode: OperationMode = OperationMode.FULL
    initramfs: InitramfsTool = InitramfsTool.MKINITCPIO
    settings: PathSettings = PathSettings()

    @field_validator("suffix")
    @classmethod
    def _validate_suffix(cls, v: str) -> str:
        if not v or "/" in v or any(c.isspace() for c in v):
            raise ValueError("Kernel suffix must be non-empty and contain no '/' or whitespace")
        return v

    @classmethod
    def build(
        cls,
        new: Version,
        old: Version | None = None,
        suffix: str = DEFAULT_SUFFIX,
        downloader: Downloader = Downloader.CURL,
        mode: OperationMode = OperationMode.FULL,
        initramfs: InitramfsTool = InitramfsTool.MKINITCPIO,
        settings: PathSettings | None = None,
    ) -> UpdaterConfig:
        """Validate the version pair against the mode and return the plan.

        Raises:
            VersionOrderError: old is given and new is not strictly greater
            MissingArgumentError: the mode needs the old version and none was given
            InvalidOptionError: the suffix is not usable in file and kernel names
        """
        if old is not None and new <= old:
            raise VersionOrderError(new, old)

        if mode.requires_old_version and old is None:
            raise MissingArgumentError("--old", mode)

        try:
            return cls(
                version_new=new,
                version_old=old,
                suffix=suffix,
                downloader=downloader,
                mode=mode,
                initramfs=initramfs,
                settings=settings or PathSettings(),
            )
        except ValidationError as e:
            raise InvalidOptionError(str(e)) from e

    @staticmethod
    def release_name(version: Version) -> str:
        # Upstream drops ".0" from the first release of a series (linux-6.15.tar.xz)
        return version.short if version.patch == 0 else str(version)

    def kernel_ident(self, version: Version) -> str:
        return f"{self.release_name(version)}-{self.suffix}"

    @property
    def kernel_src_base(self) -> Path:
        return self.settings.kernel_src_base

    @property
    def kernel_module_base(self) -> Path:
        return self.settings.kernel_module_base

    @property
    def kernel_url_base(self) -> str:
        return self.settings.kernel_url_base or f"{KERNEL_CDN}/v{self.version_new.major}.x"

    @property
    def kernel_src_dir_name(self) -> str:
        return f"linux-{self.release_name(self.version_new)}"

    @property
    def kernel_src_dir_path(self) -> Path:
        return self.kernel_src_base / self.kernel_src_dir_name

    @property
    def tarball_name(self) -> str:
        return f"{self.kernel_src_dir_name}.tar.xz"

    @property
    def download_link(self) -> str:
        return f"{self.kernel_url_base}/{self.tarball_name}"

    @property
    def kernel_ident_name_new(self) -> str:
        return self.kernel_ident(self.version_new)

    @property
    def kernel_ident_name_old(self) -> str | None:
        if self.version_old is None:
            return None
        return self.kernel_ident(self.version_old)

    @property
    def config_file_path(self) -> Path:
        return self.settings.kernel_config_base / f"config-{self.suffix}"

    @property
    def vmlinuz_install_path(self) -> Path:
        return self.settings.boot_dir / f"vmlinuz-{self.version_new.short}"

    @property
    def modules_install_path(self) -> Path:
        return self.kernel_module_base / self.kernel_ident_name_new

    @property
    def mkinitcpio_profile(self) -> str:
        return f"linux{self.version_new.major}{self.version_new.minor}_{self.suffix}"

    @property
    def dkms_module(self) -> str:
        return self.settings.dkms_module

    def summary_lines(self) -> list[str]:
        lines = ["Running with configuration:"]
        if self.version_old is not None:
            lines.append(f"  Old version: {self.version_old}")
        lines.append(f"  New version: {self.version_new}")
        lines.append(f"  Mode: {self.mode.value}")
        lines.append(f"  Downloader: {self.downloader.value}")
        lines.append(f"  Kernel Source Base: {self.kernel_src_base}")
        lines.append(f"  Custom Suffix: {self.suffix}")
        lines.append(f"  New Kernel Ident: {self.kernel_ident_name_new}")
        if self.kernel_ident_name_old is not None:
            lines.append(f"  Old Kernel Ident: {self.kernel_ident_name_old}")
        return lines

    def to_json(self) -> dict[str, Any]:
        return self.model_dump(mode="json", exclude_none=True)
