"""
Stage sequencing for a kernel update run.

A run is an ordered list of Stage records chosen by the operation mode and
executed one at a time by run_pipeline. The first error a stage does not
tolerate aborts the run; nothing already done is rolled back.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from enum import Enum

from archinstall import debug, info, warn

from kernel_updater.bootloader import update_grub
from kernel_updater.config import UpdaterConfig
from kernel_updater.dkms import dkms_install, dkms_remove
from kernel_updater.errors import CommandFailedError, DkmsModuleNotFoundError, DkmsParseError, KernelUpdaterError, OutputDecodeError
from kernel_updater.initramfs import regenerate_initramfs
from kernel_updater.kernel import kernel_compile, kernel_install
from kernel_updater.shared import OperationMode

StageAction = Callable[[UpdaterConfig], None]

# A failing `dkms remove` usually means the module was never built for the
# old kernel. Failures to launch dkms at all (IOFailureError) stay fatal.
DKMS_REMOVE_TOLERATED: tuple[type[KernelUpdaterError], ...] = (
    CommandFailedError,
    DkmsModuleNotFoundError,
    DkmsParseError,
    OutputDecodeError,
)


@dataclass(frozen=True)
class Stage:
    """One pipeline step and the error kinds it downgrades to warnings."""

    name: str
    action: StageAction
    tolerated: tuple[type[KernelUpdaterError], ...] = ()

    @property
    def fatal(self) -> bool:
        return not self.tolerated


class StageStatus(Enum):
    OK = "ok"
    WARNED = "warned"


@dataclass
class StageOutcome:
    name: str
    status: StageStatus
    warning: str | None = None


@dataclass
class PipelineResult:
    mode: OperationMode
    outcomes: list[StageOutcome] = field(default_factory=list)

    @property
    def executed(self) -> list[str]:
        return [outcome.name for outcome in self.outcomes]

    @property
    def warnings(self) -> list[str]:
        return [outcome.warning for outcome in self.outcomes if outcome.warning]

    def get_summary(self) -> str:
        warned = [o.name for o in self.outcomes if o.status is StageStatus.WARNED]
        warned_text = f" (with warnings in: {', '.join(warned)})" if warned else ""
        return f"Completed {len(self.outcomes)} stage(s) for mode '{self.mode.value}'{warned_text}"


COMPILE = Stage("kernel-compile", kernel_compile)
INSTALL = Stage("kernel-install", kernel_install)
DKMS_REMOVE = Stage("dkms-remove", dkms_remove, tolerated=DKMS_REMOVE_TOLERATED)
DKMS_BUILD = Stage("dkms-install", dkms_install)
INITRAMFS = Stage("initramfs", regenerate_initramfs)
BOOTLOADER = Stage("bootloader-update", update_grub)

STAGES_BY_MODE: dict[OperationMode, tuple[Stage, ...]] = {
    OperationMode.COMPILE: (COMPILE,),
    OperationMode.INSTALL: (INSTALL, INITRAMFS, BOOTLOADER),
    OperationMode.DKMS: (DKMS_REMOVE, DKMS_BUILD, INITRAMFS, BOOTLOADER),
    OperationMode.FULL: (COMPILE, INSTALL, DKMS_REMOVE, DKMS_BUILD, INITRAMFS, BOOTLOADER),
}


def get_stages(mode: OperationMode) -> tuple[Stage, ...]:
    return STAGES_BY_MODE[mode]


def run_pipeline(config: UpdaterConfig, stages: Sequence[Stage] | None = None) -> PipelineResult:
    """Run the stages for config.mode (or the given stages) in order.

    Raises:
        KernelUpdaterError: the first error not tolerated by its stage
    """
    if stages is None:
        stages = get_stages(config.mode)

    result = PipelineResult(mode=config.mode)
    debug(f"Stage sequence: {[stage.name for stage in stages]}")

    for index, stage in enumerate(stages, start=1):
        info(f"--- Step {index}/{len(stages)}: {stage.name} ---")
        try:
            stage.action(config)
        except stage.tolerated as e:
            warn(f"{stage.name} failed, continuing: {e}")
            result.outcomes.append(StageOutcome(stage.name, StageStatus.WARNED, str(e)))
            continue

        result.outcomes.append(StageOutcome(stage.name, StageStatus.OK))

    return result
