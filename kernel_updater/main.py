import argparse
import sys
from pathlib import Path

from archinstall import debug, error, info

from kernel_updater.config import DEFAULT_SUFFIX, UpdaterConfig
from kernel_updater.config_io import load_settings
from kernel_updater.errors import KernelUpdaterError
from kernel_updater.pipeline import PipelineResult, run_pipeline
from kernel_updater.shared import Downloader, InitramfsTool, OperationMode
from kernel_updater.version import Version

COMMAND_MODES = {
    "kernel-compile": OperationMode.COMPILE,
    "kernel-install": OperationMode.INSTALL,
    "dkms-install": OperationMode.DKMS,
}

EPILOG = """\
Examples:

  Compile source tree for 6.15.4:
  sudo kernel-updater -n 6.15.4 kernel-compile

  Install compiled 6.15.4 kernel:
  sudo kernel-updater -n 6.15.4 kernel-install

  Build/install DKMS for 6.15.4, remove for 6.15.3:
  sudo kernel-updater -o 6.15.3 -n 6.15.4 dkms-install

  Full update (compile, install, dkms update):
  sudo kernel-updater -o 6.15.3 -n 6.15.4

For the default operation and 'dkms-install' the old version (-o) is required,
and whenever it is given the new version (-n) must be strictly greater.
"""


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="kernel-updater",
        description="Compile and install a custom Linux kernel and rebuild its NVIDIA DKMS module.",
        epilog=EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("-n", "--new", required=True, help='The new kernel version (e.g. "6.15.4")')
    parser.add_argument("-o", "--old", help='The old kernel version (e.g. "6.15.3")')
    parser.add_argument("-s", "--suffix", default=DEFAULT_SUFFIX, help="The kernel suffix")
    parser.add_argument(
        "-d",
        "--downloader",
        choices=[d.value for d in Downloader],
        default=Downloader.CURL.value,
        help="Downloader program to use",
    )
    parser.add_argument(
        "--initramfs",
        choices=[t.value for t in InitramfsTool],
        default=InitramfsTool.MKINITCPIO.value,
        help="Initramfs generator to run after installation",
    )
    parser.add_argument("--config", type=Path, help="JSON settings file overriding the default paths")

    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")
    subparsers.add_parser("kernel-compile", help="Compile the new kernel source")
    subparsers.add_parser("kernel-install", help="Install the compiled kernel")
    subparsers.add_parser("dkms-install", help="Build/install DKMS modules")
    return parser


def config_from_args(args: argparse.Namespace) -> UpdaterConfig:
    new = Version.parse(args.new)
    old = Version.parse(args.old) if args.old is not None else None
    mode = COMMAND_MODES.get(args.command, OperationMode.FULL)

    return UpdaterConfig.build(
        new,
        old,
        suffix=args.suffix,
        downloader=Downloader(args.downloader),
        mode=mode,
        initramfs=InitramfsTool(args.initramfs),
        settings=load_settings(args.config),
    )


def run(argv: list[str] | None = None) -> PipelineResult:
    args = build_parser().parse_args(argv)
    config = config_from_args(args)
    debug(f"Configuration: {config.to_json()}")

    for line in config.summary_lines():
        info(line)

    result = run_pipeline(config)
    info(result.get_summary())

    if config.mode is OperationMode.FULL and config.version_old is not None:
        info(f"Kernel updated successfully: {config.version_old} -> {config.version_new}")
    return result


def main(argv: list[str] | None = None) -> int:
    try:
        run(argv)
    except KernelUpdaterError as e:
        error("Operation failed")
        debug(f"Full error details: {e!r}")
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print("All requested operations finished.")
    return 0

