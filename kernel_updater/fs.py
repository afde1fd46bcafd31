from __future__ import annotations

import shutil
from pathlib import Path

from archinstall import debug, info

from kernel_updater.errors import IOFailureError


def path_exists(path: Path) -> bool:
    """True if something (file, directory or link, even dangling) is at path."""
    return path.is_symlink() or path.exists()


def ensure_directory(path: Path) -> None:
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise IOFailureError(f"cannot create directory {path}: {e}", path) from e


def remove_path(path: Path) -> None:
    """Remove whatever is at path: file, symlink or directory tree."""
    try:
        if path.is_dir() and not path.is_symlink():
            shutil.rmtree(path)
        else:
            path.unlink()
    except OSError as e:
        raise IOFailureError(f"cannot remove {path}: {e}", path) from e


def replace_symlink(link_path: Path, target: Path) -> None:
    """Make link_path a symlink to target, replacing any existing entry."""
    if path_exists(link_path):
        debug(f"Removing existing entry at {link_path}")
        remove_path(link_path)

    try:
        link_path.symlink_to(target)
    except OSError as e:
        raise IOFailureError(f"cannot create symlink {link_path} -> {target}: {e}", link_path) from e

    info(f"Symlink {link_path} -> {target} created")
