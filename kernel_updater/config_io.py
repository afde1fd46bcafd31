from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from kernel_updater.config import PathSettings
from kernel_updater.errors import IOFailureError, KernelUpdaterError

SETTINGS_KEY = "kernel_updater"


class SettingsFileError(KernelUpdaterError):
    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        super().__init__(f"Invalid settings file {path}: {reason}")


def extract_settings_block(config_json: str) -> dict[str, Any]:
    data = json.loads(config_json) if config_json else {}
    if not isinstance(data, dict):
        raise ValueError("top level must be a JSON object")
    block = data.get(SETTINGS_KEY, {})
    if not isinstance(block, dict):
        raise ValueError(f"'{SETTINGS_KEY}' must be a JSON object")
    block.pop("schema_version", None)
    return block


def load_settings(config_path: Path | None) -> PathSettings:
    """Return PathSettings from the ``kernel_updater`` block of a JSON file.

    A missing path or a file without the block yields the defaults.
    """
    if config_path is None or not config_path.exists():
        return PathSettings()

    try:
        content = config_path.read_text()
    except OSError as e:
        raise IOFailureError(str(e), config_path) from e

    try:
        return PathSettings.model_validate(extract_settings_block(content))
    except (ValueError, ValidationError) as e:
        raise SettingsFileError(config_path, str(e)) from e
