"""
Tests for the command line front end.

The pipeline is patched out; only argument handling, configuration building
and exit status reporting are exercised here. The console entry is run in a
subprocess so the real sys.argv handling is covered.
"""

import json
import subprocess
import sys
from pathlib import Path
from unittest.mock import Mock, patch

import pytest
from kernel_updater.errors import BinaryNotFoundError, CommandFailedError
from kernel_updater.main import build_parser, config_from_args, main
from kernel_updater.pipeline import PipelineResult
from kernel_updater.shared import Downloader, InitramfsTool, OperationMode
from kernel_updater.version import Version


def parse(argv: list[str]):
    return config_from_args(build_parser().parse_args(argv))


def fake_pipeline(config) -> PipelineResult:
    return PipelineResult(mode=config.mode)


class TestArguments:
    """Test mapping command lines to configurations."""

    @pytest.mark.parametrize(
        ("command", "mode"),
        [
            (["kernel-compile"], OperationMode.COMPILE),
            (["kernel-install"], OperationMode.INSTALL),
            (["dkms-install"], OperationMode.DKMS),
            ([], OperationMode.FULL),
        ],
    )
    def test_command_modes(self, command: list[str], mode: OperationMode) -> None:
        """Test each subcommand selects its mode and no subcommand means full."""
        config = parse(["-o", "6.15.3", "-n", "6.15.4", *command])
        assert config.mode is mode

    def test_defaults(self) -> None:
        """Test default suffix, downloader and initramfs tool."""
        config = parse(["-n", "6.15.4", "kernel-compile"])
        assert config.version_new == Version(6, 15, 4)
        assert config.version_old is None
        assert config.suffix == "ClaudioFSR"
        assert config.downloader is Downloader.CURL
        assert config.initramfs is InitramfsTool.MKINITCPIO

    def test_long_options(self) -> None:
        """Test the long option spellings."""
        config = parse(["--new", "6.16.0", "--old", "6.15.9", "--suffix", "LAB", "--downloader", "wget", "--initramfs", "dracut"])
        assert config.kernel_ident_name_new == "6.16-LAB"
        assert config.kernel_ident_name_old == "6.15.9-LAB"
        assert config.downloader is Downloader.WGET
        assert config.initramfs is InitramfsTool.DRACUT

    def test_new_required(self) -> None:
        """Test argparse rejects a command line without --new."""
        with pytest.raises(SystemExit) as exc_info:
            build_parser().parse_args(["kernel-compile"])
        assert exc_info.value.code == 2

    def test_unknown_downloader(self) -> None:
        """Test only the supported downloaders are accepted."""
        with pytest.raises(SystemExit):
            build_parser().parse_args(["-n", "6.15.4", "-d", "aria2c"])

    def test_settings_file(self, tmp_path: Path) -> None:
        """Test --config overrides the path settings."""
        config_file = tmp_path / "settings.json"
        config_file.write_text(json.dumps({"kernel_updater": {"kernel_src_base": "/usr/src", "dkms_module": "nvidia-open"}}))

        config = parse(["-n", "6.15.4", "--config", str(config_file), "kernel-compile"])

        assert config.kernel_src_base == Path("/usr/src")
        assert config.dkms_module == "nvidia-open"


class TestMain:
    """Test exit status and error reporting."""

    @patch("kernel_updater.main.run_pipeline", side_effect=fake_pipeline)
    def test_success(self, mock_pipeline: Mock, capsys: pytest.CaptureFixture[str]) -> None:
        """Test a successful run exits 0 and runs the pipeline once."""
        assert main(["-o", "6.15.3", "-n", "6.15.4"]) == 0

        mock_pipeline.assert_called_once()
        assert mock_pipeline.call_args.args[0].mode is OperationMode.FULL
        assert "All requested operations finished." in capsys.readouterr().out

    @patch("kernel_updater.main.run_pipeline")
    def test_stage_failure(self, mock_pipeline: Mock, capsys: pytest.CaptureFixture[str]) -> None:
        """Test a stage error exits 1 with its message on stderr."""
        mock_pipeline.side_effect = CommandFailedError("make", ["-j", "7"], 2)

        assert main(["-n", "6.15.4", "kernel-compile"]) == 1

        err = capsys.readouterr().err
        assert "Error: " in err
        assert "make -j 7" in err
        assert "status: 2" in err

    @patch("kernel_updater.main.run_pipeline")
    def test_install_failure(self, mock_pipeline: Mock, capsys: pytest.CaptureFixture[str]) -> None:
        """Test a missing kernel image is reported as a failure."""
        mock_pipeline.side_effect = BinaryNotFoundError(Path("/x/bzImage"), Path("/x"), Version(6, 15, 4))
        assert main(["-n", "6.15.4", "kernel-install"]) == 1
        assert "bzImage" in capsys.readouterr().err

    @pytest.mark.parametrize("new", ["6.15", "6.15.4.1", "6.x.4", "6.-1.4"])
    @patch("kernel_updater.main.run_pipeline")
    def test_invalid_version(self, mock_pipeline: Mock, new: str, capsys: pytest.CaptureFixture[str]) -> None:
        """Test malformed versions fail before any stage runs."""
        assert main(["-n", new, "kernel-compile"]) == 1
        mock_pipeline.assert_not_called()
        assert "Invalid version" in capsys.readouterr().err

    @patch("kernel_updater.main.run_pipeline")
    def test_missing_old(self, mock_pipeline: Mock, capsys: pytest.CaptureFixture[str]) -> None:
        """Test full mode without --old fails validation."""
        assert main(["-n", "6.15.4"]) == 1
        mock_pipeline.assert_not_called()
        assert "--old argument is required for mode 'full'" in capsys.readouterr().err

    @patch("kernel_updater.main.run_pipeline")
    def test_version_order(self, mock_pipeline: Mock, capsys: pytest.CaptureFixture[str]) -> None:
        """Test a new version not above the old one fails validation."""
        assert main(["-o", "6.15.4", "-n", "6.15.4", "dkms-install"]) == 1
        mock_pipeline.assert_not_called()
        assert "strictly greater" in capsys.readouterr().err

    @patch("kernel_updater.main.run_pipeline")
    def test_bad_suffix(self, mock_pipeline: Mock, capsys: pytest.CaptureFixture[str]) -> None:
        """Test an invalid suffix is reported as a configuration error."""
        assert main(["-n", "6.15.4", "-s", "bad/suffix", "kernel-compile"]) == 1
        mock_pipeline.assert_not_called()
        assert "Configuration validation failed" in capsys.readouterr().err


class TestConsoleEntry:
    """Test the module entry point in a fresh interpreter."""

    @pytest.mark.parametrize(
        ("argv", "message"),
        [
            (["-o", "6.15.4", "-n", "6.15.3"], "strictly greater"),
            (["-n", "6.15", "kernel-compile"], "Invalid version format"),
            (["-n", "6.15.4", "--config", "/nonexistent/settings.json", "-o", "6.15.4", "dkms-install"], "strictly greater"),
        ],
    )
    def test_errors_exit_one(self, argv: list[str], message: str) -> None:
        """Test the command line reaches our parser and failures exit 1."""
        result = subprocess.run(  # noqa: S603
            [sys.executable, "-m", "kernel_updater", *argv],
            cwd=Path(__file__).resolve().parents[1],
            capture_output=True,
            text=True,
            check=False,
        )

        assert result.returncode == 1, result.stderr
        assert message in result.stderr
        assert "unrecognized arguments" not in result.stderr

    def test_help(self) -> None:
        """Test --help shows this tool's usage, not archinstall's."""
        result = subprocess.run(  # noqa: S603
            [sys.executable, "-m", "kernel_updater", "--help"],
            cwd=Path(__file__).resolve().parents[1],
            capture_output=True,
            text=True,
            check=False,
        )

        assert result.returncode == 0
        assert "kernel-updater" in result.stdout
        assert "dkms-install" in result.stdout
