"""Tests for CLI commands - swap and find."""

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path
from unittest.mock import patch

import pytest
from click.testing import CliRunner

from fileswap.cli import cli
from fileswap.cli.swap import resolve_config
from fileswap.core.types import ConfigError


@pytest.fixture
def runner() -> CliRunner:
    """Create a CLI test runner."""
    return CliRunner()


@pytest.fixture(autouse=True)
def config_file(tmp_path: Path) -> Iterator[Path]:
    """Point the default config file into tmp_path (not created)."""
    path = tmp_path / "configs" / "config.yml"
    with patch("fileswap.cli.swap.get_config_file", return_value=path), patch(
        "fileswap.cli.config.get_config_file", return_value=path
    ):
        yield path


@pytest.fixture
def log_dir(tmp_path: Path) -> Path:
    """Directory with three candidate files."""
    directory = tmp_path / "logs"
    directory.mkdir()
    (directory / "1.log").write_bytes(b"first file\r\n")
    (directory / "5.log").write_bytes(b"middle\r\n")
    (directory / "9.log").write_bytes(b"last file, longer than the first\r\n")
    return directory


class TestSwapCommand:
    """Tests for 'fileswap swap' command."""

    def test_swap_with_dir(self, runner: CliRunner, log_dir: Path) -> None:
        """Swap should exchange the min and max files."""
        result = runner.invoke(cli, ["swap", "--dir", str(log_dir)])

        assert result.exit_code == 0, result.output
        assert "File with min value: [1.log], File with max value: [9.log]." in result.output
        assert "The files were successfully swapped." in result.output
        assert "Exec time:" in result.output
        assert (log_dir / "1.log").read_bytes() == b"last file, longer than the first\r\n"
        assert (log_dir / "9.log").read_bytes() == b"first file\r\n"
        assert (log_dir / "5.log").read_bytes() == b"middle\r\n"

    def test_swap_block_sizes(self, runner: CliRunner, log_dir: Path) -> None:
        """Swap should accept explicit block sizes."""
        result = runner.invoke(cli, ["swap", "--dir", str(log_dir), "--rbs", "3", "--wbs", "1"])

        assert result.exit_code == 0, result.output
        assert (log_dir / "9.log").read_bytes() == b"first file\r\n"

    def test_swap_verify(self, runner: CliRunner, log_dir: Path) -> None:
        """Swap should report verified content."""
        result = runner.invoke(cli, ["swap", "--dir", str(log_dir), "--verify"])

        assert result.exit_code == 0, result.output
        assert "Content verified." in result.output

    def test_swap_negative_names(self, runner: CliRunner, log_dir: Path) -> None:
        """Swap should include negative names with --neg."""
        (log_dir / "-3.log").write_bytes(b"negative\r\n")

        result = runner.invoke(cli, ["swap", "--dir", str(log_dir), "--neg"])

        assert result.exit_code == 0, result.output
        assert "[-3.log]" in result.output
        assert (log_dir / "-3.log").read_bytes() == b"last file, longer than the first\r\n"

    def test_swap_from_config_file(
        self, runner: CliRunner, log_dir: Path, config_file: Path
    ) -> None:
        """Swap should read the directory and block sizes from the config file."""
        config_file.parent.mkdir(parents=True)
        config_file.write_text(
            f"path_to_files: {log_dir}/\nread_block_size: 4\nwrite_block_size: 2\n"
        )

        result = runner.invoke(cli, ["swap"])

        assert result.exit_code == 0, result.output
        assert (log_dir / "9.log").read_bytes() == b"first file\r\n"

    def test_swap_explicit_config_path(
        self, runner: CliRunner, log_dir: Path, tmp_path: Path
    ) -> None:
        """Swap should use --config-path when given."""
        custom = tmp_path / "custom.yml"
        custom.write_text(f"path_to_files: {log_dir}/\n")

        result = runner.invoke(cli, ["swap", "--config-path", str(custom)])

        assert result.exit_code == 0, result.output
        assert "[9.log]" in result.output

    def test_swap_without_config(self, runner: CliRunner) -> None:
        """Swap should fail when neither --dir nor a config file is available."""
        result = runner.invoke(cli, ["swap"])

        assert result.exit_code == 1
        assert "Config file not found" in result.output

    def test_swap_no_files(self, runner: CliRunner, tmp_path: Path) -> None:
        """Swap should fail when no file matches."""
        empty = tmp_path / "empty"
        empty.mkdir()

        result = runner.invoke(cli, ["swap", "--dir", str(empty)])

        assert result.exit_code == 1
        assert "Error:" in result.output
        assert "no files" in result.output

    def test_swap_single_file(self, runner: CliRunner, tmp_path: Path) -> None:
        """Swap should fail when only one file matches."""
        directory = tmp_path / "one"
        directory.mkdir()
        (directory / "1.log").write_bytes(b"x")

        result = runner.invoke(cli, ["swap", "--dir", str(directory)])

        assert result.exit_code == 1
        assert "not enough files" in result.output

    def test_swap_rejects_zero_block_size(self, runner: CliRunner, log_dir: Path) -> None:
        """Swap should reject block sizes below 1 as usage errors."""
        result = runner.invoke(cli, ["swap", "--dir", str(log_dir), "--rbs", "0"])

        assert result.exit_code == 2
        assert (log_dir / "1.log").read_bytes() == b"first file\r\n"

    def test_swap_log_file(self, runner: CliRunner, log_dir: Path, tmp_path: Path) -> None:
        """Swap should write logs to --log-file."""
        log_file = tmp_path / "swap.log"

        result = runner.invoke(cli, ["swap", "--dir", str(log_dir), "-v", "--log-file", str(log_file)])

        assert result.exit_code == 0, result.output
        assert "Swapped 1.log" in log_file.read_text()

    def test_swap_tilde_dir(self, runner: CliRunner, log_dir: Path, tmp_path: Path) -> None:
        """Swap should expand a quoted ~ in --dir."""
        result = runner.invoke(cli, ["swap", "--dir", "~/logs"], env={"HOME": str(tmp_path)})

        assert result.exit_code == 0, result.output
        assert (log_dir / "9.log").read_bytes() == b"first file\r\n"

    def test_swap_original_style_config(self, runner: CliRunner, log_dir: Path, tmp_path: Path) -> None:
        """Swap should load a YAML config with a trailing-slash directory."""
        custom = tmp_path / "configs" / "config.yml"
        custom.parent.mkdir(parents=True, exist_ok=True)
        custom.write_text(f"path_to_files: {log_dir}/\n")

        result = runner.invoke(cli, ["swap", "--config-path", str(custom), "--rbs", "2", "--wbs", "2"])

        assert result.exit_code == 0, result.output
        assert "File with min value: [1.log], File with max value: [9.log]." in result.output

    def test_swap_unbuffered_notice(self, runner: CliRunner, log_dir: Path, tmp_path: Path) -> None:
        """Swap should log that write block size 1 writes byte by byte."""
        log_file = tmp_path / "swap.log"

        result = runner.invoke(
            cli, ["swap", "--dir", str(log_dir), "--wbs", "1", "-v", "--log-file", str(log_file)]
        )

        assert result.exit_code == 0, result.output
        assert "writing byte by byte" in log_file.read_text()


class TestFindCommand:
    """Tests for 'fileswap find' command."""

    def test_find(self, runner: CliRunner, log_dir: Path) -> None:
        """Find should print the min and max names without swapping."""
        result = runner.invoke(cli, ["find", "--dir", str(log_dir)])

        assert result.exit_code == 0, result.output
        assert result.output.splitlines() == ["1.log", "9.log"]
        assert (log_dir / "1.log").read_bytes() == b"first file\r\n"

    def test_find_negative(self, runner: CliRunner, log_dir: Path) -> None:
        """Find should honor --neg."""
        (log_dir / "-3.log").write_bytes(b"")

        result = runner.invoke(cli, ["find", "--dir", str(log_dir), "--neg"])

        assert result.output.splitlines() == ["-3.log", "9.log"]

    def test_find_no_files(self, runner: CliRunner, tmp_path: Path) -> None:
        """Find should exit with 1 when nothing matches."""
        result = runner.invoke(cli, ["find", "--dir", str(tmp_path)])

        assert result.exit_code == 1


class TestResolveConfig:
    """Tests for resolve_config function."""

    def test_dir_without_config_file(self, tmp_path: Path) -> None:
        """Should build a config from --dir alone."""
        config = resolve_config(None, tmp_path, allow_negative=False)
        assert config.path_to_files == tmp_path
        assert config.read_block_size == 4096

    def test_overrides(self, tmp_path: Path, config_file: Path) -> None:
        """Should let command-line values override the config file."""
        config_file.parent.mkdir(parents=True)
        config_file.write_text("path_to_files: /elsewhere\nread_block_size: 8\nwrite_block_size: 8\n")

        config = resolve_config(None, tmp_path, True, read_block_size=64)

        assert config.path_to_files == tmp_path
        assert config.allow_negative_names is True
        assert config.read_block_size == 64
        assert config.write_block_size == 8

    def test_missing_explicit_config(self, tmp_path: Path) -> None:
        """Should fail when an explicit config path does not exist."""
        with pytest.raises(ConfigError):
            resolve_config(tmp_path / "missing.yml", tmp_path, False)

    def test_dir_override_expands_user(self, tmp_path: Path, config_file: Path) -> None:
        """Should expand ~ in a --dir that overrides the config file."""
        config_file.parent.mkdir(parents=True)
        config_file.write_text("path_to_files: /elsewhere/\n")

        config = resolve_config(None, Path("~/logs"), False)

        assert config.path_to_files == Path.home() / "logs"

    def test_dir_alone_expands_user(self) -> None:
        """Should expand ~ in --dir without a config file."""
        config = resolve_config(None, Path("~/logs"), False)
        assert config.path_to_files == Path.home() / "logs"

    def test_overrides_are_validated(self, tmp_path: Path, config_file: Path) -> None:
        """Should reject invalid override values like config file values."""
        config_file.parent.mkdir(parents=True)
        config_file.write_text(f"path_to_files: {tmp_path}\n")

        with pytest.raises(ConfigError, match="write_block_size"):
            resolve_config(None, None, False, write_block_size=0)

    def test_config_file_left_unchanged(self, tmp_path: Path, config_file: Path) -> None:
        """Should not write overrides back into the config file."""
        config_file.parent.mkdir(parents=True)
        config_file.write_text("path_to_files: /elsewhere/\n")

        resolve_config(None, tmp_path, True, read_block_size=64)

        assert config_file.read_text() == "path_to_files: /elsewhere/\n"


class TestVersion:
    """Tests for the version option."""

    def test_version(self, runner: CliRunner) -> None:
        """Should print the package version."""
        result = runner.invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert "0.1.0" in result.output
