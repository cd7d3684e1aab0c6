"""Tests for the root group, --examples and serve."""

from __future__ import annotations

import json
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest
from click.testing import CliRunner

from periodctl import __version__
from periodctl.cli import cli


class TestRootGroup:
    def test_help_lists_commands(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["--help"])
        assert result.exit_code == 0
        for name in ("init", "detect", "next", "current", "suggest", "label", "period",
                     "integrity", "serve"):
            assert name in result.output

    def test_version(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["--version"])
        assert __version__ in result.output

    @pytest.mark.usefixtures("_isolated")
    def test_bare_invocation_prints_help(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, [])
        assert result.exit_code == 0
        assert "Usage" in result.output

    @pytest.mark.usefixtures("_isolated")
    def test_verbose_attaches_telemetry(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(
            cli, ["--json", "-v", "current", "--periodicity", "weekly", "--date", "2025-01-01"]
        )
        meta = json.loads(result.stdout)["meta"]
        assert meta["telemetry"]["name"] == "CalculationCoordinator.calculate_current_period"

    @pytest.mark.usefixtures("_isolated")
    def test_verbose_text_shows_spans(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["-v", "current", "--date", "2025-01-01"])
        assert "calculate_current_period" in result.stdout
        assert "ms" in result.stdout


@pytest.mark.usefixtures("_isolated")
class TestExamples:
    @pytest.mark.parametrize(
        "args",
        [
            ["detect"],
            ["next"],
            ["label"],
            ["period"],
            ["period", "create"],
            ["integrity"],
            ["init"],
            ["serve"],
        ],
    )
    def test_examples_flag(self, cli_runner: CliRunner, args: list[str]) -> None:
        result = cli_runner.invoke(cli, [*args, "--examples"])
        assert result.exit_code == 0
        assert result.output.startswith("Examples for 'cli ")
        assert "periodctl" in result.output


@pytest.mark.usefixtures("_isolated")
class TestServeCommand:
    def test_help_shows_transports(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["serve", "--help"])
        assert "stdio" in result.output
        assert "streamable-http" in result.output

    def test_without_mcp_extra(self, cli_runner: CliRunner) -> None:
        with patch("periodctl.mcp.server.mcp_available", False):
            result = cli_runner.invoke(cli, ["serve"])
        assert result.exit_code == 1
        assert "pip install periodctl[mcp]" in result.stderr

    def test_disabled_by_config(self, cli_runner: CliRunner) -> None:
        Path("periodctl.toml").write_text("[mcp]\nenabled = false\n", encoding="utf-8")
        with patch("periodctl.mcp.server.mcp_available", True):
            result = cli_runner.invoke(cli, ["serve"])
        assert result.exit_code == 1
        assert "disabled" in result.stderr

    def test_passes_transport_options(self, cli_runner: CliRunner) -> None:
        server = MagicMock()
        with (
            patch("periodctl.mcp.server.mcp_available", True),
            patch("periodctl.mcp.server.create_server", return_value=server) as create_server,
        ):
            result = cli_runner.invoke(
                cli, ["serve", "--transport", "sse", "--host", "0.0.0.0", "--port", "9000"]
            )
        assert result.exit_code == 0, result.output
        create_server.assert_called_once()
        assert create_server.call_args.kwargs == {"host": "0.0.0.0", "port": 9000}
        server.run.assert_called_once_with(transport="sse")

    def test_defaults_come_from_config(self, cli_runner: CliRunner) -> None:
        Path("periodctl.toml").write_text(
            '[mcp]\ntransport = "streamable-http"\nport = 8123\n', encoding="utf-8"
        )
        server = MagicMock()
        with (
            patch("periodctl.mcp.server.mcp_available", True),
            patch("periodctl.mcp.server.create_server", return_value=server) as create_server,
        ):
            cli_runner.invoke(cli, ["serve"])
        assert create_server.call_args.kwargs == {"host": "127.0.0.1", "port": 8123}
        server.run.assert_called_once_with(transport="streamable-http")
