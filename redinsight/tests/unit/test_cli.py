"""Tests for the CLI module."""

from typer.testing import CliRunner

from redinsight import __version__
from redinsight.cli import app

runner = CliRunner()


class TestCli:
    """Test cases for the CLI interface."""

    def test_version(self):
        result = runner.invoke(app, ["version"])
        assert result.exit_code == 0
        assert f"RedInsight {__version__}" in result.stdout

    def test_serve_runs_uvicorn(self, mocker):
        run = mocker.patch("redinsight.cli.uvicorn.run")
        mocker.patch("redinsight.cli.setup_logging")

        result = runner.invoke(app, ["serve"])

        assert result.exit_code == 0
        run.assert_called_once()
        args, kwargs = run.call_args
        assert args[0] == "redinsight.api.main:app"
        assert kwargs["port"] == 3000
