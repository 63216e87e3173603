"""
Tests for the quickflow CLI.
"""

from click.testing import CliRunner

from quickflow import __version__
from quickflow.__main__ import cli
from quickflow.core.config import QuickflowConfig, get_config_path


class TestCliBasics:
    """Tests for CLI plumbing."""

    def test_version(self) -> None:
        """Test --version output."""
        result = CliRunner().invoke(cli, ["--version"])

        assert result.exit_code == 0
        assert __version__ in result.output

    def test_help_lists_commands(self) -> None:
        """Test that subcommands are registered."""
        result = CliRunner().invoke(cli, ["--help"])

        assert result.exit_code == 0
        assert "run" in result.output
        assert "confirmations" in result.output


class TestRunCommand:
    """Tests for `quickflow run`."""

    def test_create_branch(self, tmp_path) -> None:
        """Test a full create flow driven from stdin."""
        result = CliRunner().invoke(
            cli,
            ["run", "--command", "branch", "--subcommand", "create", "-p", str(tmp_path)],
            input="feature\n1\n",
        )

        assert result.exit_code == 0, result.output
        assert "Create Branch" in result.output
        assert "Done." in result.output

    def test_cancel(self, tmp_path) -> None:
        """Test cancelling from the first step."""
        result = CliRunner().invoke(
            cli,
            ["run", "--command", "branch", "-p", str(tmp_path)],
            input="q\n",
        )

        assert result.exit_code == 0
        assert "Cancelled." in result.output

    def test_end_of_input_cancels(self, tmp_path) -> None:
        """Test that running out of input closes the wizard."""
        result = CliRunner().invoke(cli, ["run", "-p", str(tmp_path)], input="")

        assert result.exit_code == 0
        assert "Cancelled." in result.output

    def test_unknown_command(self, tmp_path) -> None:
        """Test that unknown commands are reported as errors."""
        result = CliRunner().invoke(cli, ["run", "--command", "rebase", "-p", str(tmp_path)])

        assert result.exit_code == 1
        assert "Unknown subcommand: rebase" in result.output

    def test_invalid_config(self, tmp_path) -> None:
        """Test that a broken config file is reported."""
        path = get_config_path(tmp_path)
        path.parent.mkdir(parents=True)
        path.write_text("quickflow: [unclosed")

        result = CliRunner().invoke(cli, ["run", "-p", str(tmp_path)])

        assert result.exit_code == 1
        assert "Invalid configuration file" in result.output


class TestConfirmationsCommands:
    """Tests for `quickflow confirmations`."""

    def test_list_empty(self, tmp_path) -> None:
        """Test listing with nothing skipped."""
        result = CliRunner().invoke(cli, ["confirmations", "list", "-p", str(tmp_path)])

        assert result.exit_code == 0
        assert "No confirmations are skipped" in result.output

    def test_list_and_reset(self, tmp_path) -> None:
        """Test listing and then resetting skipped confirmations."""
        path = get_config_path(tmp_path)
        QuickflowConfig(skip_confirmations=["branch-create:menu", "branch-create:command"]).save(path)
        runner = CliRunner()

        listed = runner.invoke(cli, ["confirmations", "list", "-p", str(tmp_path)])
        assert listed.exit_code == 0
        assert "branch-create" in listed.output
        assert "command" in listed.output

        reset = runner.invoke(cli, ["confirmations", "reset", "-p", str(tmp_path)])
        assert reset.exit_code == 0
        assert "Re-enabled 2 confirmation(s)" in reset.output
        assert QuickflowConfig.from_file(path).skip_confirmations == []
