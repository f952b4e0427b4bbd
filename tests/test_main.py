from typer.testing import CliRunner
from unittest.mock import MagicMock, patch

from starter_kit_cli.main import app
from starter_kit_cli.schemas import InstallState

runner = CliRunner()

EXPECTED_COMMANDS = ["install", "update", "check", "status", "stop", "logs"]


class TestTyperAppConfiguration:
    """Test the Typer app configuration and setup."""

    def test_app_has_correct_help_text(self):
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        assert "Installs and manages the n8n self-hosted AI starter kit." in result.stdout

    def test_short_help_flag(self):
        result = runner.invoke(app, ["-h"])
        assert result.exit_code == 0
        assert "Installs and manages" in result.stdout

    def test_app_completion_disabled(self):
        result = runner.invoke(app, ["--help"])
        assert "--install-completion" not in result.stdout
        assert "--show-completion" not in result.stdout

    def test_all_commands_are_registered(self):
        result = runner.invoke(app, ["--help"])
        for command in EXPECTED_COMMANDS:
            assert command in result.stdout

    def test_install_help_lists_options(self):
        result = runner.invoke(app, ["install", "--help"])
        assert result.exit_code == 0
        for option in ["--gpu-nvidia", "--gpu-amd", "--cpu", "--update", "--directory", "--yes"]:
            assert option in result.stdout

    def test_unknown_option_is_usage_error(self):
        result = runner.invoke(app, ["install", "--gpu-intel"])
        assert result.exit_code == 2


class TestMainCallback:
    """Test the main callback function behavior."""

    @patch('starter_kit_cli.commands.install.InstallationDriver')
    @patch('starter_kit_cli.main.AppContext')
    def test_verbose_flag_true(self, MockAppContext, MockDriver):
        MockAppContext.return_value = MagicMock()
        MockDriver.return_value.run.return_value = InstallState.DONE

        result = runner.invoke(app, ["--verbose", "install"])

        MockAppContext.assert_called_once_with(verbose=True)
        assert result.exit_code == 0

    @patch('starter_kit_cli.commands.install.InstallationDriver')
    @patch('starter_kit_cli.main.AppContext')
    def test_verbose_flag_false_by_default(self, MockAppContext, MockDriver):
        MockAppContext.return_value = MagicMock()
        MockDriver.return_value.run.return_value = InstallState.DONE

        result = runner.invoke(app, ["install"])

        MockAppContext.assert_called_once_with(verbose=False)
        assert result.exit_code == 0

    @patch('starter_kit_cli.commands.install.InstallationDriver')
    @patch('starter_kit_cli.main.AppContext')
    def test_context_object_is_passed_to_command(self, MockAppContext, MockDriver):
        mock_context = MagicMock()
        MockAppContext.return_value = mock_context
        MockDriver.return_value.run.return_value = InstallState.DONE

        runner.invoke(app, ["-v", "install"])

        assert MockDriver.call_args[0] == (mock_context.app_config, mock_context.display)
