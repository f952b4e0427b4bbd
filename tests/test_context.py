from unittest.mock import patch, MagicMock
import pytest

from starter_kit_cli.context import AppContext


@patch('starter_kit_cli.context.Display')
@patch('starter_kit_cli.context.Config')
def test_app_context_initialization_with_verbose_true(MockConfig, MockDisplay):
    """
    Tests that AppContext correctly initializes its components with verbose=True.
    """
    mock_config_instance = MagicMock()
    MockConfig.return_value = mock_config_instance
    mock_display_instance = MagicMock()
    mock_display_instance.verbose = True
    MockDisplay.return_value = mock_display_instance

    ctx = AppContext(verbose=True)

    MockConfig.assert_called_once()
    MockDisplay.assert_called_once_with(verbose=True)
    assert ctx.config == mock_config_instance
    assert ctx.display == mock_display_instance
    assert ctx.verbose is True
    assert ctx.app_config is mock_config_instance.app_config


@patch('starter_kit_cli.context.Display')
@patch('starter_kit_cli.context.Config')
def test_app_context_initialization_with_verbose_false(MockConfig, MockDisplay):
    MockDisplay.return_value.verbose = False

    ctx = AppContext()

    MockDisplay.assert_called_once_with(verbose=False)
    assert ctx.verbose is False


@patch('starter_kit_cli.context.Display')
@patch('starter_kit_cli.context.Config', side_effect=PermissionError("Permission denied"))
def test_app_context_initialization_failure_exits(MockConfig, MockDisplay):
    """Any error while building the context ends the process with exit code 1."""
    with pytest.raises(SystemExit) as exc_info:
        AppContext()

    assert exc_info.value.code == 1
