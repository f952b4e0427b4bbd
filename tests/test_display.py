import logging
import pytest
from io import StringIO
from unittest.mock import MagicMock, patch

from rich.console import Console
from rich.panel import Panel

from starter_kit_cli.display import Display
from starter_kit_cli.schemas import CheckReport, Severity


@pytest.fixture
def console_output():
    return StringIO()


@pytest.fixture
def display(console_output):
    console = Console(file=console_output, width=120, color_system=None)
    return Display(console=console)


@patch('starter_kit_cli.display.Console')
def test_display_creates_console(MockConsole):
    display = Display()

    MockConsole.assert_called_once()
    assert display.verbose is False


@patch('starter_kit_cli.display.Console')
def test_verbose_sets_debug_level(MockConsole):
    Display(verbose=True)
    assert logging.getLogger().level == logging.DEBUG

    Display(verbose=False)
    assert logging.getLogger().level == logging.INFO


@patch('starter_kit_cli.display.Console')
def test_handlers_are_not_duplicated(MockConsole):
    Display()
    Display()

    assert len(logging.getLogger().handlers) == 1


def test_success(display, console_output):
    display.success("Installation Complete")

    assert "Success: Installation Complete" in console_output.getvalue()


def test_error_with_suggestion(display, console_output):
    display.error("Docker is not installed", "Please install Docker first")

    output = console_output.getvalue()
    assert "Error: Docker is not installed" in output
    assert "Suggestion: Please install Docker first" in output


def test_error_without_suggestion(display, console_output):
    display.error("Something failed")

    assert "Suggestion" not in console_output.getvalue()


@patch('starter_kit_cli.display.Console')
def test_panel(MockConsole):
    display = Display()

    display.panel("n8n is now accessible", "Access", border_style="green")

    printed = MockConsole.return_value.print.call_args[0][0]
    assert isinstance(printed, Panel)
    assert printed.border_style == "green"


def test_check_report(display, console_output):
    report = CheckReport()
    report.add(Severity.INFO, "Architecture: x86_64")
    report.add(Severity.PASS, "Docker daemon is running")
    report.add(Severity.FAIL, "Git is not available", suggestion="Install Git")
    report.add(Severity.WARNING, "Memory: 2GB (Below recommended 4GB)")
    report.add(Severity.PASS, "Ran check", suggestion="never shown")

    display.check_report(report)

    output = console_output.getvalue()
    assert "✓ Docker daemon is running" in output
    assert "✗ Git is not available" in output
    assert "⚠ Memory: 2GB" in output
    assert "ℹ Architecture: x86_64" in output
    assert "Suggestion: Install Git" in output
    assert "never shown" not in output
    assert "2 passed, 1 failed, 1 warnings" in output


def test_table(display, console_output):
    display.table("Required Tools", ["Tool", "Minimum"], [["docker", "20.10.0"], ["git", "2.0.0"]])

    output = console_output.getvalue()
    assert "Required Tools" in output
    assert "docker" in output
    assert "20.10.0" in output


def test_log_message_is_printed_verbatim(display, console_output):
    display.log_message("n8n  | [bold]not markup[/bold]")

    assert "n8n  | [bold]not markup[/bold]" in console_output.getvalue()


def test_banner(display, console_output):
    display.banner("Pre-installation Check")

    assert "Pre-installation Check" in console_output.getvalue()


@patch('starter_kit_cli.display.Console')
def test_status(MockConsole):
    display = Display()

    display.status("Waiting for services...")

    MockConsole.return_value.status.assert_called_once_with("Waiting for services...")
