import pytest
from unittest.mock import MagicMock

from starter_kit_cli.schemas import AppConfig, GpuType, HostProfile, OperatingSystem
from starter_kit_cli.shell import CommandResult


class FakeRunner:
    """
    Stands in for shell.run_command.

    Responses are keyed by the leading arguments of a command; the longest
    matching prefix wins. Unknown commands behave like a missing executable.
    """

    def __init__(self, responses=None):
        self.responses = {tuple(k): v for k, v in (responses or {}).items()}
        self.calls = []

    def __call__(self, args, cwd=None, on_line=None):
        self.calls.append((list(args), cwd))
        for size in range(len(args), 0, -1):
            response = self.responses.get(tuple(args[:size]))
            if response is not None:
                returncode, output = response
                if on_line:
                    for line in output.splitlines():
                        on_line(line)
                return CommandResult(args=list(args), returncode=returncode, output=output)
        return CommandResult(args=list(args), returncode=127, output=f"{args[0]}: command not found")

    @property
    def commands(self):
        return [args for args, _ in self.calls]


@pytest.fixture
def fake_runner():
    return FakeRunner()


@pytest.fixture
def make_profile():
    """Factory for HostProfile objects with sensible defaults."""
    def _make(**overrides):
        values = dict(
            operating_system=OperatingSystem.LINUX,
            architecture="x86_64",
            total_memory_gib=16,
            available_disk_gib=100,
            gpu_type=GpuType.NONE,
        )
        values.update(overrides)
        return HostProfile(**values)
    return _make


@pytest.fixture
def app_config():
    return AppConfig()


@pytest.fixture
def mock_display():
    """Fixture for a mocked Display object."""
    return MagicMock()


@pytest.fixture
def mock_app_context(app_config):
    """Fixture to mock the AppContext and its components."""
    mock_context = MagicMock()
    mock_context.display = MagicMock()
    mock_context.config = MagicMock()
    mock_context.config.fell_back_to_defaults = False
    mock_context.app_config = app_config
    return mock_context
