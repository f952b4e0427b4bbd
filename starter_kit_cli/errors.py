"""Exceptions raised by the installer components."""

from typing import Optional

from .schemas import ErrorKind


class InstallerError(Exception):
    """Base exception for fatal installer errors."""

    kind: ErrorKind = ErrorKind.EXTERNAL_COMMAND_FAILED

    def __init__(self, message: str, suggestion: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message
        self.suggestion = suggestion


class UnsupportedPlatform(InstallerError):
    """Raised when the host operating system cannot be classified."""

    kind = ErrorKind.UNSUPPORTED_PLATFORM

    def __init__(self, system: str) -> None:
        super().__init__(
            f"Unsupported operating system: {system or 'unknown'}",
            suggestion="Run the installer on Linux, macOS or Windows (WSL2 recommended).",
        )
        self.system = system


class ToolMissing(InstallerError):
    """A required executable is not on PATH."""

    kind = ErrorKind.TOOL_MISSING


class ToolVersionTooOld(InstallerError):
    """A required executable is older than the supported minimum."""

    kind = ErrorKind.TOOL_VERSION_TOO_OLD


class DaemonNotRunning(InstallerError):
    """The Docker daemon does not answer."""

    kind = ErrorKind.DAEMON_NOT_RUNNING


class ConfigWriteError(InstallerError):
    """Raised when the .env file cannot be read or written."""

    kind = ErrorKind.CONFIG_WRITE_ERROR

    def __init__(self, path: str, reason: str, action: str = "write") -> None:
        super().__init__(
            f"Could not {action} configuration file {path}: {reason}",
            suggestion="Check that the project directory exists and is writable.",
        )
        self.path = path


class ExternalCommandFailed(InstallerError):
    """Raised when an external command exits non-zero or cannot be started."""

    kind = ErrorKind.EXTERNAL_COMMAND_FAILED

    def __init__(self, command: str, returncode: Optional[int] = None, output: str = "", message: Optional[str] = None, suggestion: Optional[str] = None) -> None:
        if message is None:
            message = f"Command `{command}` failed"
            if returncode is not None:
                message += f" with exit code {returncode}"
        super().__init__(message, suggestion=suggestion)
        self.command = command
        self.returncode = returncode
        self.output = output


class ReadinessTimeout(InstallerError):
    """Raised when a required service does not become healthy in time."""

    kind = ErrorKind.READINESS_TIMEOUT

    def __init__(self, service: str, timeout_seconds: int, required: bool = True) -> None:
        super().__init__(
            f"Timeout waiting for {service} to start ({timeout_seconds}s)",
            suggestion="Inspect the service logs with `docker compose logs -f`.",
        )
        self.service = service
        self.timeout_seconds = timeout_seconds
        self.required = required


ERRORS_BY_KIND = {
    ErrorKind.TOOL_MISSING: ToolMissing,
    ErrorKind.TOOL_VERSION_TOO_OLD: ToolVersionTooOld,
    ErrorKind.DAEMON_NOT_RUNNING: DaemonNotRunning,
}
