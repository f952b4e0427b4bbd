import logging
import socket
from typing import Callable, Optional

from .docker_client import DockerClient
from .errors import ERRORS_BY_KIND, InstallerError
from .schemas import (
    AppConfig,
    CheckReport,
    ErrorKind,
    HostProfile,
    OperatingSystem,
    Severity,
    ToolRequirement,
)
from .shell import CommandResult, run_command, which
from .versions import parse_version

log = logging.getLogger(__name__)

DOCKER_INSTALL_URL = "https://docs.docker.com/get-docker/"
COMPOSE_INSTALL_URL = "https://docs.docker.com/compose/install/"
GIT_INSTALL_URL = "https://git-scm.com/downloads"

NETWORK_TARGETS = {
    "GitHub": ("github.com", 443),
    "Docker Hub": ("registry-1.docker.io", 443),
}


def tcp_reachable(host: str, port: int, timeout: float = 3.0) -> bool:
    try:
        with socket.create_connection((host, port), timeout=timeout):
            return True
    except OSError:
        return False


def extract_version(output: str) -> Optional[str]:
    """Returns the dotted numeric version found in a tool's version output."""
    parsed = parse_version(output)
    if parsed is None:
        return None
    return ".".join(str(part) for part in parsed)


class PrerequisiteChecker:
    """
    Verifies the external tools the installer drives and reports host advisories.

    Only reports; never installs anything.
    """

    def __init__(
        self,
        config: Optional[AppConfig] = None,
        which: Callable[[str], Optional[str]] = which,
        run: Callable[..., CommandResult] = run_command,
        docker_client_factory: Callable[[], DockerClient] = DockerClient,
        connect: Callable[[str, int], bool] = tcp_reachable,
    ):
        self.config = config or AppConfig()
        self._connect = connect
        self._which = which
        self._run = run
        self._docker_client_factory = docker_client_factory

    def check(self, profile: HostProfile) -> CheckReport:
        report = CheckReport()
        self._check_resources(profile, report)
        self._check_docker(report)
        self._check_git(report)

        log.debug(f"Prerequisite check: {report.passed} passed, {report.failed} failed, {report.warnings} warnings")
        return report

    # =============================================================================
    # Host resources
    # =============================================================================

    def _check_resources(self, profile: HostProfile, report: CheckReport):
        report.add(Severity.PASS, f"Running on {profile.operating_system.value}")
        if profile.operating_system == OperatingSystem.WINDOWS:
            if profile.in_wsl:
                report.add(Severity.PASS, "Running in WSL")
            else:
                report.add(
                    Severity.WARNING,
                    "Running on Windows. WSL2 is recommended for better performance.",
                    suggestion="Consider using WSL2 for better Docker performance",
                )

        memory = profile.total_memory_gib
        if memory >= 2 * self.config.min_memory_gib:
            report.add(Severity.PASS, f"Memory: {memory}GB (Excellent)")
        elif memory >= self.config.min_memory_gib:
            report.add(Severity.PASS, f"Memory: {memory}GB (Good)")
        else:
            report.add(Severity.WARNING, f"Memory: {memory}GB (Below recommended {self.config.min_memory_gib}GB)")

        disk = profile.available_disk_gib
        if disk >= 2 * self.config.min_disk_gib:
            report.add(Severity.PASS, f"Disk Space: {disk}GB (Excellent)")
        elif disk >= self.config.min_disk_gib:
            report.add(Severity.PASS, f"Disk Space: {disk}GB (Good)")
        else:
            report.add(
                Severity.WARNING,
                f"Disk Space: {disk}GB (Below recommended {self.config.min_disk_gib}GB)",
                suggestion="Consider freeing up space.",
            )

        if profile.nvidia_runtime is False:
            report.add(
                Severity.WARNING,
                "NVIDIA Container Runtime not detected. GPU acceleration may not work.",
                suggestion="Install nvidia-container-toolkit and restart the Docker daemon",
            )

    # =============================================================================
    # Tools
    # =============================================================================

    def _detect_version(self, args: list[str]) -> Optional[str]:
        result = self._run(args)
        if not result.ok:
            return None
        return extract_version(result.output)

    def _record(self, report: CheckReport, requirement: ToolRequirement, label: str, install_url: str):
        report.requirements.append(requirement)
        if requirement.detected_version is None:
            report.add(
                Severity.FAIL,
                f"{label} is not available",
                suggestion=f"Install {label}: {install_url}",
                error=ErrorKind.TOOL_MISSING,
            )
        elif requirement.satisfied:
            report.add(Severity.PASS, f"{label} version {requirement.detected_version} is compatible")
        else:
            report.add(
                Severity.FAIL,
                f"{label} version {requirement.detected_version} is too old (minimum: {requirement.min_version})",
                suggestion=f"Upgrade {label} to {requirement.min_version} or newer: {install_url}",
                error=ErrorKind.TOOL_VERSION_TOO_OLD,
            )

    def _check_docker(self, report: CheckReport):
        docker = ToolRequirement(name="docker", min_version=self.config.min_docker_version)
        if not self._which("docker"):
            report.requirements.append(docker)
            report.add(
                Severity.FAIL,
                "Docker is not installed",
                suggestion=f"Please install Docker first: {DOCKER_INSTALL_URL}",
                error=ErrorKind.TOOL_MISSING,
            )
            return

        docker.detected_version = self._detect_version(["docker", "--version"])
        self._record(report, docker, "Docker", DOCKER_INSTALL_URL)

        if self._docker_client_factory().is_daemon_running():
            report.add(Severity.PASS, "Docker daemon is running")
        else:
            report.add(
                Severity.FAIL,
                "Docker daemon is not running",
                suggestion="Please start Docker Desktop (or your Docker service) and try again.",
                error=ErrorKind.DAEMON_NOT_RUNNING,
            )

        compose = ToolRequirement(name="docker compose", min_version=self.config.min_compose_version)
        compose.detected_version = self._detect_version(["docker", "compose", "version", "--short"])
        self._record(report, compose, "Docker Compose", COMPOSE_INSTALL_URL)

    def _check_git(self, report: CheckReport):
        git = ToolRequirement(name="git", min_version=self.config.min_git_version)
        if self._which("git"):
            git.detected_version = self._detect_version(["git", "--version"])
        self._record(report, git, "Git", GIT_INSTALL_URL)

    # =============================================================================
    # Standalone pre-installation check
    # =============================================================================

    def precheck(self, profile: HostProfile) -> CheckReport:
        """
        The installer checks plus host details and network reachability,
        for running before an installation is attempted.
        """
        report = CheckReport()
        if profile.distribution:
            report.add(Severity.INFO, f"Distribution: {profile.distribution}")
        if profile.os_version:
            report.add(Severity.INFO, f"Version: {profile.os_version}")
        report.add(Severity.INFO, f"Architecture: {profile.architecture}")
        report.add(Severity.INFO, f"GPU: {profile.gpu_type.value}")

        checks = self.check(profile)
        report.details.extend(checks.details)
        report.requirements.extend(checks.requirements)

        root_dir = self._docker_client_factory().root_dir()
        if root_dir:
            report.add(Severity.INFO, f"Docker Root Dir: {root_dir}")

        self._check_network(report)
        return report

    def _check_network(self, report: CheckReport):
        for name, (host, port) in NETWORK_TARGETS.items():
            if self._connect(host, port):
                report.add(Severity.PASS, f"Can reach {name} ({host})")
            else:
                report.add(
                    Severity.WARNING,
                    f"Cannot reach {name} ({host})",
                    suggestion="Check your internet connection or proxy settings",
                )


def raise_for_report(report: CheckReport):
    """Raises the error matching the first failed check, if any."""
    failure = report.first_failure()
    if failure is None:
        return
    error_class = ERRORS_BY_KIND.get(failure.error, InstallerError)
    raise error_class(failure.message, suggestion=failure.suggestion)
