"""
Installation driver for the n8n self-hosted AI starter kit.

The driver is a linear state machine:

    start -> requirements_checked -> repository_ready -> config_ready
          -> services_starting -> services_ready | degraded -> done

Any InstallerError raised by a component moves it straight to `failed`. The
driver never removes containers or volumes on failure; it only prints the
teardown command for the operator to run.
"""

import logging
from pathlib import Path
from typing import Callable, List, Optional, Union

from .compose import ComposeOrchestrator, select_profile
from .display import Display
from .env_file import EnvFileManager
from .environment_probe import EnvironmentProbe
from .errors import ConfigWriteError, InstallerError
from .prerequisites import PrerequisiteChecker, raise_for_report
from .readiness import ReadinessWaiter
from .repository import RepositoryManager
from .schemas import (
    AppConfig,
    ComposeAction,
    DeploymentProfile,
    GpuType,
    HostProfile,
    InstallState,
    WaitResult,
)

log = logging.getLogger(__name__)

TEARDOWN_COMMAND = "docker compose down --volumes"


class InstallationDriver:
    """Runs the installation steps in order and tracks the resulting state."""

    def __init__(
        self,
        config: AppConfig,
        display: Display,
        base_dir: Union[str, Path] = Path("."),
        confirm: Callable[[str], bool] = None,
        probe: Optional[EnvironmentProbe] = None,
        checker: Optional[PrerequisiteChecker] = None,
        repository: Optional[RepositoryManager] = None,
        env_manager: Optional[EnvFileManager] = None,
        orchestrator: Optional[ComposeOrchestrator] = None,
        waiter: Optional[ReadinessWaiter] = None,
    ):
        self.config = config
        self.display = display
        self.base_dir = Path(base_dir)
        self.confirm = confirm or (lambda message: False)
        self.probe = probe or EnvironmentProbe(
            min_memory_gib=config.min_memory_gib,
            min_disk_gib=config.min_disk_gib,
            disk_path=self.base_dir,
        )
        self.checker = checker or PrerequisiteChecker(config)
        self.repository = repository or RepositoryManager(config, self.base_dir)
        self.env_manager = env_manager or EnvFileManager()
        self.orchestrator = orchestrator or ComposeOrchestrator(self.repository.checkout_dir)
        self.waiter = waiter or ReadinessWaiter()

        self.state = InstallState.START
        self.history: List[InstallState] = [InstallState.START]
        self.host_profile: Optional[HostProfile] = None
        self.deployment_profile: Optional[DeploymentProfile] = None
        self.error: Optional[InstallerError] = None

    def _transition(self, state: InstallState):
        log.debug(f"Installer state: {self.state.value} -> {state.value}")
        self.state = state
        self.history.append(state)

    # =============================================================================
    # Full installation
    # =============================================================================

    def run(self, gpu_override: Optional[GpuType] = None) -> InstallState:
        """Runs the full installation; returns the terminal state (done or failed)."""
        try:
            profile = self._check_requirements(gpu_override)
            checkout = self._prepare_repository()
            self._configure(checkout, profile.gpu_type)
            self._start_services(profile.gpu_type)
            self._wait_for_services()
            self._post_install(checkout)
        except InstallerError as e:
            self._fail(e)
        return self.state

    def _check_requirements(self, gpu_override: Optional[GpuType]) -> HostProfile:
        log.info("Checking system requirements...")
        profile = self.probe.probe()
        if gpu_override is not None:
            log.info(f"GPU type forced to {gpu_override.value}")
            profile = profile.model_copy(update={"gpu_type": gpu_override})
        self.host_profile = profile

        report = self.checker.check(profile)
        self.display.check_report(report)
        raise_for_report(report)
        self._transition(InstallState.REQUIREMENTS_CHECKED)
        return profile

    def _prepare_repository(self) -> Path:
        checkout = self.repository.ensure_checkout(self.confirm)
        self._transition(InstallState.REPOSITORY_READY)
        return checkout

    def _configure(self, checkout: Path, gpu_type: GpuType):
        log.info("Configuring environment...")
        self.env_manager.ensure(checkout / self.config.env_file, gpu_type)
        self._transition(InstallState.CONFIG_READY)

    def _start_services(self, gpu_type: GpuType):
        log.info("Starting services...")
        self.deployment_profile = select_profile(gpu_type)
        log.info(f"Using profile: {self.deployment_profile.value}")
        self._transition(InstallState.SERVICES_STARTING)
        self.orchestrator.apply(self.deployment_profile, ComposeAction.PULL)
        self.orchestrator.apply(self.deployment_profile, ComposeAction.UP)

    def _wait_for_services(self):
        log.info("Waiting for services to start...")
        with self.display.status("Waiting for services...") as spinner:
            results = self.waiter.wait_all(
                self.config.endpoints,
                on_poll=lambda endpoint, elapsed: spinner.update(
                    f"Waiting for {endpoint.name}... ({elapsed}s/{endpoint.timeout_seconds}s)"
                ),
            )
        if all(result == WaitResult.READY for result in results.values()):
            self._transition(InstallState.SERVICES_READY)
        else:
            self._transition(InstallState.DEGRADED)

    def _post_install(self, checkout: Path):
        log.info("Running post-installation setup...")
        shared = checkout / self.config.shared_dir
        try:
            shared.mkdir(parents=True, exist_ok=True)
            shared.chmod(0o755)
        except OSError as e:
            raise ConfigWriteError(str(shared), e.strerror or str(e)) from e
        log.info("Created shared directory for file operations")

        self.display.success("Installation Complete")
        self.display.print("\n[bold]Services Status:[/bold]")
        try:
            self.display.log_message(self.orchestrator.ps())
        except InstallerError as e:
            log.warning(f"Could not show service status: {e.message}")

        self.display.panel(
            "n8n is now accessible at: http://localhost:5678\n"
            "Qdrant dashboard at: http://localhost:6333/dashboard",
            "Access",
            border_style="green",
        )
        self.display.panel(
            "1. Open http://localhost:5678 in your browser\n"
            "2. Complete the n8n setup wizard (first time only)\n"
            "3. Import workflows and start building your AI workflows!",
            "Next Steps",
            border_style="green",
        )
        self.display.panel(
            "Stop services: starter-kit stop\n"
            "View logs:     starter-kit logs -f\n"
            "Update:        starter-kit update",
            "Useful Commands",
        )
        self._transition(InstallState.DONE)

    # =============================================================================
    # Update an existing installation
    # =============================================================================

    def update(self, gpu_override: Optional[GpuType] = None) -> InstallState:
        """
        Pulls images and restarts services of an existing checkout.

        Without a GPU override the compose commands run without a profile flag.
        """
        try:
            if not self.repository.exists():
                raise InstallerError(
                    f"Project directory {self.repository.checkout_dir} not found. Run installation first.",
                    suggestion="Run `starter-kit install` to set up the stack.",
                )
            self.deployment_profile = (
                select_profile(gpu_override) if gpu_override is not None else DeploymentProfile.DEFAULT
            )
            self._transition(InstallState.SERVICES_STARTING)
            self.orchestrator.apply(self.deployment_profile, ComposeAction.PULL)
            self.orchestrator.apply(self.deployment_profile, ComposeAction.UP)
            self.display.success("Update complete!")
            self._transition(InstallState.DONE)
        except InstallerError as e:
            self._fail(e)
        return self.state

    def _fail(self, error: InstallerError):
        self.error = error
        self._transition(InstallState.FAILED)
        self.display.error(error.message, error.suggestion)
        if self.repository.exists():
            self.display.print(
                f"To clean up, run: [bold]cd {self.repository.checkout_dir} && {TEARDOWN_COMMAND}[/bold] "
                "(this deletes the stack's data volumes)"
            )
