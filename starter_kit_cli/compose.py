import logging
from pathlib import Path
from typing import Callable, List, Optional, Union

from .schemas import ComposeAction, DeploymentProfile, GpuType
from .shell import CommandResult, run_command

log = logging.getLogger(__name__)

PROFILE_BY_GPU = {
    GpuType.NVIDIA: DeploymentProfile.GPU_NVIDIA,
    GpuType.AMD: DeploymentProfile.GPU_AMD,
    GpuType.APPLE_SILICON: DeploymentProfile.DEFAULT,
}

ACTION_ARGS = {
    ComposeAction.PULL: ["pull"],
    ComposeAction.UP: ["up", "-d"],
    ComposeAction.DOWN: ["down"],
}


def select_profile(gpu_type: Optional[GpuType]) -> DeploymentProfile:
    """Maps a GPU type to its compose profile; anything unmapped runs on CPU."""
    return PROFILE_BY_GPU.get(gpu_type, DeploymentProfile.CPU)


class ComposeOrchestrator:
    """Drives `docker compose` inside the starter kit checkout."""

    def __init__(
        self,
        project_dir: Union[str, Path],
        run: Callable[..., CommandResult] = run_command,
    ):
        self.project_dir = Path(project_dir)
        self._run = run

    def base_command(self, profile: Optional[DeploymentProfile] = None) -> List[str]:
        """
        Builds the `docker compose` prefix for a profile.

        The default profile (Apple Silicon) deliberately passes no --profile flag
        and lets compose start its unprofiled services; Ollama runs natively there.
        """
        cmd = ["docker", "compose"]
        if profile is not None and profile != DeploymentProfile.DEFAULT:
            cmd.extend(["--profile", profile.value])
        return cmd

    def apply(self, profile: DeploymentProfile, action: ComposeAction) -> CommandResult:
        """Runs one compose action; any failure raises ExternalCommandFailed."""
        cmd = self.base_command(profile) + ACTION_ARGS[action]
        log.info(f"Running `{' '.join(cmd)}`")
        result = self._run(cmd, cwd=self.project_dir)
        if not result.ok:
            log.debug(result.output)
        return result.check(suggestion="Re-run with --verbose to see the compose output.")

    def ps(self) -> str:
        """Returns the `docker compose ps` table for the checkout."""
        return self._run(["docker", "compose", "ps"], cwd=self.project_dir).check().output

    def logs(self, on_line: Callable[[str], None], service: Optional[str] = None, follow: bool = False, tail: Optional[int] = None) -> CommandResult:
        """Streams compose log lines for one service or the whole stack to on_line."""
        cmd = ["docker", "compose", "logs"]
        if follow:
            cmd.append("--follow")
        if tail:
            cmd.extend(["--tail", str(tail)])
        if service:
            cmd.append(service)
        return self._run(cmd, cwd=self.project_dir, on_line=on_line).check()
