"""
Install command implementation for the starter kit CLI.

This module runs the full installation of the n8n self-hosted AI starter kit:

1. Probe the host (OS, architecture, memory, disk, GPU)
2. Check prerequisites (Docker, daemon, Compose plugin, git)
3. Clone the repository, or optionally pull an existing checkout
4. Ensure the .env file (generated credential, Apple Silicon OLLAMA_HOST patch)
5. Pull images and start the compose profile matching the GPU
6. Wait for n8n (required) and Qdrant (best-effort) to answer their health checks
7. Create the shared directory and print the summary

`--update` skips all of that and only pulls images and restarts an existing
checkout.
"""

import logging
from pathlib import Path
from typing import Optional

import typer
from typing_extensions import Annotated

from ..context import AppContext
from ..installer import InstallationDriver, TEARDOWN_COMMAND
from ..schemas import GpuType, InstallState

log = logging.getLogger(__name__)

INTERRUPTED_EXIT_CODE = 130


def resolve_gpu_override(gpu_nvidia: bool, gpu_amd: bool, cpu: bool) -> Optional[GpuType]:
    """Turns the mutually exclusive GPU flags into an override, or None to auto-detect."""
    selected = [
        gpu_type
        for flag, gpu_type in ((gpu_nvidia, GpuType.NVIDIA), (gpu_amd, GpuType.AMD), (cpu, GpuType.NONE))
        if flag
    ]
    if len(selected) > 1:
        raise typer.BadParameter("Use only one of --gpu-nvidia, --gpu-amd and --cpu.")
    return selected[0] if selected else None


def build_driver(app_context: AppContext, project_dir: Path, assume_yes: bool) -> InstallationDriver:
    confirm = (lambda message: True) if assume_yes else (lambda message: typer.confirm(message, default=False))
    return InstallationDriver(
        app_context.app_config,
        app_context.display,
        base_dir=project_dir,
        confirm=confirm,
    )


def run_driver(app_context: AppContext, driver: InstallationDriver, gpu_override: Optional[GpuType], update: bool) -> bool:
    """Runs the driver and converts an interrupt into exit code 130."""
    try:
        if update:
            state = driver.update(gpu_override)
        else:
            state = driver.run(gpu_override)
    except KeyboardInterrupt:
        app_context.display.error(
            "Installation interrupted.",
            f"Services may be partially started. To clean up, run: {TEARDOWN_COMMAND}",
        )
        raise typer.Exit(code=INTERRUPTED_EXIT_CODE)
    return state == InstallState.DONE


def install_logic(
    app_context: AppContext,
    gpu_override: Optional[GpuType] = None,
    update: bool = False,
    project_dir: Path = Path("."),
    assume_yes: bool = False,
) -> bool:
    """
    Business logic for the install command.

    Returns:
        bool: True if the installation (or update) completed, False otherwise
    """
    if update:
        log.info("Updating existing installation...")
    else:
        app_context.display.banner("n8n Self-hosted AI Starter Kit - Installation")

    driver = build_driver(app_context, project_dir, assume_yes)
    return run_driver(app_context, driver, gpu_override, update)


def install(
    ctx: typer.Context,
    gpu_nvidia: Annotated[bool, typer.Option("--gpu-nvidia", help="Force NVIDIA GPU profile.")] = False,
    gpu_amd: Annotated[bool, typer.Option("--gpu-amd", help="Force AMD GPU profile.")] = False,
    cpu: Annotated[bool, typer.Option("--cpu", help="Force CPU-only profile.")] = False,
    update: Annotated[bool, typer.Option("--update", help="Update an existing installation (pull and restart).")] = False,
    directory: Annotated[
        Path,
        typer.Option("--directory", help="Parent directory of the starter kit checkout.", file_okay=False),
    ] = Path("."),
    yes: Annotated[bool, typer.Option("--yes", "-y", help="Update an existing checkout without asking.")] = False,
):
    """
    Installs the n8n self-hosted AI starter kit and waits until it is ready.
    """
    app_context: AppContext = ctx.obj
    gpu_override = resolve_gpu_override(gpu_nvidia, gpu_amd, cpu)
    if not install_logic(app_context, gpu_override, update, directory, yes):
        raise typer.Exit(code=1)
