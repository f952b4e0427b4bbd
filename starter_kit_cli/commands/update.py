from pathlib import Path

import typer
from typing_extensions import Annotated

from ..context import AppContext
from .install import install_logic, resolve_gpu_override


def update(
    ctx: typer.Context,
    gpu_nvidia: Annotated[bool, typer.Option("--gpu-nvidia", help="Pull and start the NVIDIA GPU profile.")] = False,
    gpu_amd: Annotated[bool, typer.Option("--gpu-amd", help="Pull and start the AMD GPU profile.")] = False,
    cpu: Annotated[bool, typer.Option("--cpu", help="Pull and start the CPU-only profile.")] = False,
    directory: Annotated[
        Path,
        typer.Option("--directory", help="Parent directory of the starter kit checkout.", file_okay=False),
    ] = Path("."),
):
    """Pulls the latest images and restarts an existing installation."""
    app_context: AppContext = ctx.obj
    gpu_override = resolve_gpu_override(gpu_nvidia, gpu_amd, cpu)
    if not install_logic(app_context, gpu_override, update=True, project_dir=directory):
        raise typer.Exit(code=1)
