import typer
import logging
from pathlib import Path
from typing import Optional
from typing_extensions import Annotated

from ..context import AppContext
from ..errors import InstallerError
from ..schemas import ComposeAction, DeploymentProfile
from .status import DirectoryOption, open_checkout

log = logging.getLogger(__name__)


def stop_services_logic(app_context: AppContext, directory: Path, profile: Optional[DeploymentProfile] = None):
    """Business logic for stopping services. Volumes are always kept."""
    orchestrator = open_checkout(app_context, directory)
    orchestrator.apply(profile or DeploymentProfile.DEFAULT, ComposeAction.DOWN)
    log.info("Services stopped. Data volumes were kept.")


def stop(
    ctx: typer.Context,
    profile: Annotated[
        Optional[DeploymentProfile],
        typer.Option("--profile", help="Compose profile the stack was started with."),
    ] = None,
    directory: DirectoryOption = Path("."),
):
    """Stops the starter kit services without deleting data."""
    app_context: AppContext = ctx.obj
    try:
        stop_services_logic(app_context, directory, profile)
    except InstallerError as e:
        app_context.display.error(e.message, e.suggestion)
        raise typer.Exit(code=1)
