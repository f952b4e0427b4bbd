import typer
import logging
from pathlib import Path
from typing_extensions import Annotated

from ..compose import ComposeOrchestrator
from ..context import AppContext
from ..errors import InstallerError
from ..repository import RepositoryManager

log = logging.getLogger(__name__)

DirectoryOption = Annotated[
    Path,
    typer.Option("--directory", help="Parent directory of the starter kit checkout.", file_okay=False),
]


def open_checkout(app_context: AppContext, directory: Path) -> ComposeOrchestrator:
    """Returns an orchestrator for an existing checkout, or raises if there is none."""
    repository = RepositoryManager(app_context.app_config, directory)
    if not repository.exists():
        raise InstallerError(
            f"Project directory {repository.checkout_dir} not found.",
            suggestion="Run `starter-kit install` first, or pass --directory.",
        )
    return ComposeOrchestrator(repository.checkout_dir)


def status_logic(app_context: AppContext, directory: Path) -> str:
    """Business logic for showing the state of the stack's containers."""
    orchestrator = open_checkout(app_context, directory)
    log.debug(f"Getting service status in {orchestrator.project_dir}")
    return orchestrator.ps()


def status(ctx: typer.Context, directory: DirectoryOption = Path(".")):
    """Shows the state of the starter kit services."""
    app_context: AppContext = ctx.obj
    try:
        output = status_logic(app_context, directory)
    except InstallerError as e:
        app_context.display.error(e.message, e.suggestion)
        raise typer.Exit(code=1)
    app_context.display.log_message(output)
