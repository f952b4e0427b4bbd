import typer
import logging
from pathlib import Path
from typing import Optional

from ..context import AppContext
from ..errors import InstallerError
from .status import DirectoryOption, open_checkout

log = logging.getLogger(__name__)


def logs_services_logic(app_context: AppContext, directory: Path, service: Optional[str], follow: bool, tail: Optional[int]):
    """Business logic for streaming compose logs to the console."""
    orchestrator = open_checkout(app_context, directory)
    if service:
        log.info(f"Streaming logs from service: {service}")
    else:
        log.info("Streaming logs from all services")
    orchestrator.logs(app_context.display.log_message, service=service, follow=follow, tail=tail)


def logs(
    ctx: typer.Context,
    service: Optional[str] = typer.Argument(None, help="Name of the service to stream logs from (e.g. n8n, qdrant)."),
    follow: bool = typer.Option(False, "--follow", "-f", help="Follow the logs as they are generated."),
    tail: Optional[int] = typer.Option(None, "--tail", "-t", help="Number of lines to show from the end of the logs."),
    directory: DirectoryOption = Path("."),
):
    """Streams logs from one service or the whole stack."""
    app_context: AppContext = ctx.obj
    try:
        logs_services_logic(app_context, directory, service, follow, tail)
    except InstallerError as e:
        app_context.display.error(e.message, e.suggestion)
        raise typer.Exit(code=1)
