import typer
from typing_extensions import Annotated
from .context import AppContext
from .commands.install import install
from .commands.update import update
from .commands.check import check
from .commands.status import status
from .commands.stop import stop
from .commands.logs import logs

app = typer.Typer(
    help="Installs and manages the n8n self-hosted AI starter kit.",
    add_completion=False,
    no_args_is_help=True,
    context_settings={"help_option_names": ["-h", "--help"]},
)

app.command()(install)
app.command()(update)
app.command()(check)
app.command()(status)
app.command()(stop)
app.command()(logs)


@app.callback()
def main(
    ctx: typer.Context,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Enable verbose output for debugging.",
        ),
    ] = False,
):
    """
    Initialize the AppContext and attach it to the Typer context.
    """
    ctx.obj = AppContext(verbose=verbose)


if __name__ == "__main__":
    app()
