import logging
import shutil
import subprocess
from pathlib import Path
from typing import Callable, List, Optional, Union

from pydantic import BaseModel

from .errors import ExternalCommandFailed

log = logging.getLogger(__name__)


class CommandResult(BaseModel):
    """Outcome of one external command invocation."""
    args: List[str]
    returncode: int
    output: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0

    @property
    def command(self) -> str:
        return " ".join(self.args)

    def check(self, suggestion: Optional[str] = None) -> "CommandResult":
        """Raises ExternalCommandFailed unless the command succeeded."""
        if not self.ok:
            raise ExternalCommandFailed(self.command, self.returncode, self.output, suggestion=suggestion)
        return self


def which(name: str) -> Optional[str]:
    return shutil.which(name)


def run_command(
    args: List[str],
    cwd: Optional[Union[str, Path]] = None,
    on_line: Optional[Callable[[str], None]] = None,
) -> CommandResult:
    """
    Runs a command, collecting combined stdout/stderr line by line.

    A missing executable is reported as exit code 127, the same code a shell
    uses, so callers only ever deal with a CommandResult.
    """
    log.debug(f"Running: {' '.join(args)}" + (f" (cwd={cwd})" if cwd else ""))
    try:
        process = subprocess.Popen(
            args,
            cwd=cwd,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            text=True,
            bufsize=1,
            encoding='utf-8',
            errors='replace',
        )
    except FileNotFoundError:
        log.debug(f"Executable not found: {args[0]}")
        return CommandResult(args=args, returncode=127, output=f"{args[0]}: command not found")
    except OSError as e:
        log.debug(f"Could not start {args[0]}: {e}")
        return CommandResult(args=args, returncode=126, output=str(e))

    output_lines = []
    for line in iter(process.stdout.readline, ''):
        output_lines.append(line)
        if on_line:
            on_line(line.rstrip("\n"))

    process.wait()
    return CommandResult(args=args, returncode=process.returncode, output="".join(output_lines))
