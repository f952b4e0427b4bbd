import logging
from pathlib import Path
from typing import Callable, Union

from .schemas import AppConfig
from .shell import CommandResult, run_command

log = logging.getLogger(__name__)


class RepositoryManager:
    """Clones the starter kit repository or updates an existing checkout."""

    def __init__(
        self,
        config: AppConfig,
        base_dir: Union[str, Path] = Path("."),
        run: Callable[..., CommandResult] = run_command,
    ):
        self.config = config
        self.checkout_dir = Path(base_dir) / config.project_dir
        self._run = run

    def exists(self) -> bool:
        return self.checkout_dir.is_dir()

    def ensure_checkout(self, confirm_update: Callable[[str], bool]) -> Path:
        """
        Makes sure the checkout exists.

        An existing directory is only pulled when confirm_update agrees; it is
        never re-cloned.
        """
        log.info("Setting up repository...")
        if self.exists():
            log.warning(f"Directory {self.checkout_dir} already exists.")
            if confirm_update("Do you want to update it?"):
                self._run(
                    ["git", "pull", "origin", self.config.repo_branch],
                    cwd=self.checkout_dir,
                ).check(suggestion="Resolve local changes in the checkout or re-run without updating.")
                log.info("Repository updated")
            else:
                log.info("Keeping existing checkout as-is")
        else:
            self._run(
                ["git", "clone", self.config.repo_url, str(self.checkout_dir)],
            ).check(suggestion=f"Check your network connection and access to {self.config.repo_url}")
            log.info(f"Cloned {self.config.repo_url} into {self.checkout_dir}")
        return self.checkout_dir
