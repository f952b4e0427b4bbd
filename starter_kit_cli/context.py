import sys
import logging
from .config import Config
from .display import Display

log = logging.getLogger(__name__)


class AppContext:
    """A central container for the application's runtime state."""

    def __init__(self, verbose: bool = False):
        try:
            self.display = Display(verbose=verbose)
            self.config = Config()
        except Exception as e:
            log.error(f"Failed to initialize application: {e}", exc_info=True)
            sys.exit(1)

    @property
    def verbose(self) -> bool:
        return self.display.verbose

    @property
    def app_config(self):
        return self.config.app_config
