import docker
import logging
from typing import Optional

log = logging.getLogger(__name__)


class DockerClient:
    """A thin wrapper around the Docker SDK for daemon-level queries."""

    def __init__(self):
        try:
            self.client = docker.from_env()
            log.debug("Docker client initialized successfully")
        except docker.errors.DockerException as e:
            log.debug(f"Failed to initialize Docker client: {e}")
            # Individual queries report the daemon as unavailable
            self.client = None

    def is_daemon_running(self) -> bool:
        """Returns True if the Docker daemon answers a ping."""
        if self.client is None:
            return False
        try:
            self.client.ping()
            log.debug("Docker daemon is running and accessible")
            return True
        except docker.errors.DockerException as e:
            log.debug(f"Docker daemon check failed: {e}")
            return False

    def _info(self) -> dict:
        if self.client is None:
            return {}
        try:
            return self.client.info()
        except docker.errors.DockerException as e:
            log.debug(f"Could not get Docker info: {e}")
            return {}

    def has_nvidia_runtime(self) -> bool:
        """Check whether the daemon has the NVIDIA container runtime registered."""
        return bool(self._info().get("Runtimes", {}).get("nvidia"))

    def root_dir(self) -> Optional[str]:
        return self._info().get("DockerRootDir")
