import logging
import platform
import shutil
from pathlib import Path
from typing import Callable, Optional

import psutil

from .docker_client import DockerClient
from .errors import UnsupportedPlatform
from .schemas import GpuType, HostProfile, OperatingSystem
from .shell import CommandResult, run_command, which

log = logging.getLogger(__name__)

GIB = 1024 ** 3
ARM64_MACHINES = ("arm64", "aarch64")
NVIDIA_TOOLKIT_URL = "https://docs.nvidia.com/datacenter/cloud-native/container-toolkit/install-guide.html"


def classify_os(system: str) -> OperatingSystem:
    """Maps platform.system() output to an OperatingSystem."""
    if system == "Linux":
        return OperatingSystem.LINUX
    if system == "Darwin":
        return OperatingSystem.MACOS
    if system == "Windows" or system.upper().startswith(("CYGWIN", "MSYS", "MINGW")):
        return OperatingSystem.WINDOWS
    return OperatingSystem.UNKNOWN


class EnvironmentProbe:
    """
    Inspects the host: operating system, CPU architecture, memory, disk and GPU.

    The probe only reads OS facilities. Every external call goes through an
    injectable callable.
    """

    def __init__(
        self,
        min_memory_gib: int = 4,
        min_disk_gib: int = 10,
        disk_path: Path = Path("."),
        system: Callable[[], str] = platform.system,
        machine: Callable[[], str] = platform.machine,
        which: Callable[[str], Optional[str]] = which,
        run: Callable[..., CommandResult] = run_command,
        memory_bytes: Optional[Callable[[], int]] = None,
        disk_free_bytes: Optional[Callable[[Path], int]] = None,
        docker_client_factory: Callable[[], DockerClient] = DockerClient,
    ):
        self.min_memory_gib = min_memory_gib
        self.min_disk_gib = min_disk_gib
        self.disk_path = disk_path
        self._system = system
        self._machine = machine
        self._which = which
        self._run = run
        self._memory_bytes = memory_bytes or (lambda: psutil.virtual_memory().total)
        self._disk_free_bytes = disk_free_bytes or (lambda path: shutil.disk_usage(path).free)
        self._docker_client_factory = docker_client_factory

    def probe(self) -> HostProfile:
        system = self._system()
        operating_system = classify_os(system)
        if operating_system == OperatingSystem.UNKNOWN:
            raise UnsupportedPlatform(system)
        log.info(f"Detected OS: {operating_system.value}")

        architecture = self._machine()
        log.info(f"Architecture: {architecture}")

        total_memory_gib = self._total_memory_gib()
        available_disk_gib = self._available_disk_gib()
        gpu_type, nvidia_runtime = self.detect_gpu(operating_system, architecture)

        return HostProfile(
            operating_system=operating_system,
            architecture=architecture,
            total_memory_gib=total_memory_gib,
            available_disk_gib=available_disk_gib,
            gpu_type=gpu_type,
            distribution=self._distribution(operating_system),
            os_version=self._os_version(operating_system),
            in_wsl=self._in_wsl(operating_system),
            nvidia_runtime=nvidia_runtime,
        )

    def _total_memory_gib(self) -> int:
        total = self._memory_bytes() // GIB
        if total < self.min_memory_gib:
            log.warning(f"Less than {self.min_memory_gib}GB RAM detected. Performance may be impacted.")
        return total

    def _available_disk_gib(self) -> int:
        available = self._disk_free_bytes(self.disk_path) // GIB
        if available < self.min_disk_gib:
            log.warning(f"Less than {self.min_disk_gib}GB disk space available. Consider freeing up space.")
        return available

    def _succeeds(self, tool: str) -> bool:
        return self._which(tool) is not None and self._run([tool]).ok

    def detect_gpu(self, operating_system: OperatingSystem, architecture: str) -> tuple[GpuType, Optional[bool]]:
        """
        Classifies the GPU, first match wins: NVIDIA, AMD (Linux only),
        ARM64 on a Unix-like host, otherwise none.

        Returns the GPU type and, for NVIDIA only, whether Docker has the
        NVIDIA runtime registered.
        """
        log.info("Detecting GPU capabilities...")

        if self._succeeds("nvidia-smi"):
            log.info("NVIDIA GPU detected")
            nvidia_runtime = self._docker_client_factory().has_nvidia_runtime()
            if nvidia_runtime:
                log.info("NVIDIA Container Runtime detected")
            else:
                log.warning("NVIDIA Container Runtime not detected. GPU acceleration may not work.")
                log.warning(f"Install nvidia-container-toolkit: {NVIDIA_TOOLKIT_URL}")
            return GpuType.NVIDIA, nvidia_runtime

        if operating_system == OperatingSystem.LINUX and self._succeeds("rocm-smi"):
            log.info("AMD GPU detected")
            return GpuType.AMD, None

        if operating_system in (OperatingSystem.LINUX, OperatingSystem.MACOS) and architecture.lower() in ARM64_MACHINES:
            log.info("Apple Silicon detected")
            return GpuType.APPLE_SILICON, None

        log.info("No GPU detected or GPU not supported. Will use CPU mode.")
        return GpuType.NONE, None

    def _distribution(self, operating_system: OperatingSystem) -> Optional[str]:
        if operating_system != OperatingSystem.LINUX:
            return None
        try:
            return platform.freedesktop_os_release().get("PRETTY_NAME")
        except OSError:
            return None

    def _os_version(self, operating_system: OperatingSystem) -> Optional[str]:
        if operating_system == OperatingSystem.MACOS:
            return platform.mac_ver()[0] or None
        return platform.release() or None

    def _in_wsl(self, operating_system: OperatingSystem) -> bool:
        if operating_system not in (OperatingSystem.LINUX, OperatingSystem.WINDOWS):
            return False
        try:
            return "microsoft" in Path("/proc/version").read_text().lower()
        except OSError:
            return False
