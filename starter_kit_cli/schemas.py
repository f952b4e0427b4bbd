from enum import Enum
from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator
from typing import Optional, List, Dict

from .versions import parse_version, version_ge


class OperatingSystem(str, Enum):
    LINUX = "linux"
    MACOS = "macos"
    WINDOWS = "windows"
    UNKNOWN = "unknown"


class GpuType(str, Enum):
    NONE = "none"
    NVIDIA = "nvidia"
    AMD = "amd"
    APPLE_SILICON = "apple_silicon"


class DeploymentProfile(str, Enum):
    """Compose profile selected for a hardware class."""
    CPU = "cpu"
    GPU_NVIDIA = "gpu-nvidia"
    GPU_AMD = "gpu-amd"
    DEFAULT = "default"


class ComposeAction(str, Enum):
    PULL = "pull"
    UP = "up"
    DOWN = "down"


class ErrorKind(str, Enum):
    UNSUPPORTED_PLATFORM = "unsupported_platform"
    TOOL_MISSING = "tool_missing"
    TOOL_VERSION_TOO_OLD = "tool_version_too_old"
    DAEMON_NOT_RUNNING = "daemon_not_running"
    CONFIG_WRITE_ERROR = "config_write_error"
    EXTERNAL_COMMAND_FAILED = "external_command_failed"
    READINESS_TIMEOUT = "readiness_timeout"


class Severity(str, Enum):
    PASS = "pass"
    FAIL = "fail"
    WARNING = "warning"
    INFO = "info"


class WaitResult(str, Enum):
    READY = "ready"
    TIMED_OUT = "timed_out"


class InstallState(str, Enum):
    START = "start"
    REQUIREMENTS_CHECKED = "requirements_checked"
    REPOSITORY_READY = "repository_ready"
    CONFIG_READY = "config_ready"
    SERVICES_STARTING = "services_starting"
    SERVICES_READY = "services_ready"
    DEGRADED = "degraded"
    DONE = "done"
    FAILED = "failed"


class HostProfile(BaseModel):
    """Snapshot of the host taken once per run."""
    model_config = ConfigDict(frozen=True)

    operating_system: OperatingSystem
    architecture: str
    total_memory_gib: int
    available_disk_gib: int
    gpu_type: GpuType = GpuType.NONE
    distribution: Optional[str] = None
    os_version: Optional[str] = None
    in_wsl: bool = False
    nvidia_runtime: Optional[bool] = None


class ToolRequirement(BaseModel):
    """An external tool the installer shells out to, with its minimum version."""
    name: str
    min_version: str
    detected_version: Optional[str] = None

    @computed_field
    @property
    def satisfied(self) -> bool:
        if not self.detected_version:
            return False
        return version_ge(self.detected_version, self.min_version)


class CheckDetail(BaseModel):
    severity: Severity
    message: str
    suggestion: Optional[str] = None
    error: Optional[ErrorKind] = None


class CheckReport(BaseModel):
    details: List[CheckDetail] = Field(default_factory=list)
    requirements: List[ToolRequirement] = Field(default_factory=list)

    @computed_field
    @property
    def passed(self) -> int:
        return sum(1 for d in self.details if d.severity == Severity.PASS)

    @computed_field
    @property
    def failed(self) -> int:
        return sum(1 for d in self.details if d.severity == Severity.FAIL)

    @computed_field
    @property
    def warnings(self) -> int:
        return sum(1 for d in self.details if d.severity == Severity.WARNING)

    def add(self, severity: Severity, message: str, suggestion: Optional[str] = None, error: Optional[ErrorKind] = None) -> CheckDetail:
        detail = CheckDetail(severity=severity, message=message, suggestion=suggestion, error=error)
        self.details.append(detail)
        return detail

    def first_failure(self) -> Optional[CheckDetail]:
        return next((d for d in self.details if d.severity == Severity.FAIL), None)


class EnvironmentConfig(BaseModel):
    """The key/value pairs of the stack's .env file after ensure()."""
    path: str
    values: Dict[str, str] = Field(default_factory=dict)
    created: bool = False
    patched: bool = False


class ServiceEndpoint(BaseModel):
    name: str
    url: str
    timeout_seconds: int = Field(gt=0)
    poll_interval_seconds: int = Field(gt=0)
    required: bool = True


def default_endpoints() -> List[ServiceEndpoint]:
    return [
        ServiceEndpoint(
            name="n8n",
            url="http://localhost:5678/healthz",
            timeout_seconds=300,
            poll_interval_seconds=5,
            required=True,
        ),
        ServiceEndpoint(
            name="qdrant",
            url="http://localhost:6333/health",
            timeout_seconds=120,
            poll_interval_seconds=3,
            required=False,
        ),
    ]


class AppConfig(BaseModel):
    repo_url: str = "https://github.com/n8n-io/self-hosted-ai-starter-kit.git"
    repo_branch: str = "main"
    project_dir: str = "self-hosted-ai-starter-kit"
    env_file: str = ".env"
    shared_dir: str = "shared"
    min_docker_version: str = "20.10.0"
    min_compose_version: str = "2.0.0"
    min_git_version: str = "2.0.0"
    min_memory_gib: int = 4
    min_disk_gib: int = 10
    endpoints: List[ServiceEndpoint] = Field(default_factory=default_endpoints)

    @field_validator("min_docker_version", "min_compose_version", "min_git_version")
    @classmethod
    def _numeric_version(cls, value: str) -> str:
        if parse_version(value) is None:
            raise ValueError(f"not a numeric version: {value!r}")
        return value
