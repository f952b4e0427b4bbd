import io
import logging
import secrets
import shutil
import string
from pathlib import Path
from typing import Union

from dotenv import dotenv_values
from dotenv.parser import parse_stream

from .errors import ConfigWriteError
from .schemas import EnvironmentConfig, GpuType

log = logging.getLogger(__name__)

OLLAMA_HOST_KEY = "OLLAMA_HOST"
OLLAMA_CONTAINER_HOST = "http://ollama:11434"
OLLAMA_DOCKER_HOST = "http://host.docker.internal:11434"

CREDENTIAL_LENGTH = 25
CREDENTIAL_ALPHABET = string.ascii_letters + string.digits

ENV_TEMPLATE = """\
# n8n Configuration
N8N_PORT=5678
N8N_HOST=localhost

# Database Configuration
POSTGRES_DB=n8n
POSTGRES_USER=n8n
POSTGRES_PASSWORD={postgres_password}

# Qdrant Configuration
QDRANT_PORT=6333

# Ollama Configuration
OLLAMA_HOST={ollama_host}
"""


def generate_credential(length: int = CREDENTIAL_LENGTH) -> str:
    """Generate a cryptographically secure alphanumeric credential."""
    if length < CREDENTIAL_LENGTH:
        raise ValueError(f"Credentials must be at least {CREDENTIAL_LENGTH} characters long")
    return ''.join(secrets.choice(CREDENTIAL_ALPHABET) for _ in range(length))


def render_template(postgres_password: str) -> str:
    return ENV_TEMPLATE.format(postgres_password=postgres_password, ollama_host=OLLAMA_CONTAINER_HOST)


class EnvFileManager:
    """
    Ensures the stack's .env file exists and carries the host-specific values.

    An existing file is never regenerated; the only edit ever made to it is the
    Apple Silicon rewrite of OLLAMA_HOST, which is skipped once applied.
    """

    def __init__(self, example_name: str = ".env.example"):
        self.example_name = example_name

    def ensure(self, path: Union[str, Path], gpu_type: GpuType) -> EnvironmentConfig:
        path = Path(path)
        created = False

        if not path.exists():
            self._create(path)
            created = True
        else:
            log.debug(f"Keeping existing environment file: {path}")

        patched = False
        if gpu_type == GpuType.APPLE_SILICON:
            patched = self._patch_ollama_host(path)

        values = dotenv_values(stream=io.StringIO(self._read(path)))
        return EnvironmentConfig(
            path=str(path),
            values={key: value or "" for key, value in values.items()},
            created=created,
            patched=patched,
        )

    def _create(self, path: Path):
        example = path.parent / self.example_name
        try:
            if example.exists():
                shutil.copy2(example, path)
                log.info(f"Created {path.name} file from example")
            else:
                path.write_text(render_template(generate_credential()), encoding="utf-8")
                log.info(f"Created {path.name} file with secure defaults")
        except OSError as e:
            raise ConfigWriteError(str(path), e.strerror or str(e)) from e

    def _read(self, path: Path) -> str:
        try:
            with open(path, encoding="utf-8", newline="") as f:
                return f.read()
        except OSError as e:
            raise ConfigWriteError(str(path), e.strerror or str(e), action="read") from e
        except UnicodeDecodeError as e:
            raise ConfigWriteError(str(path), f"not valid UTF-8 ({e.reason} at byte {e.start})", action="read") from e

    def _patch_ollama_host(self, path: Path) -> bool:
        """
        Point OLLAMA_HOST at the host's native Ollama; returns True if the file changed.

        Only lines that still hold the container address are rewritten. Every
        other line, including an OLLAMA_HOST set to a custom address, is kept
        byte for byte.
        """
        lines = []
        patched = False
        for binding in parse_stream(io.StringIO(self._read(path))):
            line = binding.original.string
            if binding.key == OLLAMA_HOST_KEY and binding.value == OLLAMA_CONTAINER_HOST:
                ending = line[len(line.rstrip("\r\n")):]
                line = f"{OLLAMA_HOST_KEY}={OLLAMA_DOCKER_HOST}{ending}"
                patched = True
            lines.append(line)

        if not patched:
            log.debug(f"{OLLAMA_HOST_KEY} already configured, skipping Apple Silicon patch")
            return False
        try:
            with open(path, "w", encoding="utf-8", newline="") as f:
                f.write("".join(lines))
        except OSError as e:
            raise ConfigWriteError(str(path), e.strerror or str(e)) from e
        log.info(f"Updated {OLLAMA_HOST_KEY} for Apple Silicon")
        return True
