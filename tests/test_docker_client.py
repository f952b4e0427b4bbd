import docker
from unittest.mock import patch

from starter_kit_cli.docker_client import DockerClient


@patch('docker.from_env')
def test_docker_client_init_success(mock_from_env):
    """Tests successful DockerClient initialization."""
    client = DockerClient()

    mock_from_env.assert_called_once()
    assert client.client is mock_from_env.return_value


@patch('docker.from_env', side_effect=docker.errors.DockerException("Cannot connect"))
def test_docker_client_init_failure(mock_from_env):
    """A daemon that cannot be reached leaves the client unset instead of raising."""
    client = DockerClient()

    assert client.client is None
    assert client.is_daemon_running() is False
    assert client.has_nvidia_runtime() is False
    assert client.root_dir() is None


@patch('docker.from_env')
def test_is_daemon_running(mock_from_env):
    assert DockerClient().is_daemon_running() is True
    mock_from_env.return_value.ping.assert_called_once()


@patch('docker.from_env')
def test_is_daemon_running_ping_fails(mock_from_env):
    mock_from_env.return_value.ping.side_effect = docker.errors.APIError("daemon gone")

    assert DockerClient().is_daemon_running() is False


@patch('docker.from_env')
def test_has_nvidia_runtime(mock_from_env):
    mock_from_env.return_value.info.return_value = {
        "Runtimes": {"runc": {"path": "runc"}, "nvidia": {"path": "nvidia-container-runtime"}},
    }

    assert DockerClient().has_nvidia_runtime() is True


@patch('docker.from_env')
def test_has_no_nvidia_runtime(mock_from_env):
    mock_from_env.return_value.info.return_value = {"Runtimes": {"runc": {"path": "runc"}}}

    assert DockerClient().has_nvidia_runtime() is False


@patch('docker.from_env')
def test_info_failure(mock_from_env):
    mock_from_env.return_value.info.side_effect = docker.errors.APIError("boom")

    assert DockerClient().has_nvidia_runtime() is False
    assert DockerClient().root_dir() is None


@patch('docker.from_env')
def test_root_dir(mock_from_env):
    mock_from_env.return_value.info.return_value = {"DockerRootDir": "/var/lib/docker"}

    assert DockerClient().root_dir() == "/var/lib/docker"
