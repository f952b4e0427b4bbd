import pytest
from unittest.mock import MagicMock

from starter_kit_cli.errors import ExternalCommandFailed
from starter_kit_cli.repository import RepositoryManager
from tests.conftest import FakeRunner


def test_checkout_dir(tmp_path, app_config):
    manager = RepositoryManager(app_config, base_dir=tmp_path)

    assert manager.checkout_dir == tmp_path / "self-hosted-ai-starter-kit"
    assert manager.exists() is False


def test_clones_when_missing(tmp_path, app_config):
    runner = FakeRunner({("git", "clone"): (0, "Cloning into 'self-hosted-ai-starter-kit'...\n")})
    confirm = MagicMock()
    manager = RepositoryManager(app_config, base_dir=tmp_path, run=runner)

    checkout = manager.ensure_checkout(confirm)

    assert checkout == tmp_path / "self-hosted-ai-starter-kit"
    assert runner.commands == [[
        "git", "clone", "https://github.com/n8n-io/self-hosted-ai-starter-kit.git", str(checkout),
    ]]
    confirm.assert_not_called()


def test_clone_failure_raises(tmp_path, app_config):
    runner = FakeRunner({("git", "clone"): (128, "fatal: unable to access\n")})
    manager = RepositoryManager(app_config, base_dir=tmp_path, run=runner)

    with pytest.raises(ExternalCommandFailed) as exc_info:
        manager.ensure_checkout(lambda message: False)

    assert exc_info.value.returncode == 128
    assert "network" in exc_info.value.suggestion


def test_existing_checkout_pulled_when_confirmed(tmp_path, app_config):
    checkout = tmp_path / "self-hosted-ai-starter-kit"
    checkout.mkdir()
    runner = FakeRunner({("git", "pull"): (0, "Already up to date.\n")})
    manager = RepositoryManager(app_config, base_dir=tmp_path, run=runner)

    manager.ensure_checkout(lambda message: True)

    assert runner.calls == [(["git", "pull", "origin", "main"], checkout)]


def test_existing_checkout_kept_when_declined(tmp_path, app_config):
    (tmp_path / "self-hosted-ai-starter-kit").mkdir()
    runner = FakeRunner()
    confirm = MagicMock(return_value=False)
    manager = RepositoryManager(app_config, base_dir=tmp_path, run=runner)

    manager.ensure_checkout(confirm)

    confirm.assert_called_once_with("Do you want to update it?")
    assert runner.calls == []


def test_pull_failure_raises(tmp_path, app_config):
    (tmp_path / "self-hosted-ai-starter-kit").mkdir()
    runner = FakeRunner({("git", "pull"): (1, "error: Your local changes would be overwritten\n")})
    manager = RepositoryManager(app_config, base_dir=tmp_path, run=runner)

    with pytest.raises(ExternalCommandFailed):
        manager.ensure_checkout(lambda message: True)


def test_configured_branch(tmp_path, app_config):
    (tmp_path / "self-hosted-ai-starter-kit").mkdir()
    config = app_config.model_copy(update={"repo_branch": "develop"})
    runner = FakeRunner({("git", "pull"): (0, "")})

    RepositoryManager(config, base_dir=tmp_path, run=runner).ensure_checkout(lambda message: True)

    assert runner.commands == [["git", "pull", "origin", "develop"]]
