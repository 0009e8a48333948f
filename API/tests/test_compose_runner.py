# tests/test_compose_runner.py
import asyncio
import shlex
import sys

import pytest
from unittest.mock import MagicMock

from deploy_agent.domain.errors import ExternalToolError
from deploy_agent.domain.ports import MaterializeRequest
from deploy_agent.services import compose_runner as compose_runner_module
from deploy_agent.services.compose_runner import ComposeCLIRunner


def make_request(tmp_path):
    return MaterializeRequest(
        project="blog",
        service="db",
        project_path=tmp_path,
        compose_filename="docker-compose.yml",
    )


class HangingProcess:
    """Stands in for a compose child that never finishes on its own."""

    pid = 4242

    def __init__(self):
        self.returncode = None
        self.killed = False

    async def communicate(self):
        await asyncio.sleep(3600)

    def kill(self):
        self.killed = True
        self.returncode = -9

    async def wait(self):
        return self.returncode


def test_build_args(tmp_path):
    runner = ComposeCLIRunner("docker compose")
    assert runner.build_args(make_request(tmp_path)) == [
        "docker", "compose", "-f", "docker-compose.yml", "-p", "blog", "up", "-d", "db",
    ]


def test_build_args_with_standalone_binary(tmp_path):
    runner = ComposeCLIRunner("docker-compose")
    assert runner.build_args(make_request(tmp_path))[:3] == ["docker-compose", "-f", "docker-compose.yml"]


@pytest.mark.asyncio
async def test_materialize_runs_in_project_directory(tmp_path):
    script = "import os, sys; print(os.getcwd()); print(' '.join(sys.argv[1:]))"
    runner = ComposeCLIRunner(f"{shlex.quote(sys.executable)} -c {shlex.quote(script)}")

    outcome = await runner.materialize(make_request(tmp_path))

    assert outcome.ok
    lines = outcome.output.splitlines()
    assert lines[0] == str(tmp_path.resolve())
    assert lines[1] == "-f docker-compose.yml -p blog up -d db"


@pytest.mark.asyncio
async def test_materialize_merges_stderr_and_keeps_exit_code(tmp_path):
    script = "import sys; sys.stderr.write('no such image'); sys.exit(3)"
    runner = ComposeCLIRunner(f"{shlex.quote(sys.executable)} -c {shlex.quote(script)}")

    outcome = await runner.materialize(make_request(tmp_path))

    assert not outcome.ok
    assert outcome.exit_code == 3
    assert "no such image" in outcome.output


@pytest.mark.asyncio
async def test_missing_executable(tmp_path):
    runner = ComposeCLIRunner("definitely-not-a-compose-binary-xyz")

    with pytest.raises(ExternalToolError, match="compose executable not found"):
        await runner.materialize(make_request(tmp_path))


@pytest.mark.asyncio
async def test_timeout_kills_child(tmp_path, monkeypatch):
    process = HangingProcess()

    async def fake_exec(*args, **kwargs):
        return process

    monkeypatch.setattr(compose_runner_module.asyncio, "create_subprocess_exec", fake_exec)
    runner = ComposeCLIRunner("docker compose", timeout_s=0.05)

    with pytest.raises(ExternalToolError, match="timed out"):
        await runner.materialize(make_request(tmp_path))

    assert process.killed


@pytest.mark.asyncio
async def test_cancellation_kills_child(tmp_path, monkeypatch):
    process = HangingProcess()

    async def fake_exec(*args, **kwargs):
        return process

    monkeypatch.setattr(compose_runner_module.asyncio, "create_subprocess_exec", fake_exec)
    runner = ComposeCLIRunner("docker compose", timeout_s=60)

    task = asyncio.create_task(runner.materialize(make_request(tmp_path)))
    await asyncio.sleep(0.05)
    task.cancel()

    with pytest.raises(asyncio.CancelledError):
        await task

    assert process.killed


@pytest.mark.asyncio
async def test_kill_skips_finished_child(monkeypatch):
    process = HangingProcess()
    process.returncode = 0
    logger = MagicMock()
    monkeypatch.setattr(compose_runner_module, "logger", logger)

    await ComposeCLIRunner()._kill(process)

    assert not process.killed
    logger.warning.assert_not_called()


@pytest.mark.asyncio
async def test_kill_logs_killed_child(monkeypatch):
    process = HangingProcess()
    logger = MagicMock()
    monkeypatch.setattr(compose_runner_module, "logger", logger)

    await ComposeCLIRunner()._kill(process)

    assert process.killed
    logger.warning.assert_called_once()
