#!/usr/bin/env python3
"""
Tests for the subprocess gateway.
"""

import subprocess
from unittest.mock import patch

import pytest

from composectl.core.exceptions import CommandExecutionError
from composectl.core.runner import CommandResult, CommandRunner


@patch("composectl.core.runner.subprocess.run")
def test_run_captures_output(mock_run, tmp_path):
    mock_run.return_value = subprocess.CompletedProcess(
        args=['docker', 'info'], returncode=0, stdout="ok\n", stderr=""
    )

    result = CommandRunner().run(['docker', 'info'], cwd=tmp_path)

    assert result == CommandResult(0, "ok\n", "")
    _, kwargs = mock_run.call_args
    assert kwargs['capture_output'] is True
    assert kwargs['encoding'] == 'utf-8'
    assert kwargs['cwd'] == tmp_path
    assert kwargs['env'] is None


@patch("composectl.core.runner.subprocess.run")
def test_run_nonzero_is_returned_not_raised(mock_run):
    mock_run.return_value = subprocess.CompletedProcess(
        args=['docker-compose'], returncode=1, stdout="", stderr="boom"
    )
    assert CommandRunner().run(['docker-compose', 'ps']).returncode == 1


@patch("composectl.core.runner.subprocess.run", side_effect=FileNotFoundError("docker-compose"))
def test_missing_program_raises(mock_run):
    with pytest.raises(CommandExecutionError) as exc:
        CommandRunner().run(['docker-compose', 'ps'])
    assert exc.value.command == ['docker-compose', 'ps']


@patch("composectl.core.runner.subprocess.run")
def test_env_is_merged_with_os_environ(mock_run, monkeypatch):
    monkeypatch.setenv('COMPOSECTL_TEST_VAR', 'outer')
    mock_run.return_value = subprocess.CompletedProcess(args=[], returncode=0)

    assert CommandRunner().stream(['docker-compose', 'up'], env={'APP_ENV': 'dev'}) == 0

    env = mock_run.call_args.kwargs['env']
    assert env['APP_ENV'] == 'dev'
    assert env['COMPOSECTL_TEST_VAR'] == 'outer'
