#!/usr/bin/env python3
"""
Pytest configuration and fixtures for the composectl tests.

The FakeRunner stands in for CommandRunner so that no docker or
docker-compose process is ever spawned.
"""

import sys
from collections import namedtuple
from pathlib import Path

import pytest

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from composectl.core.compose import ComposeManager
from composectl.core.config import Config, Settings
from composectl.core.project import Project
from composectl.core.runner import CommandResult

FakeCall = namedtuple('FakeCall', ['args', 'cwd', 'env', 'streamed'])


class FakeRunner:
    """Returns canned results for commands matching a text fragment."""

    def __init__(self):
        self.responses = []
        self.calls = []

    def on(self, fragment, stdout='', stderr='', returncode=0, error=None):
        """Register a response for commands whose joined argv contains fragment."""
        response = error if error is not None else CommandResult(returncode, stdout, stderr)
        self.responses.append((fragment, response))
        return self

    def _respond(self, args, cwd, env, streamed=False):
        self.calls.append(FakeCall(list(args), cwd, env, streamed))
        command = ' '.join(args)
        for fragment, response in self.responses:
            if fragment in command:
                if isinstance(response, Exception):
                    raise response
                return response
        return CommandResult(0, '', '')

    def run(self, args, cwd=None, env=None):
        return self._respond(args, cwd, env)

    def stream(self, args, cwd=None, env=None):
        return self._respond(args, cwd, env, streamed=True).returncode

    def commands(self):
        return [' '.join(call.args) for call in self.calls]


@pytest.fixture
def fake_runner():
    """Create a FakeRunner with docker reported as installed and running."""
    return FakeRunner()


@pytest.fixture
def manager(fake_runner):
    return ComposeManager(fake_runner)


@pytest.fixture
def projects_root(tmp_path):
    """Create a projects root with two valid projects and some noise."""
    root = tmp_path / 'docker'
    for dirname in ('docker-Web', 'docker-api'):
        (root / dirname).mkdir(parents=True)
        (root / dirname / 'docker-compose.yml').write_text("services: {}\n")
    # No compose file
    (root / 'docker-empty').mkdir()
    # Wrong prefix
    (root / 'other').mkdir()
    (root / 'other' / 'docker-compose.yml').write_text("services: {}\n")
    # Plain file
    (root / 'docker-notes.txt').write_text("notes")
    return root


@pytest.fixture
def project(projects_root):
    return Project(name='web', path=projects_root / 'docker-Web')


@pytest.fixture
def settings(tmp_path, projects_root):
    return Settings(
        config_path=tmp_path / 'config' / 'projects.yml',
        root=projects_root,
        config=Config(root=str(projects_root))
    )
