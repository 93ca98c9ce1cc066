#!/usr/bin/env python3
"""
Tests for the dashboard state (no terminal involved).
"""

import pytest

from composectl.core.project import Project
from composectl.ui.dashboard import DashboardState


@pytest.fixture
def state(manager, projects_root):
    projects = [
        Project(name='web', path=projects_root / 'docker-Web'),
        Project(name='api', path=projects_root / 'docker-api'),
    ]
    return DashboardState(projects, manager)


def test_selection_stays_in_bounds(state):
    state.move_up()
    assert state.selected == 0
    state.move_down()
    state.move_down()
    assert state.selected == 1
    assert state.selected_project.name == 'api'


def test_start_refreshes_status(state, fake_runner):
    fake_runner.on('ps -q', stdout="c1\nc2\n")
    state.start_selected()

    commands = fake_runner.commands()
    assert any(c.endswith('-p web build') for c in commands)
    assert any(c.endswith('-p web up -d') for c in commands)
    assert state.message == "Project web started"
    assert state.last_error == ""
    assert state.projects[0].running is True
    assert state.projects[0].service_count == 2


def test_actions_capture_output(state, fake_runner):
    state.stop_selected()
    assert fake_runner.commands()[0].endswith('-p web down')
    assert not any(call.streamed for call in fake_runner.calls)
    assert state.message == "Project web stopped"


def test_failed_action_sets_error(state, fake_runner):
    fake_runner.on('restart', returncode=1, stderr="no such service")
    state.move_down()
    state.restart_selected()
    assert "no such service" in state.last_error
    assert state.message == "Welcome to composectl"


def test_refresh_all(state, fake_runner):
    fake_runner.on('-p api ps -q', stdout="c1\n")
    state.refresh_all()
    assert [p.running for p in state.projects] == [False, True]
    assert state.message == "Refreshed 2 projects"


def test_project_lines_mark_selection(state):
    fragments = state.project_lines()
    assert fragments[0][0] == "class:selected"
    assert fragments[0][1].startswith("> web")
    assert "Stopped" in fragments[1][1]


def test_empty_dashboard(manager):
    state = DashboardState([], manager)
    state.start_selected()
    assert state.selected_project is None
    assert "No projects found" in state.project_lines()[0][1]
