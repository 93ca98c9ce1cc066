"""
Interactive project dashboard.

Features:
- List discovered projects with their running state
- Start / stop / restart the selected project with a single key
- Refresh the status of every project

Actions run synchronously: the screen does not update until the
docker-compose command has finished.
"""
import logging
from typing import Callable, List, Optional

from prompt_toolkit import Application
from prompt_toolkit.key_binding import KeyBindings
from prompt_toolkit.layout.containers import HSplit, Window
from prompt_toolkit.layout.controls import FormattedTextControl
from prompt_toolkit.layout.layout import Layout
from prompt_toolkit.styles import Style
from prompt_toolkit.widgets import Frame

from composectl.core.compose import ComposeManager
from composectl.core.exceptions import ComposeCtlError
from composectl.core.project import Project

logger = logging.getLogger('composectl.dashboard')

COMMAND_BAR = "[s]tart  [d]own  [r]estart  [u]pdate  [k/j] move  [q]uit"


class DashboardState:
    """Projects, selection and messages of one dashboard session."""

    def __init__(self, projects: List[Project], manager: ComposeManager):
        self.projects = projects
        self.manager = manager
        self.selected = 0
        self.message = "Welcome to composectl"
        self.last_error = ""

    @property
    def selected_project(self) -> Optional[Project]:
        if 0 <= self.selected < len(self.projects):
            return self.projects[self.selected]
        return None

    def move_up(self):
        if self.selected > 0:
            self.selected -= 1

    def move_down(self):
        if self.selected < len(self.projects) - 1:
            self.selected += 1

    def _run_action(self, done: str, action: Callable[[Project], None]):
        project = self.selected_project
        if project is None:
            return

        self.last_error = ""
        try:
            action(project)
        except ComposeCtlError as e:
            logger.error(f"Dashboard action on {project.name} failed: {e}")
            self.last_error = str(e)
        else:
            self.message = f"Project {project.name} {done}"
        self.manager.refresh(project)

    def start_selected(self):
        self._run_action("started", lambda p: self.manager.start_project(p, capture=True))

    def stop_selected(self):
        self._run_action("stopped", lambda p: self.manager.stop_project(p, capture=True))

    def restart_selected(self):
        self._run_action("restarted", lambda p: self.manager.restart_service(p, capture=True))

    def refresh_all(self):
        for project in self.projects:
            self.manager.refresh(project)
        self.message = f"Refreshed {len(self.projects)} projects"

    def project_lines(self):
        """Formatted text fragments for the project list."""
        if not self.projects:
            return [("class:empty", "  No projects found\n")]

        fragments = []
        for i, project in enumerate(self.projects):
            style = "class:selected" if i == self.selected else "class:project"
            marker = ">" if i == self.selected else " "
            fragments.append((style, f"{marker} {project.name:<20}  {project.status_string()}\n"))
        return fragments

    def status_lines(self):
        fragments = [("class:success", self.message)]
        if self.last_error:
            fragments.append(("", "\n"))
            fragments.append(("class:error", self.last_error))
        return fragments


class Dashboard:
    """Full-screen prompt_toolkit front end for DashboardState."""

    def __init__(self, state: DashboardState):
        self.state = state
        self.kb = KeyBindings()
        self.setup_keybindings()

        self.project_list = FormattedTextControl(self.state.project_lines, focusable=True)
        self.status_bar = FormattedTextControl(self.state.status_lines)
        self.command_bar = FormattedTextControl(COMMAND_BAR)

        self.app = Application(
            layout=self.create_layout(),
            key_bindings=self.kb,
            style=self.create_style(),
            full_screen=True
        )

    def setup_keybindings(self):
        """Setup keyboard shortcuts"""

        @self.kb.add('c-c', eager=True)
        @self.kb.add('q')
        def _(event):
            """Quit the dashboard"""
            event.app.exit()

        @self.kb.add('up')
        @self.kb.add('k')
        def _(event):
            self.state.move_up()

        @self.kb.add('down')
        @self.kb.add('j')
        def _(event):
            self.state.move_down()

        @self.kb.add('s')
        def _(event):
            self.state.start_selected()

        @self.kb.add('d')
        def _(event):
            self.state.stop_selected()

        @self.kb.add('r')
        def _(event):
            self.state.restart_selected()

        @self.kb.add('u')
        def _(event):
            self.state.refresh_all()

    def create_layout(self):
        """Create the dashboard layout"""
        return Layout(
            HSplit([
                Window(
                    content=FormattedTextControl([("class:title", " composectl dashboard")]),
                    height=1
                ),
                Frame(
                    title="Projects",
                    body=Window(self.project_list)
                ),
                Frame(
                    title="Status",
                    body=Window(self.status_bar),
                    height=4
                ),
                Window(
                    content=self.command_bar,
                    height=1,
                    style="class:command-bar"
                )
            ])
        )

    def create_style(self):
        """Create the dashboard style"""
        return Style.from_dict({
            'frame.border': '#888888',
            'frame.title': 'bold #ffffff',
            'title': 'bold #5f87ff',
            'selected': 'bg:#875f87 #ffffff',
            'project': '#c0c0c0',
            'empty': 'italic #888888',
            'command-bar': 'reverse',
            'error': '#ff0000',
            'success': '#00ff00'
        })

    def run(self):
        self.app.run()
