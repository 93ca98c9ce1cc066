#!/usr/bin/env python3
"""
composectl - Management tool for local docker-compose projects.
"""
import sys
import logging
from pathlib import Path
from typing import Optional

import click
from rich.console import Console

from composectl import __version__
from composectl.core.compose import ComposeManager, order_service_urls
from composectl.core.config import Settings, ensure_default_config, load_settings
from composectl.core.daemon import DOCKER_INSTALL_URL, DockerDaemon
from composectl.core.discovery import ProjectDiscovery, find_project
from composectl.core.exceptions import ComposeCtlError, ComposeQueryError
from composectl.core.project import Project
from composectl.core.runner import CommandRunner
from composectl.core.utils import default_config_path, get_log_file, setup_logging
from composectl.ui.console import ConsoleUI
from composectl.ui.dashboard import Dashboard, DashboardState

VERSION = __version__
console = Console()
ui = ConsoleUI(console)
logger = logging.getLogger('composectl.cli')


class ComposeCtl:
    """Main composectl application class."""

    def __init__(self, settings: Settings, runner: Optional[CommandRunner] = None):
        self.settings = settings
        self.runner = runner or CommandRunner()
        self.manager = ComposeManager(self.runner)
        self.daemon = DockerDaemon(self.runner)
        self.discovery = ProjectDiscovery(settings.root, settings.config)

    def ensure_docker(self):
        self.daemon.ensure_running()

    def projects(self):
        return self.discovery.discover()

    def project(self, name: str) -> Project:
        return find_project(self.projects(), name)


def get_composectl(config_path: Optional[Path], root: Optional[Path]) -> ComposeCtl:
    """Get ComposeCtl instance with error handling."""
    path = config_path or default_config_path()
    try:
        ensure_default_config(path)
    except OSError as e:
        logger.warning(f"Could not create default configuration at {path}: {e}")

    try:
        return ComposeCtl(load_settings(path, root))
    except ComposeCtlError as e:
        ui.print_error(e)
        sys.exit(1)


def print_status_sweep(app: ComposeCtl):
    """Show one line per project; a failing project shows as stopped."""
    app.ensure_docker()
    projects = app.projects()
    with ui.working("Querying projects..."):
        for project in projects:
            app.manager.refresh(project)
    ui.display_status_table(projects)


# CLI Commands
@click.group(invoke_without_command=True)
@click.version_option(version=VERSION)
@click.option('--debug', is_flag=True, help='Enable debug logging')
@click.option('--root', type=click.Path(file_okay=False, path_type=Path), envvar='COMPOSECTL_ROOT',
              help='Directory holding the docker-* project folders')
@click.option('--config', 'config_path', type=click.Path(dir_okay=False, path_type=Path),
              envvar='COMPOSECTL_CONFIG', help='Configuration file')
@click.pass_context
def cli(ctx, debug, root, config_path):
    """composectl - Management tool for local docker-compose projects"""
    if ctx.obj is None:
        ctx.obj = get_composectl(config_path, root)
    app = ctx.obj

    setup_logging(debug, app.settings.log_dir)
    if debug:
        logger.debug("Debug mode enabled")
        logger.debug(f"Configuration: {app.settings.config_path}")
    logger.debug(f"Projects root: {app.settings.root}")

    if ctx.invoked_subcommand is None:
        ui.display_commands(COMMANDS)
        try:
            print_status_sweep(app)
        except ComposeCtlError as e:
            ui.print_error(e)
            sys.exit(1)


@cli.command()
@click.argument('project')
@click.pass_obj
def start(app: ComposeCtl, project: str):
    """Build and start a project"""
    try:
        app.ensure_docker()
        target = app.project(project)
        ui.print_info(f"Building and starting project {target.name}...")
        app.manager.start_project(target)
        ui.print_success(f"Project {target.name} started")
    except ComposeCtlError as e:
        ui.print_error(e)
        sys.exit(1)


@cli.command()
@click.argument('project')
@click.pass_obj
def stop(app: ComposeCtl, project: str):
    """Stop a project and remove its containers"""
    try:
        app.ensure_docker()
        target = app.project(project)
        ui.print_info(f"Stopping project {target.name}...")
        app.manager.stop_project(target)
        ui.print_success(f"Project {target.name} stopped and containers removed")
    except ComposeCtlError as e:
        ui.print_error(e)
        sys.exit(1)


@cli.command()
@click.argument('project')
@click.argument('service', required=False)
@click.pass_obj
def restart(app: ComposeCtl, project: str, service: Optional[str]):
    """Restart a project or one of its services (no rebuild)"""
    try:
        app.ensure_docker()
        target = app.project(project)
        if service:
            ui.print_info(f"Restarting service {service} of project {target.name}...")
        else:
            ui.print_info(f"Restarting project {target.name}...")
        app.manager.restart_service(target, service)
        ui.print_success(f"{'Service ' + service if service else 'Project ' + target.name} restarted")
    except ComposeCtlError as e:
        ui.print_error(e)
        sys.exit(1)


@cli.command()
@click.argument('project', required=False)
@click.option('--containers', '-c', 'show_containers', is_flag=True,
              help='Also list the containers of the project')
@click.pass_obj
def status(app: ComposeCtl, project: Optional[str], show_containers: bool):
    """Show the status of all projects, or details of one"""
    try:
        if not project:
            print_status_sweep(app)
            return

        app.ensure_docker()
        target = app.project(project)
        running, _, detail = app.manager.get_status_detailed(target)

        try:
            services = app.manager.get_services(target)
        except ComposeQueryError as e:
            logger.warning(f"Could not list services of {target.name}: {e}")
            services = []

        try:
            urls = app.manager.get_service_urls(target)
        except ComposeQueryError as e:
            logger.warning(f"Could not list ports of {target.name}: {e}")
            urls = {}

        containers = None
        if show_containers:
            try:
                containers = app.manager.get_containers(target)
            except ComposeQueryError as e:
                logger.warning(f"Could not list containers of {target.name}: {e}")

        ui.display_project_detail(
            target, running, detail, services,
            order_service_urls(services, urls) if urls else {},
            containers
        )
    except ComposeCtlError as e:
        ui.print_error(e)
        sys.exit(1)


@cli.command()
@click.argument('project')
@click.argument('service', required=False)
@click.option('--follow', '-f', is_flag=True, help='Follow log output')
@click.pass_obj
def logs(app: ComposeCtl, project: str, service: Optional[str], follow: bool):
    """Show the logs of a project or service"""
    try:
        app.ensure_docker()
        target = app.project(project)
        returncode = app.manager.follow_logs(target, service, follow)
    except KeyboardInterrupt:
        return
    except ComposeCtlError as e:
        ui.print_error(e)
        sys.exit(1)
    if returncode != 0:
        sys.exit(returncode)


@cli.command()
@click.pass_obj
def dashboard(app: ComposeCtl):
    """Launch the interactive dashboard"""
    try:
        app.ensure_docker()
        projects = app.projects()
        with ui.working("Querying projects..."):
            for project in projects:
                app.manager.refresh(project)
    except ComposeCtlError as e:
        ui.print_error(e)
        sys.exit(1)

    Dashboard(DashboardState(projects, app.manager)).run()


@cli.command()
@click.argument('action', type=click.Choice(['start', 'stop', 'status']))
@click.pass_obj
def daemon(app: ComposeCtl, action: str):
    """Check, start or stop the docker daemon"""
    if not app.daemon.is_installed():
        ui.print_error("Docker is not installed")
        console.print(f"Download Docker: {DOCKER_INSTALL_URL}")
        return

    running = app.daemon.is_running()
    try:
        if action == 'status':
            if running:
                ui.print_success("Docker daemon is running")
            else:
                ui.print_warning("Docker daemon is stopped")
        elif action == 'start':
            if running:
                ui.print_info("Docker daemon is already running")
                return
            ui.print_info("Starting docker daemon...")
            app.daemon.start()
            ui.print_success("Docker daemon started")
        elif action == 'stop':
            if not running:
                ui.print_info("Docker daemon is already stopped")
                return
            ui.print_info("Stopping docker daemon...")
            app.daemon.stop()
            ui.print_success("Docker daemon stopped")
    except ComposeCtlError as e:
        ui.print_error(e)
        sys.exit(1)


@cli.command()
@click.option('--lines', '-n', default=50, help='Number of lines to show')
def show_logs(lines: int):
    """Show composectl logs"""
    log_file = get_log_file()
    if not log_file or not log_file.exists():
        ui.print_warning("No log file found")
        return
    try:
        with open(log_file) as f:
            content = f.readlines()
    except OSError as e:
        ui.print_error(e)
        sys.exit(1)
    for line in content[-lines:]:
        console.print(line.rstrip(), markup=False, highlight=False)


@cli.command()
def clear_logs():
    """Clear composectl logs"""
    log_file = get_log_file()
    if not log_file:
        ui.print_warning("No log file found")
        return
    try:
        with open(log_file, 'w'):
            pass
    except OSError as e:
        ui.print_error(e)
        sys.exit(1)
    ui.print_success("Logs cleared successfully")


# Command descriptions for help display
COMMANDS = {
    'start <project>': 'Build and start a project',
    'stop <project>': 'Stop a project and remove its containers',
    'restart <project> [service]': 'Restart a project or service (no rebuild)',
    'status [project]': 'Show status (all projects, or one in detail)',
    'logs <project> [service] [-f]': 'Show logs',
    'daemon <start|stop|status>': 'Manage the docker daemon',
    'dashboard': 'Launch the interactive dashboard',
    'show-logs': 'Show composectl logs',
    'clear-logs': 'Clear composectl logs',
}

if __name__ == '__main__':
    cli()
