"""
Project status and service URL reconciliation.

All state comes from the output of docker-compose / docker commands; nothing
here talks to the container runtime directly.
"""
import logging
from typing import Dict, List, Optional, Sequence, Tuple

from .exceptions import CommandExecutionError, ComposeCommandError, ComposeQueryError
from .ports import append_unique, parse_ports
from .project import Project, Service
from .runner import CommandResult, CommandRunner

logger = logging.getLogger('composectl.compose')

COMPOSE_BIN = 'docker-compose'
DOCKER_BIN = 'docker'
PROJECT_LABEL = 'com.docker.compose.project'
SERVICE_LABEL = 'com.docker.compose.service'

SERVICE_PORTS_FORMAT = '{{.Label "%s"}}\t{{.Ports}}' % SERVICE_LABEL
CONTAINERS_FORMAT = '{{.Label "%s"}}\t{{.State}}\t{{.ID}}\t{{.Ports}}' % SERVICE_LABEL

STATUS_STOPPED = "Stopped"
STATUS_RUNNING = "Running ({count} containers)"

ServiceURLMap = Dict[str, List[str]]


def count_containers(output: str) -> int:
    """Count the container ids printed by `docker-compose ps -q`."""
    return len([line for line in output.strip().split('\n') if line.strip()])


def split_service_line(line: str) -> Tuple[str, str]:
    """Split a `service<TAB>ports` line; a missing tab means no ports."""
    service_name, _, ports = line.partition('\t')
    return service_name.strip(), ports


def aggregate_service_urls(output: str) -> ServiceURLMap:
    """Build the service -> URLs map from `docker ps` output lines."""
    urls_by_service: ServiceURLMap = {}
    for line in output.strip().split('\n'):
        if not line.strip():
            continue

        service_name, ports = split_service_line(line)
        urls = parse_ports(ports)
        if not urls:
            continue

        urls_by_service[service_name] = append_unique(
            urls_by_service.get(service_name, []), urls
        )
    return urls_by_service


def order_service_urls(declared: Optional[Sequence[str]], urls: ServiceURLMap) -> ServiceURLMap:
    """Order a URL map for display.

    Declared services come first, in declaration order, each with its
    (possibly empty) URL list. Running services missing from the
    declaration follow in the order they were seen.
    """
    if not declared:
        return {name: list(service_urls) for name, service_urls in urls.items()}

    ordered = {name: list(urls.get(name, [])) for name in declared}
    for name, service_urls in urls.items():
        if name not in ordered:
            ordered[name] = list(service_urls)
    return ordered


def parse_containers(output: str) -> List[Service]:
    """Parse `service<TAB>state<TAB>id<TAB>ports` lines into Service records."""
    services = []
    for line in output.strip().split('\n'):
        if not line.strip():
            continue
        fields = line.split('\t', 3)
        fields.extend([''] * (4 - len(fields)))
        name, status, container, ports = fields
        services.append(Service(
            name=name.strip(),
            status=status.strip(),
            container=container.strip(),
            ports=ports.strip()
        ))
    return services


class ComposeManager:
    """Queries and drives docker-compose projects through the CLI."""

    def __init__(self, runner: Optional[CommandRunner] = None):
        self.runner = runner or CommandRunner()

    def _compose_args(self, project: Project, *args: str) -> List[str]:
        return [COMPOSE_BIN, '-f', str(project.compose_path), '-p', project.name, *args]

    def _label_filter(self, project: Project) -> str:
        return f"label={PROJECT_LABEL}={project.name}"

    # Status

    def _query_container_ids(self, project: Project) -> CommandResult:
        return self.runner.run(
            self._compose_args(project, 'ps', '-q'),
            cwd=project.path,
            env=project.env
        )

    def get_status(self, project: Project) -> Tuple[bool, int, None]:
        """Return (running, container_count, None).

        A failing query is reported as a stopped project: a broken
        descriptor in one project must not abort a sweep over all of them.
        """
        try:
            result = self._query_container_ids(project)
        except CommandExecutionError as e:
            logger.debug(f"Status query for {project.name} could not run: {e}")
            return False, 0, None

        if result.returncode != 0:
            logger.debug(f"Status query for {project.name} failed: {result.stderr.strip()}")
            return False, 0, None

        count = count_containers(result.stdout)
        return count > 0, count, None

    def get_status_detailed(self, project: Project) -> Tuple[bool, int, str]:
        """Return (running, container_count, detail).

        On failure the detail is the command's error output, or the
        execution error when there is none.
        """
        try:
            result = self._query_container_ids(project)
        except CommandExecutionError as e:
            return False, 0, str(e)

        if result.returncode != 0:
            detail = result.stderr.strip() or f"exit status {result.returncode}"
            logger.info(f"Status query for {project.name} failed: {detail}")
            return False, 0, detail

        count = count_containers(result.stdout)
        if count > 0:
            return True, count, STATUS_RUNNING.format(count=count)
        return False, 0, STATUS_STOPPED

    def refresh(self, project: Project, with_services: bool = False) -> Project:
        """Store the current status on the project record."""
        running, count, _ = self.get_status(project)
        project.running = running
        project.service_count = count
        if with_services:
            project.services = self.get_containers(project)
        return project

    # Services and URLs

    def _query(self, args: List[str], project: Project, what: str) -> str:
        try:
            result = self.runner.run(args, cwd=project.path, env=project.env)
        except CommandExecutionError as e:
            raise ComposeQueryError(f"Failed to query {what} for {project.name}: {e}") from e
        if result.returncode != 0:
            raise ComposeQueryError(f"Failed to query {what} for {project.name}", result.stderr)
        return result.stdout

    def get_services(self, project: Project) -> List[str]:
        """Return the services declared in the project's compose file."""
        output = self._query(
            [COMPOSE_BIN, '-f', str(project.compose_path), 'config', '--services'],
            project,
            'services'
        )
        return output.split()

    def get_service_urls(self, project: Project) -> ServiceURLMap:
        """Return local URLs per service for the project's running containers."""
        output = self._query(
            [DOCKER_BIN, 'ps', '--filter', self._label_filter(project),
             '--format', SERVICE_PORTS_FORMAT],
            project,
            'ports'
        )
        return aggregate_service_urls(output)

    def get_containers(self, project: Project) -> List[Service]:
        """Return one Service record per container, stopped ones included."""
        output = self._query(
            [DOCKER_BIN, 'ps', '-a', '--filter', self._label_filter(project),
             '--format', CONTAINERS_FORMAT],
            project,
            'containers'
        )
        return parse_containers(output)

    # Lifecycle

    def _run_lifecycle(self, project: Project, action: str, args: List[str],
                       capture: bool = False) -> Optional[str]:
        cmd = self._compose_args(project, *args)
        logger.info(f"{action.capitalize()} {project.name}: {' '.join(cmd)}")
        if capture:
            result = self.runner.run(cmd, cwd=project.path, env=project.env)
            if result.returncode != 0:
                raise ComposeCommandError(action, project.name, result.returncode, result.stderr)
            return result.stdout

        returncode = self.runner.stream(cmd, cwd=project.path, env=project.env)
        if returncode != 0:
            raise ComposeCommandError(action, project.name, returncode)
        return None

    def start_project(self, project: Project, capture: bool = False) -> None:
        """Build the project's images, then bring it up detached."""
        self._run_lifecycle(project, 'build', ['build'], capture)
        self._run_lifecycle(project, 'start', ['up', '-d'], capture)

    def stop_project(self, project: Project, capture: bool = False) -> None:
        """Stop the project and remove its containers."""
        self._run_lifecycle(project, 'stop', ['down'], capture)

    def restart_service(self, project: Project, service: Optional[str] = None,
                        capture: bool = False) -> None:
        """Restart one service, or the whole project when none is given."""
        args = ['restart']
        if service:
            args.append(service)
        self._run_lifecycle(project, 'restart', args, capture)

    def follow_logs(self, project: Project, service: Optional[str] = None,
                    follow: bool = False) -> int:
        """Stream the project's logs to the terminal."""
        args = ['logs']
        if follow:
            args.append('-f')
        if service:
            args.append(service)
        return self.runner.stream(
            self._compose_args(project, *args),
            cwd=project.path,
            env=project.env
        )
