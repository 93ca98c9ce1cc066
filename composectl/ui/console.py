"""Console UI for composectl."""
from contextlib import contextmanager
from typing import Dict, List, Optional, Sequence

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from composectl.core.project import Project, Service


class ConsoleUI:
    """UI class for console output."""
    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console()

    def print_error(self, error, show_traceback=False):
        """Print error message."""
        self.console.print(f"[red]Error:[/red] {escape(str(error))}")
        if show_traceback:
            self.console.print_exception()

    def print_success(self, message: str):
        self.console.print(f"[green]{escape(message)}[/green]")

    def print_info(self, message: str):
        self.console.print(f"[cyan]{escape(message)}[/cyan]")

    def print_warning(self, message: str):
        self.console.print(f"[yellow]{escape(message)}[/yellow]")

    @contextmanager
    def working(self, message: str):
        """Show a spinner while blocking queries run."""
        with self.console.status(f"[cyan]{escape(message)}[/cyan]", spinner="dots"):
            yield

    def display_commands(self, commands: Dict[str, str]):
        """Display available commands."""
        table = Table(title="Available Commands", show_header=False, box=None)
        table.add_column("Command", style="cyan", no_wrap=True)
        table.add_column("Description")
        for command, description in commands.items():
            table.add_row(command, description)
        self.console.print(table)
        self.console.print("\nUse [cyan]composectl COMMAND --help[/cyan] for more information about a command.\n")

    def display_status_table(self, projects: Sequence[Project]):
        """Display the status of all projects."""
        if not projects:
            self.console.print("[yellow]No projects found[/yellow]")
            return

        table = Table(title="Docker Projects")
        table.add_column("Project", style="cyan", no_wrap=True)
        table.add_column("Status")

        for project in projects:
            color = "green" if project.running else "red"
            table.add_row(
                escape(project.name),
                f"[{color}]{escape(project.status_string())}[/{color}]"
            )
        self.console.print(table)

    def display_project_detail(self, project: Project, running: bool, detail: str,
                               services: List[str], urls: Dict[str, List[str]],
                               containers: Optional[List[Service]] = None):
        """Display the detailed status of one project."""
        color = "green" if running else "red"
        lines = [
            f"Status   : [{color}]{escape(detail)}[/{color}]",
        ]
        if services:
            lines.append(f"Services : {escape(', '.join(services))}")
        if urls:
            lines.append("URLs     :")
            for service, service_urls in urls.items():
                if not service_urls:
                    lines.append(f"  - {escape(service)} => [dim]no published port[/dim]")
                for url in service_urls:
                    lines.append(f"  - {escape(service)} => [link={url}]{escape(url)}[/link]")
        lines.append(f"Path     : {escape(str(project.path))}")
        lines.append(f"Compose  : {escape(str(project.compose_path))}")
        if not project.compose_exists():
            lines.append(f"[yellow]{escape(project.compose_path.name)} is missing![/yellow]")

        self.console.print(Panel.fit(
            "\n".join(lines),
            title=f"[bold cyan]{escape(project.name)}[/bold cyan]"
        ))

        if containers:
            self.display_containers(containers)

    def display_containers(self, containers: Sequence[Service]):
        table = Table(title="Containers")
        table.add_column("Service", style="cyan")
        table.add_column("State")
        table.add_column("Container", style="blue")
        table.add_column("Ports", style="magenta")

        for service in containers:
            state_color = "green" if service.status == "running" else "yellow"
            table.add_row(
                escape(service.name),
                f"[{state_color}]{escape(service.status)}[/{state_color}]",
                escape(service.container[:12]),
                escape(service.ports)
            )
        self.console.print(table)
