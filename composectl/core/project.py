"""Project and service records."""
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List

COMPOSE_FILENAME = 'docker-compose.yml'


@dataclass
class Service:
    """One logical service of a project, as seen by the container runtime."""
    name: str
    status: str = ''      # running, exited, created
    container: str = ''
    ports: str = ''


@dataclass
class Project:
    """A docker-compose project living in its own directory.

    `running` and `service_count` are transient: they are recomputed on
    every status query and never persisted.
    """
    name: str
    path: Path
    services: List[Service] = field(default_factory=list)
    running: bool = False
    service_count: int = 0
    env: Dict[str, str] = field(default_factory=dict)

    def __post_init__(self):
        self.path = Path(self.path)

    @property
    def compose_path(self) -> Path:
        return self.path / COMPOSE_FILENAME

    def compose_exists(self) -> bool:
        return self.compose_path.is_file()

    def status_string(self) -> str:
        if self.running:
            return f"Running ({self.service_count} services)"
        return "Stopped"
