"""Discovery of docker-compose projects on disk."""
import logging
from pathlib import Path
from typing import Iterable, List, Optional

from .config import Config, load_project_env
from .exceptions import DiscoveryRootNotFound, ProjectNotFound
from .project import COMPOSE_FILENAME, Project

logger = logging.getLogger('composectl.discovery')

PROJECT_PREFIX = 'docker-'


def project_name_from_dir(dirname: str) -> str:
    """`docker-MyShop` -> `myshop` (compose project names are lower-case)."""
    if dirname.startswith(PROJECT_PREFIX):
        dirname = dirname[len(PROJECT_PREFIX):]
    return dirname.lower()


class ProjectDiscovery:
    """Finds `docker-*` directories holding a docker-compose.yml."""

    def __init__(self, root: Path, config: Optional[Config] = None):
        self.root = Path(root)
        self.config = config or Config()

    def _make_project(self, name: str, path: Path) -> Project:
        project_config = self.config.get_project_config(name)
        return Project(
            name=name,
            path=path,
            env=load_project_env(path, project_config.env)
        )

    def _scan_root(self) -> List[Project]:
        projects = []
        seen = set()
        for entry in sorted(self.root.iterdir()):
            if not entry.is_dir() or not entry.name.startswith(PROJECT_PREFIX):
                continue
            if not (entry / COMPOSE_FILENAME).is_file():
                logger.debug(f"Skipping {entry}: no {COMPOSE_FILENAME}")
                continue
            name = project_name_from_dir(entry.name)
            if name in seen:
                logger.warning(f"Skipping {entry}: project name '{name}' already taken")
                continue
            seen.add(name)
            projects.append(self._make_project(name, entry))
        return projects

    def _registered(self, taken: Iterable[str]) -> List[Project]:
        taken = set(taken)
        projects = []
        for name, project_config in self.config.projects.items():
            if not project_config.path or name in taken:
                continue
            path = Path(project_config.path).expanduser()
            if not (path / COMPOSE_FILENAME).is_file():
                logger.warning(f"Registered project {name} has no {COMPOSE_FILENAME} in {path}")
                continue
            projects.append(self._make_project(name, path))
            taken.add(name)
        return projects

    def discover(self) -> List[Project]:
        """Return all projects, scanned ones first, then registered ones."""
        if self.root.is_dir():
            projects = self._scan_root()
        elif any(p.path for p in self.config.projects.values()):
            logger.warning(f"Projects directory not found: {self.root}")
            projects = []
        else:
            raise DiscoveryRootNotFound(self.root)

        projects.extend(self._registered(p.name for p in projects))
        logger.debug(f"Discovered {len(projects)} projects in {self.root}")
        return projects


def find_project(projects: Iterable[Project], name: str) -> Project:
    for project in projects:
        if project.name == name:
            return project
    raise ProjectNotFound(name)
