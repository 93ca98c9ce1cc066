"""
Configuration file handling for composectl.

The configuration lives in a YAML file (by default
``~/.composectl/projects.yml``)::

    root: ~/devwww/docker
    projects:
      shop:
        path: ~/work/shop          # optional, for projects outside root
        services:
          - name: web
            health_check: http://localhost:8080/health
        env:
          APP_ENV: dev
"""
import logging
import os
import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from dotenv import dotenv_values

from .exceptions import ConfigError
from .utils import default_config_path

logger = logging.getLogger('composectl.config')

DEFAULT_ROOT = '~/devwww/docker'
ENV_FILENAME = '.env'


@dataclass
class ServiceConfig:
    name: str
    health_check: str = ''


@dataclass
class ProjectConfig:
    path: str = ''
    services: List[ServiceConfig] = field(default_factory=list)
    env: Dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, name: str, data: Optional[Dict[str, Any]]) -> 'ProjectConfig':
        data = data or {}
        if not isinstance(data, dict):
            raise ConfigError(f"Project '{name}' must be a mapping")

        services = []
        for entry in data.get('services') or []:
            if isinstance(entry, str):
                services.append(ServiceConfig(name=entry))
            elif isinstance(entry, dict) and entry.get('name'):
                services.append(ServiceConfig(
                    name=str(entry['name']),
                    health_check=str(entry.get('health_check') or '')
                ))
            else:
                raise ConfigError(f"Invalid service entry in project '{name}': {entry!r}")

        env = data.get('env') or {}
        if not isinstance(env, dict):
            raise ConfigError(f"'env' of project '{name}' must be a mapping")

        return cls(
            path=str(data.get('path') or ''),
            services=services,
            env={str(k): str(v) for k, v in env.items()}
        )

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {}
        if self.path:
            data['path'] = self.path
        if self.services:
            data['services'] = []
            for service in self.services:
                entry = {'name': service.name}
                if service.health_check:
                    entry['health_check'] = service.health_check
                data['services'].append(entry)
        if self.env:
            data['env'] = dict(self.env)
        return data


@dataclass
class Config:
    root: str = DEFAULT_ROOT
    projects: Dict[str, ProjectConfig] = field(default_factory=dict)

    def get_project_config(self, name: str) -> ProjectConfig:
        return self.projects.get(name) or ProjectConfig()

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> 'Config':
        data = data or {}
        if not isinstance(data, dict):
            raise ConfigError("Configuration must be a mapping")

        projects = data.get('projects') or {}
        if not isinstance(projects, dict):
            raise ConfigError("'projects' must be a mapping of project names")

        return cls(
            root=str(data.get('root') or DEFAULT_ROOT),
            projects={
                str(name): ProjectConfig.from_dict(str(name), value)
                for name, value in projects.items()
            }
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'root': self.root,
            'projects': {name: cfg.to_dict() for name, cfg in self.projects.items()}
        }


@dataclass
class Settings:
    """Process-wide settings resolved once at startup."""
    config_path: Path
    root: Path
    config: Config

    @property
    def log_dir(self) -> Path:
        return self.config_path.parent / 'logs'


def load_config(path: Path) -> Config:
    """Load the configuration; a missing file yields the defaults."""
    path = Path(path)
    if not path.exists():
        logger.debug(f"No configuration at {path}, using defaults")
        return Config()

    try:
        with open(path) as f:
            return Config.from_dict(yaml.safe_load(f))
    except yaml.YAMLError as e:
        raise ConfigError(f"Failed to parse configuration file {path}: {e}")
    except OSError as e:
        raise ConfigError(f"Failed to read configuration file {path}: {e}")


def save_config(config: Config, path: Path) -> None:
    """Write the configuration atomically."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    temp_fd, temp_path = tempfile.mkstemp(
        prefix=f"{path.stem}_",
        suffix='.yml',
        dir=path.parent
    )
    try:
        with os.fdopen(temp_fd, 'w') as temp_file:
            yaml.safe_dump(config.to_dict(), temp_file, sort_keys=False, default_flow_style=False)
        os.replace(temp_path, path)
    except Exception as e:
        if os.path.exists(temp_path):
            os.unlink(temp_path)
        logger.error(f"Error writing to {path}: {e}")
        raise


def ensure_default_config(path: Path) -> bool:
    """Create the configuration file with defaults if missing.

    Returns True when a new file was written.
    """
    path = Path(path)
    if path.exists():
        return False
    save_config(Config(), path)
    logger.info(f"Created default configuration at {path}")
    return True


def load_settings(config_path: Optional[Path] = None, root: Optional[Path] = None) -> Settings:
    """Resolve config file and discovery root; explicit arguments win."""
    config_path = Path(config_path) if config_path else default_config_path()
    config = load_config(config_path)
    root_path = Path(root) if root else Path(config.root)
    return Settings(
        config_path=config_path.expanduser(),
        root=root_path.expanduser(),
        config=config
    )


def load_project_env(project_path: Path, overrides: Optional[Dict[str, str]] = None) -> Dict[str, str]:
    """Read a project's .env file and apply configured overrides on top."""
    env: Dict[str, str] = {}
    env_file = Path(project_path) / ENV_FILENAME
    if env_file.is_file():
        env.update({k: v for k, v in dotenv_values(env_file).items() if v is not None})
    if overrides:
        env.update(overrides)
    return env
