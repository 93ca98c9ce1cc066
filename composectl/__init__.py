"""
composectl
A management tool for local docker-compose projects.
"""

# Version information
__version__ = "1.0.0"

# Make key components available at package level
from .core.compose import ComposeManager
from .core.exceptions import ComposeCtlError, ComposeQueryError, ProjectNotFound
from .core.ports import parse_ports
from .core.project import Project, Service
