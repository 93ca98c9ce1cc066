"""Custom exceptions for composectl."""
from typing import Sequence


class ComposeCtlError(Exception):
    """Base exception for all composectl errors."""
    pass


class CommandExecutionError(ComposeCtlError):
    """Raised when an external program cannot be spawned at all."""
    def __init__(self, command: Sequence[str], error: Exception):
        self.command = list(command)
        self.error = error
        super().__init__(f"Failed to execute {self.command[0]}: {error}")


class ComposeQueryError(ComposeCtlError):
    """Raised when a docker / docker-compose query fails."""
    def __init__(self, message: str, stderr: str = ''):
        self.stderr = stderr.strip()
        if self.stderr:
            message = f"{message}: {self.stderr}"
        super().__init__(message)


class ComposeCommandError(ComposeCtlError):
    """Raised when a lifecycle command (build/up/down/restart) exits nonzero."""
    def __init__(self, action: str, project: str, returncode: int, stderr: str = ''):
        self.action = action
        self.project = project
        self.returncode = returncode
        self.stderr = stderr.strip()
        message = f"Failed to {action} project {project} (exit status {returncode})"
        if self.stderr:
            message = f"{message}\n{self.stderr}"
        super().__init__(message)


class ProjectNotFound(ComposeCtlError):
    """Raised when no discovered project carries the requested name."""
    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Project '{name}' not found")


class DiscoveryRootNotFound(ComposeCtlError):
    """Raised when the projects root directory does not exist."""
    def __init__(self, path):
        self.path = path
        super().__init__(f"Projects directory not found: {path}")


class ConfigError(ComposeCtlError):
    """Raised when the configuration file cannot be read or parsed."""
    pass


class DockerNotAvailable(ComposeCtlError):
    """Raised when docker is not installed or its daemon is not running."""
    pass


class UnsupportedPlatform(ComposeCtlError):
    """Raised when the docker daemon cannot be controlled on this OS."""
    def __init__(self, system: str):
        self.system = system
        super().__init__(f"Unsupported operating system: {system}")
