"""Docker installation and daemon checks."""
import logging
import platform
from typing import Optional

from .exceptions import CommandExecutionError, DockerNotAvailable, UnsupportedPlatform
from .runner import CommandRunner

logger = logging.getLogger('composectl.daemon')

DOCKER_INSTALL_URL = 'https://www.docker.com/products/docker-desktop'


class DockerDaemon:
    """Checks for and controls the local docker daemon via the CLI."""

    def __init__(self, runner: Optional[CommandRunner] = None, system: Optional[str] = None):
        self.runner = runner or CommandRunner()
        self.system = system or platform.system()

    def _succeeds(self, *args: str) -> bool:
        try:
            return self.runner.run(list(args)).returncode == 0
        except CommandExecutionError:
            return False

    def is_installed(self) -> bool:
        return self._succeeds('docker', '--version')

    def is_running(self) -> bool:
        return self._succeeds('docker', 'info')

    def ensure_running(self) -> None:
        """Raise DockerNotAvailable unless docker is installed and up."""
        if not self.is_installed():
            raise DockerNotAvailable(f"Docker is not installed. See {DOCKER_INSTALL_URL}")
        if not self.is_running():
            raise DockerNotAvailable("Docker daemon is not running. Use: composectl daemon start")

    def start(self) -> None:
        logger.info(f"Starting docker daemon on {self.system}")
        if self.system == 'Darwin':
            self._check(['open', '-a', 'Docker'])
        elif self.system == 'Linux':
            self._check(['sudo', 'systemctl', 'start', 'docker'], interactive=True)
        elif self.system == 'Windows':
            self._check(['powershell', '-Command', 'Start-Process Docker'])
        else:
            raise UnsupportedPlatform(self.system)

    def stop(self) -> None:
        logger.info(f"Stopping docker daemon on {self.system}")
        if self.system == 'Darwin':
            try:
                self._check(['osascript', '-e', 'quit application "Docker Desktop"'])
            except DockerNotAvailable as e:
                logger.warning(f"osascript failed, falling back to killall: {e}")
                self._check(['killall', 'Docker'])
        elif self.system == 'Linux':
            self._check(['sudo', 'systemctl', 'stop', 'docker'], interactive=True)
        elif self.system == 'Windows':
            self._check(['powershell', '-Command', 'Stop-Process -Name Docker'])
        else:
            raise UnsupportedPlatform(self.system)

    def _check(self, args, interactive: bool = False) -> None:
        # sudo may prompt for a password, so it gets the terminal
        try:
            if interactive:
                returncode, stderr = self.runner.stream(args), ''
            else:
                result = self.runner.run(args)
                returncode, stderr = result.returncode, result.stderr.strip()
        except CommandExecutionError as e:
            raise DockerNotAvailable(str(e)) from e

        if returncode != 0:
            message = f"{' '.join(args)} exited with status {returncode}"
            if stderr:
                message = f"{message}: {stderr}"
            raise DockerNotAvailable(message)
