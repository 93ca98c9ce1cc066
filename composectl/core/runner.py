"""Execution of external docker / docker-compose commands."""
import logging
import os
import subprocess
from collections import namedtuple
from pathlib import Path
from typing import Dict, Optional, Sequence, Union

from .exceptions import CommandExecutionError

logger = logging.getLogger('composectl.runner')

CommandResult = namedtuple('CommandResult', ['returncode', 'stdout', 'stderr'])

PathLike = Union[str, Path]


class CommandRunner:
    """Runs external programs as blocking subprocesses.

    `run` captures the complete output of a query; `stream` hands the
    terminal to the child process for commands whose output the user
    should see as it happens (build, up, logs -f, ...).
    """

    def _build_env(self, env: Optional[Dict[str, str]]) -> Optional[Dict[str, str]]:
        if not env:
            return None
        env_dict = os.environ.copy()
        env_dict.update(env)
        return env_dict

    def run(self, args: Sequence[str], cwd: Optional[PathLike] = None,
            env: Optional[Dict[str, str]] = None) -> CommandResult:
        """Run a command and capture stdout/stderr as UTF-8 text."""
        logger.debug(f"Running: {' '.join(args)} (cwd={cwd})")
        try:
            process = subprocess.run(
                list(args),
                capture_output=True,
                encoding='utf-8',
                errors='replace',
                cwd=cwd,
                env=self._build_env(env)
            )
        except OSError as e:
            logger.debug(f"Could not execute {args[0]}: {e}")
            raise CommandExecutionError(args, e)

        if process.returncode != 0:
            logger.debug(f"{args[0]} exited with {process.returncode}: {process.stderr.strip()}")
        return CommandResult(process.returncode, process.stdout, process.stderr)

    def stream(self, args: Sequence[str], cwd: Optional[PathLike] = None,
               env: Optional[Dict[str, str]] = None) -> int:
        """Run a command attached to the current terminal, return its exit status."""
        logger.debug(f"Streaming: {' '.join(args)} (cwd={cwd})")
        try:
            process = subprocess.run(list(args), cwd=cwd, env=self._build_env(env))
        except OSError as e:
            raise CommandExecutionError(args, e)
        return process.returncode
