"""Child process execution for the workspace dependency runner"""

import asyncio
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Sequence

from tact_pm.infrastructure.logging import get_logger

logger = get_logger(__name__)


class ProcessLaunchError(OSError):
    """The command could not be started at all"""

    def __init__(self, command: str, reason: str):
        super().__init__(f"Failed to start '{command}': {reason}")
        self.command = command
        self.reason = reason


class ProcessRunner(ABC):
    """Runs one command to completion and reports its exit code"""

    @abstractmethod
    async def run(self, command: str, args: Sequence[str], cwd: Path) -> int:
        pass


class SubprocessRunner(ProcessRunner):
    """Runs commands with the parent's stdin/stdout/stderr attached"""

    async def run(self, command: str, args: Sequence[str], cwd: Path) -> int:
        logger.info("process_starting", command=command, args=list(args), cwd=str(cwd))

        try:
            # None for every stream means inherit from this process
            process = await asyncio.create_subprocess_exec(
                command,
                *args,
                stdin=None,
                stdout=None,
                stderr=None,
                cwd=str(cwd),
            )
        except OSError as e:
            raise ProcessLaunchError(command, e.strerror or str(e))

        return_code = await process.wait()

        logger.info("process_completed", command=command, return_code=return_code)
        return return_code
