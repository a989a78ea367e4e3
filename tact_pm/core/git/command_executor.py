"""Safe Git command execution only"""
import asyncio
import os
import subprocess
from pathlib import Path
from typing import List, Optional

from tact_pm.infrastructure.logging import get_logger

from .git_types import CommandResult, GitCommandError, GitNotFoundError, GitSecurityError

logger = get_logger(__name__)


class GitCommandExecutor:
    """Handles Git command execution only"""

    # Whitelisted Git commands
    ALLOWED_COMMANDS = {
        'clone', 'checkout', 'fetch', 'rev-parse'
    }

    def __init__(self, git_binary: str = 'git'):
        """
        Initialize executor

        Args:
            git_binary: Path to git binary
        """
        self.git_binary = git_binary

    async def execute(
        self,
        args: List[str],
        cwd: Optional[Path] = None,
        check: bool = True
    ) -> CommandResult:
        """
        Execute Git command safely

        Args:
            args: Git command arguments (without 'git')
            cwd: Working directory
            check: Raise on non-zero exit code

        Returns:
            CommandResult with output

        Raises:
            GitSecurityError: If command is not allowed
            GitCommandError: If command fails and check is set
            GitNotFoundError: If the git binary cannot be launched
        """
        # Validate command
        if not args or args[0] not in self.ALLOWED_COMMANDS:
            raise GitSecurityError(f"Command not allowed: {args[0] if args else 'empty'}")

        self._validate_args_security(args)

        cmd = [self.git_binary] + args

        cmd_env = os.environ.copy()

        # Never block on credential prompts
        cmd_env.update({
            'GIT_TERMINAL_PROMPT': '0',
            'LC_ALL': 'C',
        })

        logger.debug("git_command_starting", command=args[0], cwd=str(cwd) if cwd else None)

        try:
            process = await asyncio.create_subprocess_exec(
                *cmd,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                cwd=cwd,
                env=cmd_env
            )
        except FileNotFoundError:
            raise GitNotFoundError(self.git_binary)

        stdout, stderr = await process.communicate()

        result = CommandResult(
            exit_code=process.returncode,
            stdout=stdout,
            stderr=stderr
        )

        logger.debug("git_command_completed", command=args[0], exit_code=result.exit_code)

        if check and not result.success:
            raise GitCommandError(
                ' '.join(args),
                result.exit_code,
                stderr.decode('utf-8', errors='replace')
            )

        return result

    def _validate_args_security(self, args: List[str]) -> None:
        """
        Validate command arguments for security

        Args:
            args: Command arguments to validate

        Raises:
            GitSecurityError: If arguments are unsafe
        """
        dangerous_chars = ['\n', '\r', '\x00']

        for arg in args:
            for char in dangerous_chars:
                if char in arg:
                    raise GitSecurityError(f"Unsafe character {char!r} in argument: {arg!r}")

            # Options carrying values could reconfigure git (e.g. --upload-pack=...)
            if arg.startswith('--') and '=' in arg:
                raise GitSecurityError(f"Unsafe option: {arg}")
