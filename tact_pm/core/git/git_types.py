"""Git-related type definitions and exceptions"""
from dataclasses import dataclass


@dataclass
class CommandResult:
    """Result of Git command execution"""
    exit_code: int
    stdout: bytes
    stderr: bytes
    
    @property
    def success(self) -> bool:
        return self.exit_code == 0
    
    @property
    def text(self) -> str:
        return self.stdout.decode('utf-8', errors='replace').strip()


# Git-specific exceptions
class GitError(Exception):
    """Base class for Git errors"""
    pass


class GitCommandError(GitError):
    """Git command execution failed"""
    def __init__(self, command: str, exit_code: int, stderr: str):
        super().__init__(f"Git command '{command}' failed with exit code {exit_code}: {stderr.strip()}")
        self.command = command
        self.exit_code = exit_code
        self.stderr = stderr


class GitSecurityError(GitError):
    """Security violation in Git operation"""
    pass


class GitNotFoundError(GitError):
    """Git binary could not be launched"""
    def __init__(self, git_binary: str):
        super().__init__(f"Git binary not found: {git_binary}")
        self.git_binary = git_binary
