"""Git access for cloning and tracking modules"""
from .client import GitClient, VCSClient
from .command_executor import GitCommandExecutor
from .git_types import (
    CommandResult,
    GitError,
    GitCommandError,
    GitSecurityError,
    GitNotFoundError
)

__all__ = [
    'GitClient',
    'VCSClient',
    'GitCommandExecutor',
    'CommandResult',
    'GitError',
    'GitCommandError',
    'GitSecurityError',
    'GitNotFoundError'
]
