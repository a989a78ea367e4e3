"""Source-control client used by the repository fetcher"""
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional

from .command_executor import GitCommandExecutor
from .git_types import GitSecurityError


class VCSClient(ABC):
    """Narrow interface over the source-control operations tact-pm needs"""

    @abstractmethod
    async def clone(self, url: str, target: Path) -> None:
        """Clone ``url`` into ``target``"""

    @abstractmethod
    async def checkout(self, repo_path: Path, revision: str) -> None:
        """Check out ``revision`` in an existing clone"""

    @abstractmethod
    async def head_commit(self, repo_path: Path) -> Optional[str]:
        """Return the HEAD commit id, or None when there are no commits"""

    @abstractmethod
    async def fetch(self, repo_path: Path) -> None:
        """Fetch remote refs"""

    @abstractmethod
    async def upstream_commit(self, repo_path: Path) -> Optional[str]:
        """Return the commit of the remote default branch after a fetch"""


class GitClient(VCSClient):
    """VCSClient backed by the git binary"""

    UPSTREAM_REF = 'refs/remotes/origin/HEAD'

    def __init__(self, executor: Optional[GitCommandExecutor] = None, git_binary: str = 'git'):
        self.executor = executor or GitCommandExecutor(git_binary)

    async def clone(self, url: str, target: Path) -> None:
        self._reject_option_like(url)
        await self.executor.execute(['clone', '--quiet', '--', url, str(target)])

    async def checkout(self, repo_path: Path, revision: str) -> None:
        self._reject_option_like(revision)
        await self.executor.execute(['checkout', '--quiet', revision], cwd=repo_path)

    async def head_commit(self, repo_path: Path) -> Optional[str]:
        return await self._resolve(repo_path, 'HEAD')

    async def fetch(self, repo_path: Path) -> None:
        await self.executor.execute(['fetch', '--quiet', 'origin'], cwd=repo_path)

    async def upstream_commit(self, repo_path: Path) -> Optional[str]:
        return await self._resolve(repo_path, self.UPSTREAM_REF)

    async def _resolve(self, repo_path: Path, ref: str) -> Optional[str]:
        # rev-parse --verify --quiet exits 1 with no output for a missing ref
        result = await self.executor.execute(
            ['rev-parse', '--verify', '--quiet', f'{ref}^{{commit}}'],
            cwd=repo_path,
            check=False
        )
        if not result.success or not result.text:
            return None
        return result.text

    @staticmethod
    def _reject_option_like(value: str) -> None:
        if not value or value.startswith('-'):
            raise GitSecurityError(f"Refusing option-like argument: {value!r}")
