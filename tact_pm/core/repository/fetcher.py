"""Fresh checkouts of aliased repositories into the modules root"""
from pathlib import Path
from typing import Optional

from pydantic import ValidationError

from tact_pm.core.exceptions import FetchError
from tact_pm.core.git import GitClient, GitError, VCSClient
from tact_pm.infrastructure.filesystem import DirectoryManager, FilesystemError
from tact_pm.infrastructure.logging import get_logger

from .layout import ModuleLayout
from .path_resolver import ModulePathResolver

logger = get_logger(__name__)


class RepositoryFetcher:
    """Clones, validates and trims module repositories.

    Every clone is a fresh checkout: an existing directory for the alias is
    deleted first. A clone that fails layout validation is left on disk for
    inspection.
    """

    def __init__(self, modules_root: Path, vcs: Optional[VCSClient] = None):
        self.paths = ModulePathResolver(modules_root)
        self.vcs = vcs or GitClient()
        self.layout = ModuleLayout()

    @property
    def modules_root(self) -> Path:
        return self.paths.modules_root

    def module_path(self, alias: str) -> Path:
        return self.paths.module_path(alias)

    async def clone(self, url: str, alias: str, commit: Optional[str] = None) -> str:
        """Clone url into the alias directory and return the resolved commit.

        Raises:
            FetchError: on any VCS or filesystem failure, an empty repository
                or missing required layout entries
        """
        try:
            return await self._clone(url, alias, commit)
        except FetchError as e:
            raise FetchError(f"Failed to clone repository: {e.message}", missing=e.missing)
        except (GitError, FilesystemError, ValidationError) as e:
            raise FetchError(f"Failed to clone repository: {e}")

    async def _clone(self, url: str, alias: str, commit: Optional[str]) -> str:
        target_path = self.paths.module_path(alias)

        directories = DirectoryManager(self.modules_root)
        await directories.ensure_directory_exists()
        if await directories.delete_directory(Path(alias)):
            logger.debug("module_directory_replaced", alias=alias, path=str(target_path))

        logger.info("repository_cloning", alias=alias, url=url, commit=commit)
        await self.vcs.clone(url, target_path)

        if commit:
            await self.vcs.checkout(target_path, commit)

        commit_hash = await self.vcs.head_commit(target_path)
        if not commit_hash:
            raise FetchError("Failed to get commit hash: repository has no commits")

        validation = self.layout.validate(target_path)
        if not validation.is_valid:
            raise FetchError(
                f"Missing required files: {', '.join(validation.missing)}",
                missing=validation.missing,
            )

        await self.layout.normalize_manifest(target_path, alias)
        removed = await self.layout.strip(target_path)

        logger.info(
            "repository_cloned",
            alias=alias,
            commit_hash=commit_hash,
            stripped=removed,
        )
        return commit_hash

    async def get_latest_commit_hash(self, repo_path: Path) -> str:
        """HEAD of an existing clone.

        Raises:
            FetchError: if the repository has no commits or git fails
        """
        try:
            commit_hash = await self.vcs.head_commit(Path(repo_path))
        except GitError as e:
            raise FetchError(f"Failed to get latest commit hash: {e}")

        if not commit_hash:
            raise FetchError("Failed to get latest commit hash: repository has no commits")
        return commit_hash

    async def check_for_updates(self, repo_path: Path, current_hash: str) -> bool:
        """Fetch remote refs and report whether upstream moved past current_hash."""
        repo_path = Path(repo_path)
        try:
            await self.vcs.fetch(repo_path)
            latest_hash = await self.vcs.upstream_commit(repo_path)
            if latest_hash is None:
                latest_hash = await self.get_latest_commit_hash(repo_path)
        except FetchError as e:
            raise FetchError(f"Failed to check for updates: {e.message}")
        except GitError as e:
            raise FetchError(f"Failed to check for updates: {e}")

        logger.debug(
            "update_check",
            path=str(repo_path),
            current_hash=current_hash,
            latest_hash=latest_hash,
        )
        return latest_hash != current_hash
