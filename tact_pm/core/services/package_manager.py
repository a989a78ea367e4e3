"""Package manager: install, update and remove aliased Tact modules.

The manager is the single writer of the package state file. Every mutating
operation rewrites the whole file right after its filesystem side effect;
the two steps are not transactional.
"""

from pathlib import Path
from typing import List, Optional, Tuple

from tact_pm.core.config import Settings
from tact_pm.core.exceptions import FetchError, ManagerError, SyncError, TpmError
from tact_pm.core.models import (AliasMap, InstalledPackage, PackageState,
                                 UpdateResult, UpdateStatus)
from tact_pm.core.models.package import utcnow
from tact_pm.core.repository import RepositoryFetcher
from tact_pm.core.git import GitClient
from tact_pm.core.state import StateStore
from tact_pm.infrastructure.alias_sync import AliasSync
from tact_pm.infrastructure.filesystem import DirectoryManager, FilesystemError
from tact_pm.infrastructure.logging import get_logger

logger = get_logger(__name__)

SYNC_FALLBACK_MESSAGE = "Failed to sync aliases, using local file"


class PackageManager:
    """Orchestrates alias sync, repository fetch and state persistence."""

    def __init__(
        self,
        settings: Settings,
        fetcher: Optional[RepositoryFetcher] = None,
        alias_sync: Optional[AliasSync] = None,
        store: Optional[StateStore] = None,
    ):
        self.settings = settings
        self.fetcher = fetcher or RepositoryFetcher(
            settings.modules_root, GitClient(git_binary=settings.git_binary_path)
        )
        self.alias_sync = alias_sync or AliasSync(
            settings.aliases_path,
            url=settings.aliases_url,
            timeout=settings.http_timeout,
        )
        self.store = store or StateStore(settings.state_path)

        self._aliases: AliasMap = {}
        self._state = PackageState()
        self._initialized = False
        self._synced = False

    @property
    def aliases(self) -> AliasMap:
        return dict(self._aliases)

    @property
    def state(self) -> PackageState:
        return self._state.model_copy(deep=True)

    async def initialize(self) -> None:
        """Sync aliases (falling back to the local cache) and load state.

        Raises:
            ManagerError: if sync fails and there is no local alias cache, or
                the cache or state file cannot be read
        """
        try:
            await self.alias_sync.sync()
            self._synced = True
        except SyncError as e:
            if not self.alias_sync.exists:
                raise ManagerError(f"Failed to initialize: {e.message}")
            logger.warning(
                "alias_sync_failed",
                message=SYNC_FALLBACK_MESSAGE,
                error=e.message,
                fallback=str(self.alias_sync.alias_path),
            )

        await self._load_config()
        self._initialized = True

    async def _load_config(self) -> None:
        try:
            self._aliases = await self.alias_sync.load()
            self._state = await self.store.load()
        except (SyncError, ManagerError) as e:
            raise ManagerError(f"Failed to load config: {e.message}")

    async def _ensure_initialized(self) -> None:
        if not self._initialized:
            await self.initialize()

    async def _save_state(self) -> None:
        await self.store.save(self._state)

    async def sync_aliases(self) -> AliasMap:
        """Refresh the alias cache from the registry and reload it."""
        try:
            await self.alias_sync.sync()
            self._synced = True
            self._aliases = await self.alias_sync.load()
        except SyncError as e:
            raise ManagerError(f"Failed to sync aliases: {e.message}")
        return self.aliases

    async def install(self, alias: str, commit: Optional[str] = None) -> InstalledPackage:
        """Clone alias (optionally pinned to commit) and record it in state."""
        await self._ensure_initialized()

        # One successful sync per manager is enough for a batch of installs
        if not self._synced:
            try:
                await self.sync_aliases()
            except ManagerError as e:
                logger.warning(
                    "alias_sync_failed",
                    message=SYNC_FALLBACK_MESSAGE,
                    error=e.message,
                    fallback=str(self.alias_sync.alias_path),
                )

        url = self._aliases.get(alias)
        if not url:
            raise ManagerError(f'Alias "{alias}" not found in tact-aliases.json')

        try:
            commit_hash = await self.fetcher.clone(url, alias, commit)
        except FetchError as e:
            raise ManagerError(f"Installation failed: {e.message}")

        record = InstalledPackage(
            url=url,
            commit_hash=commit_hash,
            installed_at=utcnow(),
        )
        self._state.set(alias, record)
        await self._save_state()

        logger.info("package_installed", alias=alias, commit_hash=commit_hash, url=url)
        return record

    async def update(self, alias: Optional[str] = None) -> List[UpdateResult]:
        """Re-install aliases whose upstream moved.

        Without an alias every installed package is checked. The first
        failure aborts the rest of the batch.
        """
        await self._ensure_initialized()

        targets = [alias] if alias else self._state.aliases()
        results: List[UpdateResult] = []

        for name in targets:
            record = self._state.get(name)
            if record is None:
                logger.warning("package_not_in_state", alias=name)
                results.append(UpdateResult(alias=name, status=UpdateStatus.SKIPPED))
                continue

            try:
                module_path = self.fetcher.module_path(name)
                has_updates = await self.fetcher.check_for_updates(
                    module_path, record.commit_hash
                )

                if has_updates:
                    updated = await self.install(name)
                    logger.info("package_updated", alias=name, commit_hash=updated.commit_hash)
                    results.append(
                        UpdateResult(
                            alias=name,
                            status=UpdateStatus.UPDATED,
                            commit_hash=updated.commit_hash,
                        )
                    )
                else:
                    logger.info("package_up_to_date", alias=name)
                    results.append(
                        UpdateResult(
                            alias=name,
                            status=UpdateStatus.UP_TO_DATE,
                            commit_hash=record.commit_hash,
                        )
                    )
            except TpmError as e:
                raise ManagerError(f"Update failed for {name}: {e.message}")

        return results

    async def remove(self, alias: str) -> None:
        """Delete the module directory and drop its state entry."""
        await self._ensure_initialized()

        if alias not in self._state:
            raise ManagerError(f'Package "{alias}" is not installed')

        try:
            directories = DirectoryManager(self.fetcher.modules_root)
            module_path = self.fetcher.module_path(alias)
            await directories.delete_directory(Path(module_path.name))

            self._state.discard(alias)
            await self._save_state()
        except (TpmError, FilesystemError) as e:
            message = e.message if isinstance(e, TpmError) else str(e)
            raise ManagerError(f"Failed to remove {alias}: {message}")

        logger.info("package_removed", alias=alias)

    async def list_installed(self) -> List[Tuple[str, InstalledPackage]]:
        await self._ensure_initialized()
        return self._state.items()
