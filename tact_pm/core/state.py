"""Persistence of the installed package state file."""

from pathlib import Path

from pydantic import ValidationError

from tact_pm.core.exceptions import ManagerError
from tact_pm.core.models import PackageState
from tact_pm.infrastructure.filesystem import FilesystemError, JsonFileStore


class StateStore:
    """Loads and rewrites tact-packages.json as a whole."""

    def __init__(self, path: Path):
        self.store = JsonFileStore(path)

    @property
    def path(self) -> Path:
        return self.store.path

    async def load(self) -> PackageState:
        # No state file yet means nothing is installed
        if not self.store.exists:
            return PackageState()

        try:
            data = await self.store.read()
            return PackageState.model_validate(data)
        except FilesystemError as e:
            raise ManagerError(f"Failed to load state: {e}")
        except ValidationError as e:
            raise ManagerError(f"Failed to load state: malformed {self.path.name}: {e}")

    async def save(self, state: PackageState) -> None:
        try:
            await self.store.write(state.to_json_dict())
        except FilesystemError as e:
            raise ManagerError(f"Failed to save state: {e}")
