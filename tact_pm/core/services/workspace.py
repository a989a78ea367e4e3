"""Workspace wiring of installed modules into the root package.json.

Installed modules become npm workspaces of the project so that one
``npm install`` pulls in every module's dependencies and module scripts can
be dispatched with ``npm run --workspace``.
"""

from pathlib import Path
from typing import Dict, Optional

from pydantic import ValidationError

from tact_pm.core.exceptions import FetchError, WorkspaceError
from tact_pm.core.models import ModuleManifest, WorkspaceConfig
from tact_pm.core.repository import MANIFEST_FILE, ModulePathResolver
from tact_pm.infrastructure.filesystem import FilesystemError, JsonFileStore
from tact_pm.infrastructure.logging import get_logger
from tact_pm.infrastructure.process_runner import (ProcessLaunchError,
                                                   ProcessRunner,
                                                   SubprocessRunner)

logger = get_logger(__name__)


class WorkspaceManager:
    """Owns the root workspace manifest and delegates to the dependency runner."""

    def __init__(
        self,
        root_path: Path,
        modules_dir: str = "tact_modules",
        manifest_name: str = "package.json",
        runner: Optional[ProcessRunner] = None,
        runner_command: str = "npm",
    ):
        self.root_path = Path(root_path)
        self.modules_dir = modules_dir.strip("/")
        self.paths = ModulePathResolver(self.root_path / self.modules_dir)
        self.store = JsonFileStore(self.root_path / manifest_name)
        self.runner = runner or SubprocessRunner()
        self.runner_command = runner_command
        self.config = WorkspaceConfig()

    @property
    def config_path(self) -> Path:
        return self.store.path

    async def initialize(self) -> WorkspaceConfig:
        """Load the root manifest, or create it with defaults."""
        try:
            if self.store.exists:
                data = await self.store.read()
                if not isinstance(data, dict):
                    raise WorkspaceError(f"{self.config_path.name} must contain a JSON object")
                self.config = WorkspaceConfig.model_validate(data)
            else:
                self.config = WorkspaceConfig()
                await self.store.write(self.config.to_json_dict())
                logger.info("workspace_created", path=str(self.config_path))
        except WorkspaceError as e:
            raise WorkspaceError(f"Failed to initialize workspace: {e.message}")
        except (FilesystemError, ValidationError) as e:
            raise WorkspaceError(f"Failed to initialize workspace: {e}")

        return self.config

    def _workspace_entry(self, name: str) -> str:
        try:
            self.paths.validate_alias(name)
        except FetchError as e:
            raise WorkspaceError(e.message)
        return f"{self.modules_dir}/{name}"

    async def add_module(self, name: str) -> bool:
        """Register a module as workspace member and local dependency.

        Returns False when the module was already registered.
        """
        entry = self._workspace_entry(name)
        if entry in self.config.workspaces:
            return False

        await self._update_module_manifest(name)
        self.config.workspaces.append(entry)
        self.config.dependencies = {
            **self.config.dependencies,
            name: f"file:./{entry}",
        }
        await self._save_config()

        logger.info("workspace_module_added", module=name)
        return True

    async def remove_module(self, name: str) -> None:
        """Drop a module from workspaces and dependencies. Always persists."""
        entry = f"{self.modules_dir}/{name}"
        self.config.workspaces = [wp for wp in self.config.workspaces if wp != entry]
        self.config.dependencies.pop(name, None)
        await self._save_config()

        logger.info("workspace_module_removed", module=name)

    async def _update_module_manifest(self, name: str) -> ModuleManifest:
        store = JsonFileStore(self.paths.module_path(name) / MANIFEST_FILE)

        try:
            data = await store.read() if store.exists else {}
            if not isinstance(data, dict):
                raise WorkspaceError(f"{store.path} must contain a JSON object")
            manifest = ModuleManifest.model_validate(data).normalized(name)
            await store.write(manifest.to_json_dict())
        except WorkspaceError as e:
            raise WorkspaceError(f"Failed to update module package.json: {e.message}")
        except (FilesystemError, ValidationError) as e:
            raise WorkspaceError(f"Failed to update module package.json: {e}")

        logger.debug("module_manifest_updated", module=name)
        return manifest

    async def _save_config(self) -> None:
        try:
            await self.store.write(self.config.to_json_dict())
        except FilesystemError as e:
            raise WorkspaceError(f"Failed to save workspace config: {e}")

    async def module_scripts(self, module_name: str) -> Dict[str, str]:
        """Scripts declared by an installed module."""
        module_path = self.root_path / self._workspace_entry(module_name)
        if not module_path.is_dir():
            raise WorkspaceError(f"Module {module_name} not found")

        try:
            data = await JsonFileStore(module_path / MANIFEST_FILE).read()
            return ModuleManifest.model_validate(data).scripts
        except (FilesystemError, ValidationError) as e:
            raise WorkspaceError(f"Failed to read module package.json: {e}")

    async def run_module_script(self, module_name: str, script: str) -> None:
        """Run a module script through the dependency runner."""
        try:
            scripts = await self.module_scripts(module_name)
            if script not in scripts:
                raise WorkspaceError(f"Script '{script}' not found in module {module_name}")

            await self._run(
                ["run", script, "--workspace", module_name],
                failure=f"Script '{script}' failed",
            )
        except WorkspaceError as e:
            raise WorkspaceError(f"Failed to run script: {e.message}", exit_code=e.exit_code)
        except ProcessLaunchError as e:
            raise WorkspaceError(f"Failed to run script: {e}")

    async def install_dependencies(self) -> None:
        """Install dependencies of the root project and all workspaces."""
        try:
            await self._run(["install"], failure=f"{self.runner_command} install failed")
        except ProcessLaunchError as e:
            raise WorkspaceError(f"Failed to install dependencies: {e}")

    async def _run(self, args: list, failure: str) -> None:
        code = await self.runner.run(self.runner_command, args, self.root_path)

        if code != 0:
            raise WorkspaceError(f"{failure} with code {code}", exit_code=code)
