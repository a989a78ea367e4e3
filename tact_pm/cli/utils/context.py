"""CLI context management."""

from dataclasses import dataclass, field
from typing import Optional

from rich.console import Console

from tact_pm.cli.utils.output import OutputFormatter
from tact_pm.core.config import Settings
from tact_pm.core.services import PackageManager, WorkspaceManager


@dataclass
class CLIContext:
    """Context object passed through CLI commands."""

    debug: bool
    settings: Settings
    formatter: OutputFormatter
    console: Console
    _package_manager: Optional[PackageManager] = field(default=None, repr=False)
    _workspace_manager: Optional[WorkspaceManager] = field(default=None, repr=False)

    @property
    def package_manager(self) -> PackageManager:
        if self._package_manager is None:
            self._package_manager = PackageManager(self.settings)
        return self._package_manager

    @property
    def workspace_manager(self) -> WorkspaceManager:
        if self._workspace_manager is None:
            self._workspace_manager = WorkspaceManager(
                self.settings.project_root,
                modules_dir=self.settings.modules_dir,
                manifest_name=self.settings.workspace_manifest,
                runner_command=self.settings.runner_command,
            )
        return self._workspace_manager
