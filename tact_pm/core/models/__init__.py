from tact_pm.core.models.manifest import ModuleManifest, WorkspaceConfig
from tact_pm.core.models.package import (AliasMap, InstalledPackage,
                                         PackageState, UpdateResult,
                                         UpdateStatus)

__all__ = [
    "AliasMap",
    "InstalledPackage",
    "PackageState",
    "UpdateResult",
    "UpdateStatus",
    "ModuleManifest",
    "WorkspaceConfig",
]
