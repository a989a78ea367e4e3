"""Application services: package lifecycle and workspace wiring."""
from .package_manager import PackageManager
from .workspace import WorkspaceManager

__all__ = ["PackageManager", "WorkspaceManager"]
