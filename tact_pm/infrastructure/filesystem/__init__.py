"""Filesystem access for state files, manifests and module trees."""
from .directory_manager import DirectoryManager
from .json_store import FilesystemError, JsonFileStore

__all__ = ["DirectoryManager", "FilesystemError", "JsonFileStore"]
