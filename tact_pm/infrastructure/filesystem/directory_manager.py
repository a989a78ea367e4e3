"""Directory operations management module."""
import asyncio
import shutil
from pathlib import Path

import aiofiles.os

from .json_store import FilesystemError


class DirectoryManager:
    """Handles directory operations below one base directory."""

    def __init__(self, base_path: Path):
        self.base_path = Path(base_path).resolve()

    async def ensure_directory_exists(self, path: Path = Path(".")) -> Path:
        """Create directory (and parents) if missing."""
        full_path = self._resolve_safe_path(path)
        try:
            await aiofiles.os.makedirs(full_path, exist_ok=True)
        except OSError as e:
            raise FilesystemError(f"Failed to create directory: {e}")
        return full_path

    async def delete_directory(self, path: Path) -> bool:
        """Delete a directory tree. Returns False when nothing was there."""
        full_path = self._resolve_safe_path(path)

        if not full_path.exists() and not full_path.is_symlink():
            return False

        await self.delete_entry(full_path)
        return True

    async def delete_entry(self, path: Path) -> bool:
        """Delete a file, symlink or directory tree."""
        full_path = self._resolve_safe_path(path)

        try:
            if full_path.is_dir() and not full_path.is_symlink():
                await self._rmtree_async(full_path)
            elif full_path.exists() or full_path.is_symlink():
                await aiofiles.os.remove(full_path)
            else:
                return False
        except OSError as e:
            raise FilesystemError(f"Failed to delete {full_path}: {e}")

        return True

    def _resolve_safe_path(self, path: Path) -> Path:
        """Resolve path ensuring it's within base directory."""
        path = Path(path)
        if path.is_absolute():
            full_path = path
        else:
            full_path = self.base_path / path

        # Symlinks are deleted, never followed
        if full_path.name in ("", ".."):
            resolved = full_path.resolve()
        else:
            resolved = full_path.parent.resolve() / full_path.name

        try:
            resolved.relative_to(self.base_path)
        except ValueError:
            raise FilesystemError(
                f"Path '{path}' resolves outside base directory"
            )

        return resolved

    async def _rmtree_async(self, path: Path) -> None:
        await asyncio.to_thread(shutil.rmtree, path)
