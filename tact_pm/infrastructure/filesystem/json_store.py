"""JSON document persistence module."""
import json
import tempfile
from pathlib import Path
from typing import Any

import aiofiles
import aiofiles.os


class JsonFileStore:
    """Reads and rewrites whole JSON documents."""

    def __init__(self, path: Path, indent: int = 2):
        self.path = Path(path)
        self.indent = indent

    @property
    def exists(self) -> bool:
        return self.path.is_file()

    async def read(self) -> Any:
        """Load and parse the document."""
        try:
            async with aiofiles.open(self.path, "r", encoding="utf-8") as f:
                content = await f.read()
        except FileNotFoundError:
            raise FilesystemError(f"File not found: {self.path}")
        except OSError as e:
            raise FilesystemError(f"Failed to read {self.path}: {e}")

        try:
            return json.loads(content)
        except json.JSONDecodeError as e:
            raise FilesystemError(f"Invalid JSON in {self.path}: {e}")

    async def write(self, data: Any) -> None:
        """Replace the document with ``data``."""
        content = json.dumps(data, indent=self.indent, ensure_ascii=False) + "\n"
        await self.write_text(content)

    async def write_text(self, content: str) -> None:
        """Write raw text through a temporary file and rename it into place."""
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)

            with tempfile.NamedTemporaryFile(
                dir=self.path.parent,
                prefix=f".{self.path.name}.",
                delete=False
            ) as tmp_file:
                tmp_path = Path(tmp_file.name)

            try:
                async with aiofiles.open(tmp_path, "w", encoding="utf-8") as f:
                    await f.write(content)
                await aiofiles.os.replace(tmp_path, self.path)
            except BaseException:
                tmp_path.unlink(missing_ok=True)
                raise

        except PermissionError:
            raise FilesystemError(f"Permission denied: {self.path}")
        except OSError as e:
            raise FilesystemError(f"Failed to write {self.path}: {e}")


class FilesystemError(Exception):
    """Filesystem operation error."""
    pass
