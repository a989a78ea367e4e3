"""Tests for filesystem helpers"""

import json
from pathlib import Path

import pytest

from tact_pm.infrastructure.filesystem import DirectoryManager, FilesystemError, JsonFileStore


class TestJsonFileStore:

    @pytest.mark.asyncio
    async def test_write_creates_parents(self, tmp_path: Path):
        store = JsonFileStore(tmp_path / "a" / "b" / "doc.json")

        await store.write({"name": "tact-project"})

        assert store.path.read_text() == '{\n  "name": "tact-project"\n}\n'
        assert await store.read() == {"name": "tact-project"}
        assert [p.name for p in store.path.parent.iterdir()] == ["doc.json"]

    @pytest.mark.asyncio
    async def test_read_missing(self, tmp_path: Path):
        with pytest.raises(FilesystemError, match="File not found"):
            await JsonFileStore(tmp_path / "missing.json").read()

    @pytest.mark.asyncio
    async def test_non_ascii_preserved(self, tmp_path: Path):
        store = JsonFileStore(tmp_path / "doc.json")

        await store.write({"description": "Жетон"})

        assert "Жетон" in store.path.read_text(encoding="utf-8")
        assert json.loads(store.path.read_text(encoding="utf-8")) == {"description": "Жетон"}


class TestDirectoryManager:

    @pytest.mark.asyncio
    async def test_delete_directory(self, tmp_path: Path):
        (tmp_path / "foo" / "sources").mkdir(parents=True)
        manager = DirectoryManager(tmp_path)

        assert await manager.delete_directory(Path("foo")) is True
        assert await manager.delete_directory(Path("foo")) is False
        assert not (tmp_path / "foo").exists()

    @pytest.mark.asyncio
    async def test_rejects_paths_outside_base(self, tmp_path: Path):
        base = tmp_path / "modules"
        base.mkdir()

        with pytest.raises(FilesystemError, match="outside base directory"):
            await DirectoryManager(base).delete_directory(Path(".."))

        assert base.exists()

    @pytest.mark.asyncio
    async def test_symlink_is_removed_not_followed(self, tmp_path: Path):
        outside = tmp_path / "outside"
        outside.mkdir()
        (outside / "keep.txt").write_text("keep")
        base = tmp_path / "module"
        base.mkdir()
        (base / "tests").symlink_to(outside, target_is_directory=True)

        assert await DirectoryManager(base).delete_entry(Path("tests")) is True

        assert not (base / "tests").exists()
        assert (outside / "keep.txt").is_file()
