"""Expected layout of a Tact module checkout"""
from dataclasses import dataclass
from pathlib import Path
from typing import List, Tuple

from tact_pm.core.models import ModuleManifest
from tact_pm.infrastructure.filesystem import DirectoryManager, FilesystemError, JsonFileStore

MANIFEST_FILE = 'package.json'
MODULE_CONFIG_FILE = 'tact.config.json'
SOURCES_DIR = 'sources/'

# Entries ending in "/" must be directories
REQUIRED_ENTRIES: Tuple[str, ...] = (MANIFEST_FILE, MODULE_CONFIG_FILE, SOURCES_DIR)

STRIPPED_ENTRIES: Tuple[str, ...] = (
    'package-lock.json',
    'yarn.lock',
    'pnpm-lock.yaml',
    'bun.lockb',
    '.github',
    '.gitlab-ci.yml',
    '.travis.yml',
    '.env',
    '.env.example',
    'tests',
    'test',
    '__tests__',
    'jest.config.js',
    'jest.config.ts',
    '.eslintrc.js',
    '.eslintrc.json',
    '.prettierrc',
    'tsconfig.json',
)


@dataclass
class LayoutValidationResult:
    """Result of checkout layout validation"""
    is_valid: bool
    missing: List[str]


class ModuleLayout:
    """Validates, normalizes and trims a freshly cloned module"""

    def validate(self, module_path: Path) -> LayoutValidationResult:
        missing = []
        for entry in REQUIRED_ENTRIES:
            target = module_path / entry.rstrip('/')
            present = target.is_dir() if entry.endswith('/') else target.is_file()
            if not present:
                missing.append(entry)
        return LayoutValidationResult(not missing, missing)

    async def normalize_manifest(self, module_path: Path, alias: str) -> ModuleManifest:
        """Fill in name/version defaults and force ``private``"""
        store = JsonFileStore(module_path / MANIFEST_FILE)
        data = await store.read() if store.exists else {}
        if not isinstance(data, dict):
            raise FilesystemError(f"{store.path} must contain a JSON object")

        manifest = ModuleManifest.model_validate(data).normalized(alias)
        await store.write(manifest.to_json_dict())
        return manifest

    async def strip(self, module_path: Path) -> List[str]:
        """Delete non-essential files, returning the entries removed"""
        directories = DirectoryManager(module_path)
        removed = []
        for entry in STRIPPED_ENTRIES:
            if await directories.delete_entry(Path(entry)):
                removed.append(entry)
        return removed
