"""Module checkout handling"""
from .fetcher import RepositoryFetcher
from .layout import (
    MANIFEST_FILE,
    MODULE_CONFIG_FILE,
    REQUIRED_ENTRIES,
    SOURCES_DIR,
    STRIPPED_ENTRIES,
    LayoutValidationResult,
    ModuleLayout
)
from .path_resolver import ModulePathResolver

__all__ = [
    'RepositoryFetcher',
    'ModuleLayout',
    'LayoutValidationResult',
    'ModulePathResolver',
    'MANIFEST_FILE',
    'MODULE_CONFIG_FILE',
    'SOURCES_DIR',
    'REQUIRED_ENTRIES',
    'STRIPPED_ENTRIES'
]
