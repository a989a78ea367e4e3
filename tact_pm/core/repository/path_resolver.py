"""Module path calculation and security only"""
import re
from pathlib import Path

from tact_pm.core.exceptions import FetchError


class ModulePathResolver:
    """Maps aliases onto directories below the modules root"""

    ALIAS_PATTERN = re.compile(r'^[A-Za-z0-9][A-Za-z0-9._-]*$')

    def __init__(self, modules_root: Path):
        """
        Args:
            modules_root: Directory holding one subdirectory per alias
        """
        self.modules_root = Path(modules_root)

    def validate_alias(self, alias: str) -> str:
        """
        Ensure alias is a single safe path segment

        Raises:
            FetchError: If the alias could escape the modules root
        """
        if not alias or not self.ALIAS_PATTERN.match(alias) or '..' in alias:
            raise FetchError(f"Invalid alias '{alias}': must be a single path segment")
        return alias

    def module_path(self, alias: str) -> Path:
        """Full path of the module directory for alias"""
        return self.modules_root / self.validate_alias(alias)
