"""Alias registry synchronisation.

The registry is a JSON object mapping alias -> repository URL, published as
a raw file. The local copy is only a cache: every successful sync replaces
it wholesale.
"""

import json
from pathlib import Path
from typing import Optional

import httpx

from tact_pm.core.config import DEFAULT_ALIASES_URL
from tact_pm.core.exceptions import SyncError
from tact_pm.core.models import AliasMap
from tact_pm.infrastructure.filesystem import FilesystemError, JsonFileStore
from tact_pm.infrastructure.logging import get_logger

logger = get_logger(__name__)


def parse_alias_document(content: str) -> AliasMap:
    try:
        data = json.loads(content)
    except json.JSONDecodeError:
        raise SyncError("Invalid JSON in remote aliases file")
    return validate_alias_map(data)


def validate_alias_map(data) -> AliasMap:
    if not isinstance(data, dict) or not all(
        isinstance(key, str) and isinstance(value, str) for key, value in data.items()
    ):
        raise SyncError("Aliases file must be a JSON object of alias -> URL strings")

    return data


class AliasSync:
    """Fetches the remote alias registry and caches it locally."""

    def __init__(
        self,
        alias_path: Path,
        url: str = DEFAULT_ALIASES_URL,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.alias_path = Path(alias_path)
        self.url = url
        self.timeout = timeout
        self.transport = transport
        self.store = JsonFileStore(self.alias_path)

    @property
    def exists(self) -> bool:
        return self.store.exists

    async def sync(self) -> AliasMap:
        """Download the registry and replace the local cache.

        Raises:
            SyncError: on a non-2xx response, malformed JSON, network failure
                or when the cache cannot be written
        """
        try:
            content = await self._download()
            aliases = parse_alias_document(content)
            await self.store.write_text(content)
        except SyncError as e:
            raise SyncError(f"Sync failed: {e.message}")
        except (httpx.HTTPError, FilesystemError) as e:
            raise SyncError(f"Sync failed: {e}")

        logger.info("aliases_synced", count=len(aliases), path=str(self.alias_path))
        return aliases

    async def load(self) -> AliasMap:
        """Read the cached registry."""
        if not self.store.exists:
            raise SyncError(f"Aliases file not found at {self.alias_path}")
        try:
            data = await self.store.read()
        except FilesystemError as e:
            raise SyncError(str(e))
        return validate_alias_map(data)

    async def _download(self) -> str:
        async with httpx.AsyncClient(
            timeout=self.timeout,
            transport=self.transport,
            follow_redirects=True,
        ) as client:
            logger.debug("aliases_fetching", url=self.url)
            response = await client.get(self.url)

        if not response.is_success:
            raise SyncError(
                f"Failed to fetch aliases: {response.status_code} {response.reason_phrase}"
            )
        return response.text
