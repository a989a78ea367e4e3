from datetime import datetime, timezone
from enum import Enum
from typing import Dict, Iterator, List, Tuple

from pydantic import BaseModel, ConfigDict, Field, RootModel, field_validator

AliasMap = Dict[str, str]


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class InstalledPackage(BaseModel):
    """State record for one installed alias."""

    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True)

    url: str = Field(..., min_length=1, description="Repository URL the alias resolved to")
    commit_hash: str = Field(
        ..., alias="commitHash", min_length=1, description="Resolved HEAD after clone"
    )
    installed_at: datetime = Field(
        default_factory=utcnow, alias="installedAt", description="Install timestamp (UTC)"
    )

    @field_validator("installed_at")
    @classmethod
    def ensure_timezone(cls, v: datetime) -> datetime:
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v


class PackageState(RootModel[Dict[str, InstalledPackage]]):
    """alias -> InstalledPackage, persisted as one JSON document."""

    root: Dict[str, InstalledPackage] = Field(default_factory=dict)

    def __contains__(self, alias: str) -> bool:
        return alias in self.root

    def __getitem__(self, alias: str) -> InstalledPackage:
        return self.root[alias]

    def __iter__(self) -> Iterator[str]:
        return iter(self.root)

    def __len__(self) -> int:
        return len(self.root)

    def get(self, alias: str):
        return self.root.get(alias)

    def set(self, alias: str, record: InstalledPackage) -> None:
        self.root[alias] = record

    def discard(self, alias: str) -> None:
        self.root.pop(alias, None)

    def aliases(self) -> List[str]:
        return list(self.root)

    def items(self) -> List[Tuple[str, InstalledPackage]]:
        return sorted(self.root.items())

    def to_json_dict(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)


class UpdateStatus(str, Enum):
    UPDATED = "updated"
    UP_TO_DATE = "up-to-date"
    SKIPPED = "skipped"


class UpdateResult(BaseModel):
    alias: str
    status: UpdateStatus
    commit_hash: str = ""
