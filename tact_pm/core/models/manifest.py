from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_MODULE_VERSION = "1.0.0"
DEFAULT_PROJECT_NAME = "tact-project"


class ModuleManifest(BaseModel):
    """package.json of an installed module. Unknown keys are kept as-is."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    # Upstream values are kept verbatim, whatever their JSON type
    name: Optional[Any] = None
    version: Optional[Any] = None
    private: Optional[Any] = None
    scripts: Dict[str, str] = Field(default_factory=dict)
    dependencies: Dict[str, str] = Field(default_factory=dict)
    dev_dependencies: Dict[str, str] = Field(default_factory=dict, alias="devDependencies")

    @field_validator("scripts", "dependencies", "dev_dependencies", mode="before")
    @classmethod
    def null_to_empty(cls, v):
        return v if v is not None else {}

    def normalized(self, alias: str) -> "ModuleManifest":
        """Fill name/version from defaults and mark the module private."""
        return self.model_copy(
            update={
                "name": self.name or alias,
                "version": self.version or DEFAULT_MODULE_VERSION,
                "private": True,
            }
        )

    def to_json_dict(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)


class WorkspaceConfig(BaseModel):
    """Root package.json declaring installed modules as workspaces."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    private: bool = True
    name: str = DEFAULT_PROJECT_NAME
    workspaces: List[str] = Field(default_factory=list)
    dependencies: Dict[str, str] = Field(default_factory=dict)
    dev_dependencies: Dict[str, str] = Field(default_factory=dict, alias="devDependencies")

    @field_validator("workspaces", mode="before")
    @classmethod
    def dedupe_workspaces(cls, v):
        if v is None:
            return []
        seen = []
        for item in v:
            if item not in seen:
                seen.append(item)
        return seen

    @field_validator("dependencies", "dev_dependencies", mode="before")
    @classmethod
    def null_to_empty(cls, v):
        return v if v is not None else {}

    def to_json_dict(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)
