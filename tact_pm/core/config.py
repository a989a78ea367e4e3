from pathlib import Path
from typing import Literal, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_ALIASES_URL = (
    "https://raw.githubusercontent.com/ton-ai-core/tact-package-manager/main/tact-aliases.json"
)


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="TPM_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    project_root: Path = Field(
        default_factory=Path.cwd, description="Project directory the CLI operates on"
    )
    modules_dir: str = Field(
        default="tact_modules", description="Modules root, relative to the project"
    )
    state_file: str = Field(
        default="tact-packages.json", description="Installed package state file"
    )
    workspace_manifest: str = Field(
        default="package.json", description="Root workspace manifest"
    )

    aliases_url: str = Field(
        default=DEFAULT_ALIASES_URL, description="Remote alias registry document"
    )
    aliases_path: Path = Field(
        default_factory=lambda: Path.home() / ".tpm" / "tact-aliases.json",
        description="Local alias cache",
    )
    http_timeout: float = Field(
        default=30.0, description="Alias registry request timeout in seconds"
    )

    git_binary_path: str = Field(default="git", description="Path to git binary")
    runner_command: str = Field(
        default="npm", description="Dependency runner used for workspaces"
    )

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="WARNING", description="Logging level"
    )
    log_format: Literal["json", "console"] = Field(
        default="console", description="Log output format"
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, v):
        if isinstance(v, str):
            return v.upper()
        return v

    @field_validator("project_root", mode="after")
    @classmethod
    def resolve_project_root(cls, v: Path) -> Path:
        return v.expanduser().resolve()

    @property
    def modules_root(self) -> Path:
        return self.project_root / self.modules_dir

    @property
    def state_path(self) -> Path:
        return self.project_root / self.state_file

    @property
    def workspace_path(self) -> Path:
        return self.project_root / self.workspace_manifest


_settings: Optional[Settings] = None


def get_settings() -> Settings:
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings
