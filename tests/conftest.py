"""Pytest configuration and fixtures"""

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Sequence

import httpx
import pytest

from tact_pm.core.config import Settings
from tact_pm.core.git import GitCommandError, VCSClient
from tact_pm.core.repository import RepositoryFetcher
from tact_pm.core.services import PackageManager, WorkspaceManager
from tact_pm.core.state import StateStore
from tact_pm.infrastructure.alias_sync import AliasSync
from tact_pm.infrastructure.logging import setup_logging
from tact_pm.infrastructure.process_runner import ProcessRunner

FOO_URL = "https://example.com/foo.git"
FOO_COMMIT = "abc123" + "0" * 34
FOO_NEXT_COMMIT = "def456" + "0" * 34
REGISTRY_URL = "https://registry.example.com/tact-aliases.json"


def module_files(name: str = "foo", **extra: str) -> Dict[str, str]:
    """Files of a well-formed Tact module checkout"""
    files = {
        "package.json": json.dumps({"name": name, "scripts": {"build": "tact --config tact.config.json"}}),
        "tact.config.json": json.dumps({"projects": []}),
        "sources/main.tact": "contract Main {}",
        "package-lock.json": "{}",
        ".github/workflows/ci.yml": "on: push",
        "tests/Main.spec.ts": "",
        ".env": "SECRET=1",
    }
    files.update(extra)
    return files


@dataclass
class FakeRepository:
    files: Dict[str, str]
    commits: List[str]
    upstream: Optional[str] = None


@dataclass
class FakeVCSClient(VCSClient):
    """In-memory VCS: cloning materialises files, commits are plain strings"""

    repositories: Dict[str, FakeRepository] = field(default_factory=dict)
    heads: Dict[Path, Optional[str]] = field(default_factory=dict)
    origins: Dict[Path, str] = field(default_factory=dict)
    calls: List[tuple] = field(default_factory=list)

    def add(self, url: str, files: Dict[str, str], commits: Sequence[str], upstream: Optional[str] = None):
        self.repositories[url] = FakeRepository(dict(files), list(commits), upstream)

    async def clone(self, url: str, target: Path) -> None:
        self.calls.append(("clone", url, target))
        repository = self.repositories.get(url)
        if repository is None:
            raise GitCommandError(f"clone -- {url}", 128, "repository not found")

        target.mkdir(parents=True)
        for relative, content in repository.files.items():
            path = target / relative
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content)

        self.heads[target] = repository.commits[-1] if repository.commits else None
        self.origins[target] = url

    async def checkout(self, repo_path: Path, revision: str) -> None:
        self.calls.append(("checkout", repo_path, revision))
        repository = self.repositories[self.origins[repo_path]]
        matches = [c for c in repository.commits if c.startswith(revision)]
        if not matches:
            raise GitCommandError(f"checkout {revision}", 1, f"pathspec '{revision}' did not match")
        self.heads[repo_path] = matches[0]

    async def head_commit(self, repo_path: Path) -> Optional[str]:
        return self.heads.get(repo_path)

    async def fetch(self, repo_path: Path) -> None:
        self.calls.append(("fetch", repo_path))
        if repo_path not in self.origins:
            raise GitCommandError("fetch origin", 128, "not a git repository")

    async def upstream_commit(self, repo_path: Path) -> Optional[str]:
        repository = self.repositories[self.origins[repo_path]]
        if repository.upstream is not None:
            return repository.upstream
        return repository.commits[-1] if repository.commits else None


@dataclass
class FakeRunner(ProcessRunner):
    exit_code: int = 0
    calls: List[tuple] = field(default_factory=list)

    async def run(self, command: str, args: Sequence[str], cwd: Path) -> int:
        self.calls.append((command, list(args), cwd))
        return self.exit_code


def registry_transport(aliases=None, status_code: int = 200, body: Optional[str] = None):
    """httpx transport serving the alias registry"""
    requests = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        content = body if body is not None else json.dumps(aliases or {})
        return httpx.Response(status_code, text=content)

    transport = httpx.MockTransport(handler)
    transport.requests = requests
    return transport


def failing_transport():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("registry unreachable", request=request)

    return httpx.MockTransport(handler)


@pytest.fixture(autouse=True)
def configure_logging():
    """Route structured logs to stderr as the CLI does"""
    setup_logging("WARNING")


@pytest.fixture
def project_dir(tmp_path: Path) -> Path:
    project = tmp_path / "project"
    project.mkdir()
    return project


@pytest.fixture
def settings(project_dir: Path, tmp_path: Path) -> Settings:
    return Settings(
        project_root=project_dir,
        aliases_path=tmp_path / "cache" / "tact-aliases.json",
        aliases_url=REGISTRY_URL,
        _env_file=None,
    )


@pytest.fixture
def vcs() -> FakeVCSClient:
    client = FakeVCSClient()
    client.add(FOO_URL, module_files("foo"), [FOO_COMMIT])
    return client


@pytest.fixture
def runner() -> FakeRunner:
    return FakeRunner()


@pytest.fixture
def fetcher(settings: Settings, vcs: FakeVCSClient) -> RepositoryFetcher:
    return RepositoryFetcher(settings.modules_root, vcs)


def make_manager(settings: Settings, fetcher: RepositoryFetcher, transport) -> PackageManager:
    alias_sync = AliasSync(settings.aliases_path, url=settings.aliases_url, transport=transport)
    return PackageManager(
        settings,
        fetcher=fetcher,
        alias_sync=alias_sync,
        store=StateStore(settings.state_path),
    )


@pytest.fixture
def manager(settings: Settings, fetcher: RepositoryFetcher) -> PackageManager:
    return make_manager(settings, fetcher, registry_transport({"foo": FOO_URL}))


@pytest.fixture
def workspace(settings: Settings, runner: FakeRunner) -> WorkspaceManager:
    return WorkspaceManager(
        settings.project_root,
        modules_dir=settings.modules_dir,
        runner=runner,
    )
