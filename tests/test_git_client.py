"""Tests for git command execution and the git-backed VCS client"""

import shutil
import subprocess
from pathlib import Path

import pytest

from tact_pm.core.git import (GitClient, GitCommandError, GitCommandExecutor,
                              GitNotFoundError, GitSecurityError)

requires_git = pytest.mark.skipif(shutil.which("git") is None, reason="git binary not available")


def git(cwd: Path, *args: str) -> str:
    result = subprocess.run(
        ["git", "-c", "user.name=tpm", "-c", "user.email=tpm@example.com", *args],
        cwd=str(cwd),
        check=True,
        capture_output=True,
        text=True,
    )
    return result.stdout.strip()


@pytest.fixture
def upstream_repo(tmp_path: Path) -> Path:
    """Create a local repository with a single commit"""
    repo_path = tmp_path / "upstream"
    repo_path.mkdir()
    git(repo_path, "init", "--quiet")
    (repo_path / "package.json").write_text("{}")
    git(repo_path, "add", "package.json")
    git(repo_path, "commit", "--quiet", "-m", "initial")
    return repo_path


class TestGitCommandExecutor:
    """Test command whitelisting and argument checks"""

    @pytest.mark.asyncio
    async def test_rejects_disallowed_command(self):
        executor = GitCommandExecutor()

        with pytest.raises(GitSecurityError, match="Command not allowed: push"):
            await executor.execute(["push", "origin"])

    @pytest.mark.asyncio
    async def test_rejects_log(self):
        with pytest.raises(GitSecurityError, match="Command not allowed: log"):
            await GitCommandExecutor().execute(["log", "-1"])

    @pytest.mark.asyncio
    async def test_rejects_empty_command(self):
        with pytest.raises(GitSecurityError):
            await GitCommandExecutor().execute([])

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "args",
        [
            ["clone", "--upload-pack=touch /tmp/pwned", "https://example.com/x.git"],
            ["fetch", "origin\nmain"],
            ["rev-parse", "HEAD\x00"],
            ["rev-parse", "--format=%H"],
            ["clone", "--depth=1", "https://example.com/x.git"],
        ],
    )
    async def test_rejects_unsafe_arguments(self, args):
        with pytest.raises(GitSecurityError):
            await GitCommandExecutor().execute(args)

    @pytest.mark.asyncio
    async def test_missing_binary(self, tmp_path: Path):
        executor = GitCommandExecutor(str(tmp_path / "no-such-git"))

        with pytest.raises(GitNotFoundError):
            await executor.execute(["rev-parse", "HEAD"])


class TestGitClient:
    """Test the VCS client against real repositories"""

    @pytest.mark.asyncio
    async def test_rejects_option_like_url(self, tmp_path: Path):
        with pytest.raises(GitSecurityError):
            await GitClient().clone("--template=/tmp/evil", tmp_path / "target")

    @requires_git
    @pytest.mark.asyncio
    async def test_clone_and_head(self, upstream_repo: Path, tmp_path: Path):
        client = GitClient()
        target = tmp_path / "modules" / "foo"

        await client.clone(str(upstream_repo), target)

        assert await client.head_commit(target) == git(upstream_repo, "rev-parse", "HEAD")
        assert (target / "package.json").is_file()

    @requires_git
    @pytest.mark.asyncio
    async def test_checkout_older_commit(self, upstream_repo: Path, tmp_path: Path):
        first = git(upstream_repo, "rev-parse", "HEAD")
        git(upstream_repo, "commit", "--quiet", "--allow-empty", "-m", "second")
        client = GitClient()
        target = tmp_path / "clone"
        await client.clone(str(upstream_repo), target)

        await client.checkout(target, first[:7])

        assert await client.head_commit(target) == first

    @requires_git
    @pytest.mark.asyncio
    async def test_upstream_commit_after_fetch(self, upstream_repo: Path, tmp_path: Path):
        client = GitClient()
        target = tmp_path / "clone"
        await client.clone(str(upstream_repo), target)
        installed = await client.head_commit(target)

        git(upstream_repo, "commit", "--quiet", "--allow-empty", "-m", "second")
        await client.fetch(target)

        assert await client.head_commit(target) == installed
        assert await client.upstream_commit(target) == git(upstream_repo, "rev-parse", "HEAD")

    @requires_git
    @pytest.mark.asyncio
    async def test_head_of_empty_repository(self, tmp_path: Path):
        repo_path = tmp_path / "empty"
        repo_path.mkdir()
        git(repo_path, "init", "--quiet")

        assert await GitClient().head_commit(repo_path) is None

    @requires_git
    @pytest.mark.asyncio
    async def test_clone_failure(self, tmp_path: Path):
        with pytest.raises(GitCommandError):
            await GitClient().clone(str(tmp_path / "does-not-exist"), tmp_path / "target")
