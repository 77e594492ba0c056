"""
Shared pytest fixtures and configuration for the github-pr-mcp test suite.

Provides a fake git facade, a fake GitHub client, a ready-made ToolContext
and a real throwaway repository with a bare "origin" remote.
"""
import os
import shutil
import subprocess
import sys
from pathlib import Path
from unittest.mock import AsyncMock

import pytest

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from github_pr_mcp.config import ServerConfig
from github_pr_mcp.models import PullRequest, RepositoryIdentity, Result
from github_pr_mcp.services import GitHubService, GitService, TemplateLoader
from github_pr_mcp.workflow import ToolContext


# ============================================================================
# Configuration Fixtures
# ============================================================================

@pytest.fixture
def config():
    """Configuration with a GitHub token and the usual defaults."""
    return ServerConfig(
        default_working_dir="/repo",
        github_token="ghp_testtoken123",
        default_base_branch="develop",
        jira_prefix="PROJ",
    )


# ============================================================================
# Collaborator Fixtures
# ============================================================================

@pytest.fixture
def fake_git():
    """Git facade describing feature/x with two Go files and one commit."""
    git = AsyncMock(spec=GitService)
    git.current_branch.return_value = Result.success("feature/x")
    git.remote_branches.return_value = Result.success(["develop", "main", "feature/other"])
    git.remote_branch_exists.return_value = Result.success(True)
    git.fetch.return_value = Result.success("")
    git.changed_files.return_value = Result.success(["a.go", "b.go"])
    git.commit_subjects.return_value = Result.success(["feat: add x"])
    git.commit_count.return_value = Result.success(1)
    git.diff.return_value = Result.success(
        "diff --git a/a.go b/a.go\n+package a\ndiff --git a/b.go b/b.go\n+package b\n"
    )
    git.push.return_value = Result.success("pushed")
    git.repository_identity.return_value = Result.success(
        RepositoryIdentity(owner="octo", repo="widgets", remote_url="git@github.com:octo/widgets.git")
    )
    return git


@pytest.fixture
def fake_github():
    """GitHub client that creates PR #42."""
    github = AsyncMock(spec=GitHubService)
    github.create_pull_request.return_value = Result.success(
        PullRequest(number=42, title="feat: add x", url="https://github.com/octo/widgets/pull/42")
    )
    return github


@pytest.fixture
def context(config, fake_git, fake_github):
    """ToolContext wired to the fakes; templates fall back to the default."""
    return ToolContext(
        config=config,
        git=fake_git,
        templates=TemplateLoader(),
        github=fake_github,
    )


# ============================================================================
# Real Repository Fixtures
# ============================================================================

def _git(cwd, *args):
    return subprocess.run(
        ["git", *args], cwd=cwd, check=True, capture_output=True, text=True
    ).stdout


@pytest.fixture
def git_repo(tmp_path):
    """
    Create a clone whose origin is a local bare repository.

    origin has main and develop; the clone is on feature/x with one commit
    ahead of develop that is not pushed.
    """
    if shutil.which("git") is None:
        pytest.skip("git executable not available")

    origin = tmp_path / "origin.git"
    work = tmp_path / "work"
    _git(tmp_path, "init", "--bare", str(origin))
    _git(tmp_path, "init", str(work))
    _git(work, "config", "user.email", "dev@example.com")
    _git(work, "config", "user.name", "Dev")
    _git(work, "symbolic-ref", "HEAD", "refs/heads/main")
    (work / "README.md").write_text("# demo\n")
    _git(work, "add", ".")
    _git(work, "commit", "-m", "initial commit")
    _git(work, "remote", "add", "origin", str(origin))
    _git(work, "push", "-u", "origin", "main")
    _git(work, "checkout", "-b", "develop")
    _git(work, "push", "-u", "origin", "develop")
    _git(work, "checkout", "-b", "feature/x")
    (work / "app.py").write_text("print('x')\n")
    _git(work, "add", ".")
    _git(work, "commit", "-m", "feat: add app")
    return work


# ============================================================================
# Pytest Configuration
# ============================================================================

def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )
    config.addinivalue_line(
        "markers", "unit: marks tests as unit tests"
    )
    config.addinivalue_line(
        "markers", "requires_git: marks tests that need a git executable"
    )


@pytest.fixture(autouse=True)
def reset_environment():
    """Reset environment variables after each test."""
    original_env = os.environ.copy()
    yield
    os.environ.clear()
    os.environ.update(original_env)
