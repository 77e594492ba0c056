"""
Local git operations used by the PR workflow.

Every public coroutine returns a Result instead of raising, so workflow steps
can inspect each outcome at the call site and stop at the first failure.
Commands go through GitPython's `repo.git` wrapper in a worker thread; a
cancelled caller abandons the command and never sees its output.
"""
import asyncio
import logging
import re
from typing import List

from git import Repo
from git.exc import GitCommandError, InvalidGitRepositoryError, NoSuchPathError

from github_pr_mcp.models import RepositoryIdentity, Result

GITHUB_URL_PATTERN = re.compile(r'github\.com[:/]([^/]+)/([^/]+?)(?:\.git)?/?$')

# `git ls-remote --exit-code` exits with 2 when no matching ref exists
LS_REMOTE_NO_MATCH = 2


def parse_repository_url(remote_url: str) -> Result[RepositoryIdentity]:
    """
    Extract owner and repository name from a GitHub remote URL.

    Accepts both SSH (git@github.com:owner/repo.git) and HTTPS
    (https://github.com/owner/repo) forms.
    """
    remote_url = remote_url.strip()
    match = GITHUB_URL_PATTERN.search(remote_url)
    if not match:
        return Result.failure(f"Cannot parse GitHub repository URL: {remote_url}")

    return Result.success(RepositoryIdentity(
        owner=match.group(1),
        repo=match.group(2),
        remote_url=remote_url,
    ))


def _non_blank_lines(output: str) -> List[str]:
    return [line for line in output.splitlines() if line.strip()]


class GitService:
    """Stateless facade over the git command line."""

    def _execute(self, working_dir: str, command: str, *args: str) -> str:
        with Repo(working_dir, search_parent_directories=True) as repo:
            return getattr(repo.git, command)(*args)

    async def _run(self, working_dir: str, command: str, *args: str) -> str:
        return await asyncio.to_thread(self._execute, working_dir, command, *args)

    async def _attempt(self, working_dir: str, command: str, *args: str) -> Result[str]:
        try:
            return Result.success(await self._run(working_dir, command, *args))
        except GitCommandError as e:
            logging.debug(str(e))
            return Result.failure(str(e))
        except NoSuchPathError as e:
            return Result.failure(f"Cannot run git in {working_dir}: {e}")
        except InvalidGitRepositoryError:
            return Result.failure(f"Not a git repository: {working_dir}")

    async def current_branch(self, working_dir: str) -> Result[str]:
        result = await self._attempt(working_dir, "branch", "--show-current")
        if not result.ok:
            return result
        branch = result.value.strip()
        if not branch:
            return Result.failure("No current branch (detached HEAD?)")
        return Result.success(branch)

    async def remote_branches(self, working_dir: str) -> Result[List[str]]:
        result = await self._attempt(working_dir, "branch", "-r")
        if not result.ok:
            return Result.failure(result.error)

        branches = [
            line.strip()[len("origin/"):]
            for line in _non_blank_lines(result.value)
            if line.strip().startswith("origin/") and "HEAD" not in line
        ]
        return Result.success(branches)

    async def diff(self, working_dir: str, base_branch: str, head: str) -> Result[str]:
        return await self._attempt(working_dir, "diff", f"origin/{base_branch}...{head}")

    async def changed_files(self, working_dir: str, base_branch: str, head: str) -> Result[List[str]]:
        result = await self._attempt(
            working_dir, "diff", "--name-only", f"origin/{base_branch}...{head}"
        )
        if not result.ok:
            return Result.failure(result.error)
        return Result.success(_non_blank_lines(result.value))

    async def commit_subjects(self, working_dir: str, base_branch: str, head: str) -> Result[List[str]]:
        result = await self._attempt(
            working_dir, "log", f"origin/{base_branch}..{head}", "--pretty=format:%s"
        )
        if not result.ok:
            return Result.failure(result.error)
        return Result.success(_non_blank_lines(result.value))

    async def commit_count(self, working_dir: str, base_branch: str, head: str) -> Result[int]:
        result = await self._attempt(
            working_dir, "rev_list", "--count", f"origin/{base_branch}..{head}"
        )
        if not result.ok:
            return Result.failure(result.error)
        try:
            return Result.success(int(result.value.strip()))
        except ValueError:
            return Result.failure(f"Unexpected commit count output: {result.value.strip()}")

    async def push(self, working_dir: str, branch: str) -> Result[str]:
        return await self._attempt(working_dir, "push", "-u", "origin", branch)

    async def fetch(self, working_dir: str, branch: str) -> Result[str]:
        return await self._attempt(working_dir, "fetch", "origin", branch)

    async def remote_branch_exists(self, working_dir: str, branch: str) -> Result[bool]:
        # Full ref: a bare name would also match origin's feature/<branch>
        try:
            await self._run(
                working_dir, "ls_remote", "--exit-code", "--heads", "origin", f"refs/heads/{branch}"
            )
            return Result.success(True)
        except GitCommandError as e:
            if e.status == LS_REMOTE_NO_MATCH:
                return Result.success(False)
            return Result.failure(str(e))
        except NoSuchPathError as e:
            return Result.failure(f"Cannot run git in {working_dir}: {e}")
        except InvalidGitRepositoryError:
            return Result.failure(f"Not a git repository: {working_dir}")

    async def repository_identity(self, working_dir: str) -> Result[RepositoryIdentity]:
        result = await self._attempt(working_dir, "config", "--get", "remote.origin.url")
        if not result.ok:
            return Result.failure(result.error)
        return parse_repository_url(result.value)
