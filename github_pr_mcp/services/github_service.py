"""
GitHub REST API client for pull request creation.
"""
import asyncio
import logging
import requests
from github_pr_mcp.models import PullRequest, Result

GITHUB_API_URL = "https://api.github.com"
GITHUB_API_VERSION = "2022-11-28"


class GitHubService:
    """Creates pull requests through the GitHub REST API."""

    def __init__(self, token: str, api_url: str = GITHUB_API_URL, timeout: int = 30):
        self.token = token
        self.api_url = api_url.rstrip("/")
        self.timeout = timeout

    def _headers(self) -> dict:
        return {
            "Authorization": f"Bearer {self.token}",
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": GITHUB_API_VERSION,
        }

    def _post_pull_request(self, owner, repo, title, body, head, base) -> Result[PullRequest]:
        try:
            response = requests.post(
                f"{self.api_url}/repos/{owner}/{repo}/pulls",
                headers=self._headers(),
                json={"title": title, "body": body, "head": head, "base": base},
                timeout=self.timeout,
            )
            if not response.ok:
                return Result.failure(
                    f"Failed to create PR: {response.status_code} - {response.text}"
                )
            return Result.success(PullRequest.from_api(response.json()))

        except (requests.RequestException, KeyError, ValueError) as e:
            logging.error(f"GitHub API request for {owner}/{repo} failed: {e}")
            return Result.failure(str(e))

    async def create_pull_request(
        self,
        owner: str,
        repo: str,
        title: str,
        body: str,
        head: str,
        base: str,
    ) -> Result[PullRequest]:
        """
        Open a pull request from head into base.

        Args:
            owner: Repository owner (user or organisation)
            repo: Repository name
            title: PR title
            body: PR description (markdown)
            head: Branch containing the changes
            base: Branch the changes should be merged into

        Returns:
            Result with the created PullRequest, or the API failure message
        """
        logging.info(f"Creating pull request {owner}/{repo}: {head} -> {base}")
        return await asyncio.to_thread(
            self._post_pull_request, owner, repo, title, body, head, base
        )
