from dataclasses import dataclass
from typing import Optional

from github_pr_mcp.config import ServerConfig
from github_pr_mcp.services import GitHubService, GitService, TemplateLoader


@dataclass(frozen=True)
class ToolContext:
    """Read-only dependencies shared by every workflow step."""
    config: ServerConfig
    git: GitService
    templates: TemplateLoader
    github: Optional[GitHubService] = None

    @classmethod
    def from_config(cls, config: ServerConfig) -> "ToolContext":
        github = GitHubService(config.github_token) if config.has_github_token else None
        return cls(
            config=config,
            git=GitService(),
            templates=TemplateLoader(config.template_path),
            github=github,
        )
