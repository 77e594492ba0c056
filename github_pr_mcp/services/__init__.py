"""
Collaborators used by the PR workflow: local git, the GitHub API and
PR template discovery.
"""
from .git_service import GitService, parse_repository_url
from .github_service import GitHubService
from .template_loader import TemplateLoader, DEFAULT_PR_TEMPLATE

__all__ = [
    'GitService',
    'parse_repository_url',
    'GitHubService',
    'TemplateLoader',
    'DEFAULT_PR_TEMPLATE',
]
