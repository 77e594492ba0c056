import os
from dataclasses import dataclass
from typing import Optional
from dotenv import load_dotenv

load_dotenv()


@dataclass(frozen=True)
class ServerConfig:
    """Process-wide settings, read once at startup and never mutated."""
    default_working_dir: str
    github_token: Optional[str] = None
    default_base_branch: str = "develop"
    jira_prefix: str = "PROJ"
    template_path: Optional[str] = None
    log_level: str = "INFO"

    @property
    def has_github_token(self) -> bool:
        return bool(self.github_token)

    @classmethod
    def from_env(cls) -> "ServerConfig":
        return cls(
            default_working_dir=os.getenv("WORKING_DIR") or os.getcwd(),
            github_token=os.getenv("GITHUB_TOKEN") or None,
            default_base_branch=os.getenv("PR_BASE_BRANCH", "develop"),
            jira_prefix=os.getenv("PR_JIRA_PREFIX", "PROJ"),
            template_path=os.getenv("PR_TEMPLATE_PATH") or None,
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        )
