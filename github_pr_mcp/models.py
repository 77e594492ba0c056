from dataclasses import dataclass, field
from typing import Any, Generic, List, Mapping, Optional, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class Result(Generic[T]):
    """Outcome of a call to git or GitHub: a value or a failure message."""
    value: Optional[T] = None
    error: Optional[str] = None

    @classmethod
    def success(cls, value: T) -> "Result[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, message: str) -> "Result[T]":
        return cls(error=message or "unknown error")

    @property
    def ok(self) -> bool:
        return self.error is None

    def value_or(self, default: T) -> T:
        return self.value if self.ok else default


@dataclass(frozen=True)
class Artifact:
    """Text returned to the calling agent, flagged when it reports an error."""
    segments: List[str] = field(default_factory=list)
    is_error: bool = False

    @classmethod
    def ok(cls, text: str) -> "Artifact":
        return cls(segments=[text])

    @classmethod
    def error(cls, text: str) -> "Artifact":
        return cls(segments=[text], is_error=True)

    @property
    def text(self) -> str:
        return "\n".join(self.segments)


def _optional_text(arguments: Mapping[str, Any], key: str) -> Optional[str]:
    value = arguments.get(key)
    if value is None:
        return None
    return str(value)


def parse_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if value is None:
        return False
    return str(value).strip().lower() == "true"


@dataclass(frozen=True)
class WorkflowInput:
    """
    Caller-supplied workflow state for one invocation.

    Absent fields are None. An empty string is a present value, so a ticket
    explicitly set to "" is distinguishable from an omitted one.
    """
    working_dir: str
    base_branch: Optional[str] = None
    jira_ticket: Optional[str] = None
    confirmed: bool = False
    additional_context: Optional[str] = None

    @classmethod
    def from_arguments(cls, arguments: Mapping[str, Any]) -> "WorkflowInput":
        return cls(
            working_dir=_optional_text(arguments, "working_dir") or "",
            base_branch=_optional_text(arguments, "base_branch"),
            jira_ticket=_optional_text(arguments, "jira_ticket"),
            confirmed=parse_bool(arguments.get("confirmed")),
            additional_context=_optional_text(arguments, "additional_context"),
        )


@dataclass(frozen=True)
class ChangeSet:
    current_branch: str
    changed_files: List[str]
    commits: List[str]
    commit_count: int
    diff: str = ""


@dataclass(frozen=True)
class PrArtifact:
    title: str
    body: str


@dataclass(frozen=True)
class RepositoryIdentity:
    owner: str
    repo: str
    remote_url: str


@dataclass(frozen=True)
class PullRequest:
    number: int
    title: str
    url: str

    @classmethod
    def from_api(cls, data: Mapping[str, Any]) -> "PullRequest":
        return cls(
            number=int(data["number"]),
            title=data.get("title", ""),
            url=data.get("html_url", ""),
        )
