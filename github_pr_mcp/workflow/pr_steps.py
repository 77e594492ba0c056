"""
The four steps of the PR authoring workflow, plus a branch lookup utility.

Each step takes the shared ToolContext and the caller's argument map and
returns an Artifact. No state is kept between calls: the agent passes the
base branch, title and body it received from one step into the next.

    start_pr_workflow -> select_base_branch -> generate_pr_content
        -> create_pr_confirmed
"""
import logging
from typing import Any, Mapping, Optional

from github_pr_mcp.models import Artifact, ChangeSet, PrArtifact, Result
from github_pr_mcp.services import GitService
from github_pr_mcp.workflow.context import ToolContext
from github_pr_mcp.workflow.pr_content import (
    COMMIT_PREVIEW_LIMIT,
    FILE_PREVIEW_LIMIT,
    NO_TICKET,
    classify_changes,
    describe_group,
    generate_pr_body,
    generate_pr_title,
    group_files_by_extension,
    has_ticket,
    preview_list,
    truncate_diff,
)

SEPARATOR = "━" * 34
TRUNK_BRANCHES = ('main', 'master')
BASE_CANDIDATES = ('develop', 'main', 'master')
ALTERNATIVE_BRANCH_LIMIT = 10
EXTENSION_BREAKDOWN_LIMIT = 5
CONFIG_EXTENSIONS = ('.yaml', '.yml', '.properties', '.json')

Arguments = Mapping[str, Any]


def _missing_argument(arguments: Arguments, *names: str) -> Optional[Artifact]:
    """Error artifact for the first required argument that is absent or blank."""
    for name in names:
        value = arguments.get(name)
        if value is None or str(value) == "":
            return Artifact.error(f"❌ {name} 값이 필요합니다.")
    return None


async def collect_change_set(
    git: GitService,
    working_dir: str,
    base_branch: str,
    current_branch: str,
    include_diff: bool = False,
) -> Result[ChangeSet]:
    """
    Gather files, commits and optionally the diff between origin/base and head.

    Calls run one after another and the first failure is returned as-is.
    """
    files = await git.changed_files(working_dir, base_branch, current_branch)
    if not files.ok:
        return Result.failure(files.error)

    commits = await git.commit_subjects(working_dir, base_branch, current_branch)
    if not commits.ok:
        return Result.failure(commits.error)

    count = await git.commit_count(working_dir, base_branch, current_branch)
    if not count.ok:
        return Result.failure(count.error)

    diff_text = ""
    if include_diff:
        diff = await git.diff(working_dir, base_branch, current_branch)
        if not diff.ok:
            return Result.failure(diff.error)
        diff_text = diff.value

    return Result.success(ChangeSet(
        current_branch=current_branch,
        changed_files=files.value,
        commits=commits.value,
        commit_count=count.value,
        diff=diff_text,
    ))


def _not_a_repository(working_dir: str, error: str) -> Artifact:
    return Artifact.error(f"❌ Git 저장소가 아닙니다: {working_dir}\n{error}")


async def start_pr_workflow(context: ToolContext, arguments: Arguments) -> Artifact:
    """Check the current branch and offer base branch candidates."""
    missing = _missing_argument(arguments, "working_dir")
    if missing:
        return missing
    working_dir = str(arguments["working_dir"])
    logging.info(f"Starting PR workflow in {working_dir}")

    branch = await context.git.current_branch(working_dir)
    if not branch.ok:
        return _not_a_repository(working_dir, branch.error)
    current_branch = branch.value

    if current_branch in TRUNK_BRANCHES:
        return Artifact.error(
            f"❌ 현재 브랜치가 '{current_branch}'입니다.\n"
            "feature 브랜치를 먼저 생성해주세요:\n"
            "```\n"
            "git checkout -b feature/your-feature\n"
            "```"
        )

    remote = await context.git.remote_branches(working_dir)
    if not remote.ok:
        logging.warning(f"Could not list remote branches in {working_dir}: {remote.error}")
    available = [b for b in BASE_CANDIDATES if b in remote.value_or([])]

    lines = [
        "🚀 **PR 생성 워크플로우 시작**",
        "",
        SEPARATOR,
        "",
        "📌 **현재 상태**",
        f"- 브랜치: `{current_branch}`",
    ]
    if not remote.ok:
        lines.append(f"- ⚠️ 원격 브랜치 목록을 가져오지 못했습니다: {remote.error}")
    lines += [
        "",
        SEPARATOR,
        "",
        "🎯 **Base 브랜치를 선택해주세요:**",
        "",
    ]
    for index, name in enumerate(available, 1):
        default_mark = " (기본값)" if name == context.config.default_base_branch else ""
        lines.append(f"  {index}. `{name}`{default_mark}")
    lines.append(f"  {len(available) + 1}. 직접 입력")
    lines += [
        "",
        SEPARATOR,
        "",
        "어떤 브랜치로 PR을 생성할까요? (번호 또는 브랜치명)",
    ]
    return Artifact.ok('\n'.join(lines))


async def select_base_branch(context: ToolContext, arguments: Arguments) -> Artifact:
    """Validate the chosen base branch and summarise the branch's changes."""
    missing = _missing_argument(arguments, "working_dir", "base_branch")
    if missing:
        return missing
    working_dir = str(arguments["working_dir"])
    base_branch = str(arguments["base_branch"])
    git = context.git
    logging.info(f"Selecting base branch '{base_branch}' in {working_dir}")

    exists = await git.remote_branch_exists(working_dir, base_branch)
    if not exists.ok:
        return Artifact.error(f"❌ 원격 브랜치를 확인할 수 없습니다: {exists.error}")
    if not exists.value:
        branches = (await git.remote_branches(working_dir)).value_or([])
        return Artifact.error(
            f"❌ `{base_branch}` 브랜치가 존재하지 않습니다.\n"
            f"사용 가능한 브랜치: {', '.join(branches[:ALTERNATIVE_BRANCH_LIMIT])}"
        )

    fetched = await git.fetch(working_dir, base_branch)
    if not fetched.ok:
        logging.warning(f"Fetching origin/{base_branch} failed, comparing with local copy: {fetched.error}")

    branch = await git.current_branch(working_dir)
    if not branch.ok:
        return _not_a_repository(working_dir, branch.error)

    changes = await collect_change_set(git, working_dir, base_branch, branch.value)
    if not changes.ok:
        return Artifact.error(f"❌ 변경사항을 분석할 수 없습니다: {changes.error}")
    change_set = changes.value

    if not change_set.changed_files:
        return Artifact.error(f"❌ `origin/{base_branch}`와 비교할 변경사항이 없습니다.")

    lines = [
        f"✅ **Base 브랜치 선택됨: `{base_branch}`**",
        "",
        SEPARATOR,
        "",
        "📊 **변경사항 요약**",
        f"- 현재 브랜치: `{change_set.current_branch}`",
        f"- 변경 파일: {len(change_set.changed_files)}개",
        f"- 커밋: {change_set.commit_count}개",
    ]
    if not fetched.ok:
        lines.append(f"- ⚠️ `origin/{base_branch}` fetch 실패 (로컬 정보로 비교): {fetched.error}")
    lines += ["", "📝 **변경된 파일**"]
    for ext, files in group_files_by_extension(change_set.changed_files).items():
        lines.append(f"  {describe_group(ext, files)}")
    lines += ["", "📦 **커밋 목록**"]
    lines.extend(preview_list(change_set.commits, COMMIT_PREVIEW_LIMIT))
    lines += [
        "",
        SEPARATOR,
        "",
        "🎫 **작업 티켓 번호를 입력해주세요**",
        f"(예: {context.config.jira_prefix}-1234, 없으면 '{NO_TICKET}' 입력)",
    ]
    return Artifact.ok('\n'.join(lines))


def build_pr_artifact(template: str, ticket: str, change_set: ChangeSet) -> PrArtifact:
    change_types = classify_changes(change_set.changed_files, change_set.commits)
    return PrArtifact(
        title=generate_pr_title(ticket, change_set.commits),
        body=generate_pr_body(
            template, ticket, change_set.commits, change_types, change_set.changed_files
        ),
    )


async def generate_pr_content(context: ToolContext, arguments: Arguments) -> Artifact:
    """
    Synthesize the PR title and body for the current branch.

    Always asks for confirmation: the agent must follow up with
    create_pr_confirmed, passing base_branch, title and body unchanged.
    """
    missing = _missing_argument(arguments, "working_dir")
    if missing:
        return missing
    working_dir = str(arguments["working_dir"])
    base_branch = str(arguments.get("base_branch") or context.config.default_base_branch)
    ticket = str(arguments.get("jira_ticket") or "")
    additional = str(arguments.get("additional_context") or "")
    git = context.git
    logging.info(f"Generating PR content in {working_dir} against '{base_branch}'")

    branch = await git.current_branch(working_dir)
    if not branch.ok:
        return _not_a_repository(working_dir, branch.error)

    changes = await collect_change_set(git, working_dir, base_branch, branch.value, include_diff=True)
    if not changes.ok:
        return Artifact.error(f"❌ 변경사항을 분석할 수 없습니다: {changes.error}")
    change_set = changes.value

    pr = build_pr_artifact(context.templates.load(working_dir), ticket, change_set)

    files = change_set.changed_files
    test_files = [f for f in files if 'test' in f.lower() or 'spec' in f.lower()]
    config_files = [f for f in files if f.lower().endswith(CONFIG_EXTENSIONS)]
    groups = list(group_files_by_extension(files).items())

    lines = [
        "📝 **PR 내용 생성 완료 - 확인이 필요합니다**",
        "",
        SEPARATOR,
        "## 📋 변경사항 상세 정보",
        SEPARATOR,
        "",
        "**브랜치 정보:**",
        f"- 현재 브랜치: `{change_set.current_branch}`",
        f"- Base 브랜치: `{base_branch}`",
        f"- JIRA 티켓: {ticket if has_ticket(ticket) else NO_TICKET}",
        "",
        f"**커밋 ({change_set.commit_count}개):**",
    ]
    lines.extend(preview_list(change_set.commits, COMMIT_PREVIEW_LIMIT))
    lines += ["", f"**변경된 파일 ({len(files)}개):**"]
    lines.extend(preview_list(files, FILE_PREVIEW_LIMIT))
    lines += ["", "**파일 유형별 분류:**"]
    for ext, grouped in groups[:EXTENSION_BREAKDOWN_LIMIT]:
        lines.append(f"- {ext if ext == 'other' else '.' + ext}: {len(grouped)}개")
    if test_files:
        lines.append(f"- 테스트 파일: {len(test_files)}개 ({', '.join(test_files[:3])})")
    if config_files:
        lines.append(f"- 설정 파일: {len(config_files)}개 ({', '.join(config_files[:3])})")
    lines += [
        "",
        "**코드 변경사항 (Diff):**",
        "```diff",
        truncate_diff(change_set.diff),
        "```",
    ]
    if additional:
        lines += ["", f"**추가 컨텍스트:** {additional}"]
    lines += [
        "",
        SEPARATOR,
        "## 📌 PR 제목",
        SEPARATOR,
        "```",
        pr.title,
        "```",
        "",
        SEPARATOR,
        "## 📄 PR 본문",
        SEPARATOR,
        "```markdown",
        pr.body,
        "```",
        "",
        SEPARATOR,
        "",
        "위 Diff를 참고해 본문의 작업 내용과 리뷰 포인트를 보완할 수 있습니다.",
        "체크리스트의 테스트 항목은 작성자가 직접 확인합니다.",
        "",
        "**다음 단계:** 사용자가 확인하면 `create_pr_confirmed` 툴을 호출하세요.",
        f"- base_branch: `{base_branch}`",
        "- title: 위 PR 제목 그대로 (수정된 경우 수정본)",
        "- body: 위 PR 본문 그대로 (수정된 경우 수정본)",
    ]
    return Artifact.ok('\n'.join(lines))


async def create_pr_confirmed(context: ToolContext, arguments: Arguments) -> Artifact:
    """Push the current branch if needed and open the pull request."""
    if context.github is None:
        return Artifact.error("❌ GITHUB_TOKEN 환경변수가 설정되지 않았습니다.")

    missing = _missing_argument(arguments, "title", "body", "base_branch", "working_dir")
    if missing:
        return missing
    title = str(arguments["title"])
    body = str(arguments["body"])
    base_branch = str(arguments["base_branch"])
    working_dir = str(arguments["working_dir"])
    git = context.git

    branch = await git.current_branch(working_dir)
    if not branch.ok:
        return Artifact.error(f"❌ 현재 브랜치를 확인할 수 없습니다: {branch.error}")
    head = branch.value

    exists = await git.remote_branch_exists(working_dir, head)
    if not exists.ok:
        return Artifact.error(f"❌ 원격 브랜치를 확인할 수 없습니다: {exists.error}")
    if not exists.value:
        logging.info(f"Pushing '{head}' to origin")
        pushed = await git.push(working_dir, head)
        if not pushed.ok:
            return Artifact.error(f"❌ 브랜치 push 실패: {pushed.error}")

    identity = await git.repository_identity(working_dir)
    if not identity.ok:
        return Artifact.error(f"❌ Repository 정보를 가져올 수 없습니다: {identity.error}")
    repo = identity.value

    created = await context.github.create_pull_request(
        repo.owner, repo.repo, title, body, head, base_branch
    )
    if not created.ok:
        logging.error(f"PR creation failed for {repo.owner}/{repo.repo}: {created.error}")
        return Artifact.error(f"❌ PR 생성 실패: {created.error}")

    pr = created.value
    logging.info(f"Created PR #{pr.number}: {pr.url}")
    return Artifact.ok('\n'.join([
        SEPARATOR,
        "✅ **PR이 성공적으로 생성되었습니다!**",
        SEPARATOR,
        "",
        f"🔗 **PR URL:** {pr.url}",
        f"📝 **PR #{pr.number}:** {pr.title}",
    ]))


async def get_current_branch(context: ToolContext, arguments: Arguments) -> Artifact:
    missing = _missing_argument(arguments, "working_dir")
    if missing:
        return missing
    working_dir = str(arguments["working_dir"])

    branch = await context.git.current_branch(working_dir)
    if not branch.ok:
        return Artifact.error(f"❌ Error: {branch.error}")
    return Artifact.ok(f"현재 브랜치: `{branch.value}`")
