"""
Content generation for GitHub Pull Requests.

Functions to generate PR titles and descriptions from branch metadata
(commit subjects, changed files, diff) and the repository's PR template.
"""
import os
import re
from typing import Dict, List, Sequence, Set

NO_TICKET = "없음"
TITLE_PLACEHOLDER = "변경사항"

DIFF_PREVIEW_LINES = 300
COMMIT_PREVIEW_LIMIT = 10
FILE_PREVIEW_LIMIT = 10
GROUP_PREVIEW_LIMIT = 3

DOC_EXTENSIONS = ('.md', '.rst', '.txt', '.adoc')

# (key, checklist label, template aliases) in checklist order
CHANGE_TYPES = [
    ('feature', '새로운 기능', ('새로운 기능', 'feature')),
    ('bugfix', 'Bug fix', ('bug fix', 'bugfix', '버그')),
    ('refactor', '리팩토링', ('리팩토링', 'refactor')),
    ('docs', '문서작성', ('문서', 'documentation', 'docs')),
    ('tests', '테스트 코드', ('테스트 코드', 'test code')),
    ('maintenance', '설정값 변경 / 유지보수', ('설정값 변경', '유지보수', 'maintenance', 'chore')),
]

JIRA_LINE = re.compile(r'^(\s*(?:[-*]\s*)?)JIRA\s*:.*$', re.IGNORECASE)
CHECKBOX_LINE = re.compile(r'^(\s*[-*]\s*)\[[ xX]\]\s*(.*)$')


def has_ticket(ticket: str) -> bool:
    return bool(ticket) and ticket != NO_TICKET


def generate_pr_title(ticket: str, commits: Sequence[str]) -> str:
    """
    Generate the PR title from the ticket and the newest commit subject.

    Example:
        "[PROJ-42] fix bug"
    """
    subject = commits[0] if commits else TITLE_PLACEHOLDER
    if has_ticket(ticket):
        return f"[{ticket}] {subject}"
    return subject


def classify_changes(changed_files: Sequence[str], commits: Sequence[str]) -> List[str]:
    """
    Guess the kinds of change on a branch from keywords in paths and commits.

    Returns:
        Matched change-type keys in checklist order; ['maintenance'] when
        nothing matched
    """
    haystack = ' '.join(list(changed_files) + list(commits)).lower()

    matched = set()
    if 'test' in haystack:
        matched.add('tests')
    if any(f.lower().endswith(DOC_EXTENSIONS) for f in changed_files):
        matched.add('docs')
    if 'fix' in haystack:
        matched.add('bugfix')
    if 'feat' in haystack or 'add' in haystack:
        matched.add('feature')
    if 'refactor' in haystack:
        matched.add('refactor')

    if not matched:
        return ['maintenance']
    return [key for key, _, _ in CHANGE_TYPES if key in matched]


def _change_type_for_label(label: str):
    lowered = label.lower()
    for key, _, aliases in CHANGE_TYPES:
        if any(alias in lowered for alias in aliases):
            return key
    return None


def _change_type_block(lines: Sequence[str]) -> Set[int]:
    """Line indices of the first run of checkboxes that names a change type."""
    block: List[int] = []
    for index, line in enumerate(list(lines) + ['']):
        if CHECKBOX_LINE.match(line):
            block.append(index)
            continue
        if any(_change_type_for_label(CHECKBOX_LINE.match(lines[i]).group(2)) for i in block):
            return set(block)
        block = []
    return set()


def preview_list(items: Sequence[str], limit: int, bullet: str = "- ") -> List[str]:
    """Bullet the first `limit` items and add an overflow line for the rest."""
    lines = [f"{bullet}{item}" for item in items[:limit]]
    if len(items) > limit:
        lines.append(f"{bullet}... 외 {len(items) - limit}개")
    return lines


def change_type_checklist(change_types: Sequence[str]) -> List[str]:
    return [
        f"- [{'x' if key in change_types else ' '}] {label}"
        for key, label, _ in CHANGE_TYPES
    ]


def generate_pr_body(
    template: str,
    ticket: str,
    commits: Sequence[str],
    change_types: Sequence[str],
    changed_files: Sequence[str],
) -> str:
    """
    Fill a PR template with branch metadata.

    The template's JIRA line receives the ticket followed by a commit summary,
    checkboxes in the template's first change-type list are checked when that
    change type was detected, and every other checkbox (testing and review
    steps) is left unchecked for the author.
    Sections the template lacks are added, and a bounded list of changed
    files is always appended.

    Args:
        template: PR template markdown
        ticket: Ticket id, "" or "없음" for none
        commits: Commit subjects, newest first
        change_types: Keys from classify_changes()
        changed_files: Changed file paths in diff order

    Returns:
        Markdown PR body
    """
    ticket_text = ticket if has_ticket(ticket) else NO_TICKET
    commit_summary = preview_list(commits, COMMIT_PREVIEW_LIMIT)

    lines = template.splitlines()
    type_block = _change_type_block(lines)

    body = []
    ticket_filled = False

    for index, line in enumerate(lines):
        jira = JIRA_LINE.match(line)
        if jira and not ticket_filled:
            body.append(f"{jira.group(1)}JIRA: {ticket_text}")
            body.extend(commit_summary)
            ticket_filled = True
            continue

        checkbox = CHECKBOX_LINE.match(line)
        if checkbox:
            prefix, label = checkbox.group(1), checkbox.group(2)
            key = _change_type_for_label(label) if index in type_block else None
            mark = 'x' if key is not None and key in change_types else ' '
            body.append(f"{prefix}[{mark}] {label}")
            continue

        body.append(line)

    if not ticket_filled:
        summary = ["## 🛠 작업 내용", "", f"- JIRA: {ticket_text}"]
        summary.extend(commit_summary)
        summary.append("")
        body = summary + body

    while body and not body[-1].strip():
        body.pop()

    if not type_block:
        body.append("")
        body.append("## 📝 변경 유형")
        body.append("")
        body.extend(change_type_checklist(change_types))

    body.append("")
    body.append(f"## 📁 변경된 파일 ({len(changed_files)}개)")
    body.append("")
    body.extend(preview_list(changed_files, FILE_PREVIEW_LIMIT))

    return '\n'.join(body)


def truncate_diff(diff: str, limit: int = DIFF_PREVIEW_LINES) -> str:
    """
    Cap a unified diff at `limit` lines.

    Longer diffs keep their first `limit` lines followed by a single marker
    line naming the total; shorter diffs are returned unchanged.
    """
    lines = diff.splitlines()
    if len(lines) <= limit:
        return diff
    return '\n'.join(lines[:limit] + [f"... (총 {len(lines)}줄 중 {limit}줄만 표시)"])


def file_extension(path: str) -> str:
    _, ext = os.path.splitext(os.path.basename(path))
    return ext[1:] if ext else 'other'


def group_files_by_extension(changed_files: Sequence[str]) -> Dict[str, List[str]]:
    """Group paths by extension, keeping first-seen order; 'other' for none."""
    grouped: Dict[str, List[str]] = {}
    for path in changed_files:
        grouped.setdefault(file_extension(path), []).append(path)
    return grouped


def describe_group(ext: str, files: Sequence[str], limit: int = GROUP_PREVIEW_LIMIT) -> str:
    label = ext if ext == 'other' else f".{ext}"
    preview = ', '.join(files[:limit])
    more = f" 외 {len(files) - limit}개" if len(files) > limit else ""
    return f"📁 {label} ({len(files)}개): {preview}{more}"
