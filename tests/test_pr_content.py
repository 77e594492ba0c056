"""
Tests for PR content generation.

Tests for PR titles, change classification, body rendering, diff truncation
and file grouping.
"""
import pytest
from github_pr_mcp.services.template_loader import DEFAULT_PR_TEMPLATE
from github_pr_mcp.workflow.pr_content import (
    change_type_checklist,
    classify_changes,
    describe_group,
    generate_pr_body,
    generate_pr_title,
    group_files_by_extension,
    preview_list,
    truncate_diff,
)


class TestGeneratePRTitle:
    """Tests for PR title generation."""

    def test_prefixes_ticket(self):
        """Should put the ticket in brackets before the newest commit."""
        assert generate_pr_title("PROJ-42", ["fix bug", "older commit"]) == "[PROJ-42] fix bug"

    def test_no_ticket_sentinel(self):
        """Should omit the ticket entirely for '없음'."""
        assert generate_pr_title("없음", ["fix bug"]) == "fix bug"

    def test_empty_ticket(self):
        """Should omit the ticket when it is empty."""
        assert generate_pr_title("", ["fix bug"]) == "fix bug"

    def test_no_commits_uses_placeholder(self):
        """Should fall back to the placeholder subject."""
        assert generate_pr_title("PROJ-1", []) == "[PROJ-1] 변경사항"
        assert generate_pr_title("", []) == "변경사항"


class TestClassifyChanges:
    """Tests for keyword-based change classification."""

    def test_feature_from_commit(self):
        assert classify_changes(["a.go", "b.go"], ["feat: add x"]) == ["feature"]

    def test_defaults_to_maintenance(self):
        assert classify_changes(["build.gradle"], ["bump version"]) == ["maintenance"]

    def test_docs_from_extension(self):
        assert classify_changes(["README.md"], ["update readme"]) == ["docs"]

    def test_case_insensitive(self):
        assert classify_changes(["src/App.kt"], ["FIX crash"]) == ["bugfix"]

    def test_multiple_types_in_checklist_order(self):
        """Should report matches in the fixed checklist order."""
        result = classify_changes(
            ["tests/test_api.py", "docs/guide.rst"],
            ["refactor api", "fix typo"],
        )
        assert result == ["bugfix", "refactor", "docs", "tests"]


class TestGeneratePRBody:
    """Tests for PR body generation from templates."""

    def test_default_template_checks_only_feature(self):
        """Should check the feature box and leave every other box empty."""
        body = generate_pr_body(
            DEFAULT_PR_TEMPLATE, "없음", ["feat: add x"], ["feature"], ["a.go", "b.go"]
        )

        assert "- [x] 새로운 기능" in body
        assert "- [ ] Bug fix" in body
        assert "- [ ] 리팩토링" in body
        assert "- [ ] 문서작성" in body
        assert "- [ ] 테스트 코드" in body
        assert "- [ ] 설정값 변경 / 유지보수" in body
        assert body.count("[x]") == 1

    def test_fills_ticket_and_commit_summary(self):
        body = generate_pr_body(
            DEFAULT_PR_TEMPLATE, "PROJ-42", ["fix bug", "add tests"], ["bugfix"], ["a.py"]
        )

        lines = body.splitlines()
        jira_index = lines.index("- JIRA: PROJ-42")
        assert lines[jira_index + 1] == "- fix bug"
        assert lines[jira_index + 2] == "- add tests"

    def test_missing_ticket_shows_sentinel(self):
        body = generate_pr_body(DEFAULT_PR_TEMPLATE, "", ["x"], ["maintenance"], ["a.py"])

        assert "- JIRA: 없음" in body

    def test_testing_steps_stay_unchecked(self):
        """Should never tick the testing checklist, even with a tests change."""
        body = generate_pr_body(
            DEFAULT_PR_TEMPLATE, "없음", ["add tests"], ["tests", "feature"], ["test_a.py"]
        )

        assert "- [ ] 단위 테스트 작성완료" in body
        assert "- [ ] Local 테스트 완료" in body
        assert "- [x] 테스트 코드" in body

    def test_lists_changed_files_with_overflow(self):
        files = [f"src/file{i}.py" for i in range(13)]

        body = generate_pr_body(DEFAULT_PR_TEMPLATE, "없음", ["x"], ["maintenance"], files)

        assert "## 📁 변경된 파일 (13개)" in body
        assert "- src/file9.py" in body
        assert "- src/file10.py" not in body
        assert "- ... 외 3개" in body

    def test_custom_template_without_known_sections(self):
        """Should add the summary and checklist sections the template lacks."""
        template = "## Description\n\n- [x] I have read the guidelines\n"

        body = generate_pr_body(template, "ABC-7", ["feat: login"], ["feature"], ["login.ts"])

        assert body.startswith("## 🛠 작업 내용")
        assert "- JIRA: ABC-7" in body
        assert "- [ ] I have read the guidelines" in body
        assert "## 📝 변경 유형" in body
        assert "- [x] 새로운 기능" in body

    def test_custom_template_english_checkboxes(self):
        template = (
            "JIRA: TBD\n"
            "## Type of change\n"
            "- [ ] New feature\n"
            "- [ ] Bug fix\n"
            "- [ ] Documentation\n"
        )

        body = generate_pr_body(template, "없음", ["fix crash"], ["bugfix"], ["a.py"])

        assert "- [ ] New feature" in body
        assert "- [x] Bug fix" in body
        assert "- [ ] Documentation" in body
        assert "## 📝 변경 유형" not in body

    def test_review_checklist_never_ticked(self):
        """Should only classify the change-type list, not later checklists."""
        template = (
            "## Type\n"
            "- [ ] Feature\n"
            "- [ ] Docs\n"
            "\n"
            "## Checklist\n"
            "- [ ] Docs updated where needed\n"
            "- [ ] Test code added\n"
        )

        body = generate_pr_body(template, "없음", ["update readme"], ["docs", "tests"], ["README.md"])

        assert "- [x] Docs\n" in body
        assert "- [ ] Feature" in body
        assert "- [ ] Docs updated where needed" in body
        assert "- [ ] Test code added" in body
        assert "## 📝 변경 유형" not in body

    def test_change_type_checklist_order(self):
        checklist = change_type_checklist(["docs"])

        assert checklist[0] == "- [ ] 새로운 기능"
        assert checklist[3] == "- [x] 문서작성"
        assert len(checklist) == 6


class TestTruncateDiff:
    """Tests for diff preview truncation."""

    def test_301_lines_truncated(self):
        diff = "\n".join(f"+line {i}" for i in range(301))

        result = truncate_diff(diff)
        lines = result.splitlines()

        assert len(lines) == 301
        assert lines[:300] == diff.splitlines()[:300]
        assert "300" in lines[-1]
        assert "301" in lines[-1]

    def test_300_lines_unchanged(self):
        diff = "\n".join(f"+line {i}" for i in range(300)) + "\n"

        assert truncate_diff(diff) == diff

    def test_empty_diff(self):
        assert truncate_diff("") == ""


class TestFileGrouping:
    """Tests for grouping changed files by extension."""

    def test_groups_in_first_seen_order(self):
        grouped = group_files_by_extension(["a.go", "Makefile", "b.go", "docs/x.md"])

        assert list(grouped.keys()) == ["go", "other", "md"]
        assert grouped["go"] == ["a.go", "b.go"]

    def test_dots_in_directories_are_ignored(self):
        grouped = group_files_by_extension(["v1.2/Dockerfile", ".github/CODEOWNERS"])

        assert grouped == {"other": ["v1.2/Dockerfile", ".github/CODEOWNERS"]}

    def test_describe_group_preview(self):
        files = ["a.go", "b.go", "c.go", "d.go", "e.go"]

        assert describe_group("go", files) == "📁 .go (5개): a.go, b.go, c.go 외 2개"
        assert describe_group("other", ["Makefile"]) == "📁 other (1개): Makefile"


@pytest.mark.parametrize("count, expected_overflow", [(3, None), (12, "- ... 외 2개")])
def test_preview_list(count, expected_overflow):
    items = [f"item{i}" for i in range(count)]

    lines = preview_list(items, 10)

    if expected_overflow is None:
        assert len(lines) == count
    else:
        assert len(lines) == 11
        assert lines[-1] == expected_overflow
