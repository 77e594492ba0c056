"""
Pull request template discovery.

Lookup order, first match wins:
1. <working_dir>/.github/PULL_REQUEST_TEMPLATE.md
2. <working_dir>/.github/pull_request_template.md
3. Custom path from PR_TEMPLATE_PATH
4. Built-in default template
"""
import logging
from pathlib import Path
from typing import List, Optional

DEFAULT_PR_TEMPLATE = """## 🛠 작업 내용

- JIRA:

## 📝 변경 사항

- [ ] 새로운 기능
- [ ] Bug fix
- [ ] 리팩토링
- [ ] 문서작성
- [ ] 테스트 코드
- [ ] 설정값 변경 / 유지보수

## ✔️ 체크리스트

- [ ] 단위 테스트 작성완료
- [ ] Local 테스트 완료

## 🙏🏻 리뷰 포인트 (To Reviewers)
"""


class TemplateLoader:

    def __init__(self, custom_template_path: Optional[str] = None):
        self.custom_template_path = custom_template_path

    def candidate_paths(self, working_dir: str) -> List[Path]:
        root = Path(working_dir)
        paths = [
            root / ".github" / "PULL_REQUEST_TEMPLATE.md",
            root / ".github" / "pull_request_template.md",
        ]
        if self.custom_template_path:
            paths.append(Path(self.custom_template_path))
        return paths

    def load(self, working_dir: str) -> str:
        """Return the PR template for working_dir, re-reading disk on every call."""
        for path in self.candidate_paths(working_dir):
            if not path.is_file():
                continue
            try:
                return path.read_text(encoding="utf-8")
            except (OSError, UnicodeDecodeError) as e:
                logging.warning(f"Skipping unreadable PR template {path}: {e}")

        return DEFAULT_PR_TEMPLATE
