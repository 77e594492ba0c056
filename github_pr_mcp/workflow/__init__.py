"""
Pull request authoring workflow.

Routing, the individual workflow steps and PR content generation. All
functions are independent of the MCP transport, so they can be driven from
the server, the CLI or tests alike.
"""

# Shared dependencies
from .context import ToolContext

# PR content generation
from .pr_content import (
    generate_pr_title,
    generate_pr_body,
    classify_changes,
    truncate_diff,
    group_files_by_extension,
)

# Workflow steps
from .pr_steps import (
    start_pr_workflow,
    select_base_branch,
    generate_pr_content,
    create_pr_confirmed,
    get_current_branch,
)

# Smart routing
from .pr_router import route, plan_route

__all__ = [
    'ToolContext',
    # PR content
    'generate_pr_title',
    'generate_pr_body',
    'classify_changes',
    'truncate_diff',
    'group_files_by_extension',
    # Steps
    'start_pr_workflow',
    'select_base_branch',
    'generate_pr_content',
    'create_pr_confirmed',
    'get_current_branch',
    # Routing
    'route',
    'plan_route',
]
