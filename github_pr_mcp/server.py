"""
MCP server exposing the PR workflow as tools.

Tools return the step's text on success. Error artifacts are raised as
ToolError so the client receives them with isError set.
"""
import logging
from typing import Any, Dict, Optional

from fastmcp import FastMCP
from fastmcp.exceptions import ToolError

from github_pr_mcp.models import Artifact
from github_pr_mcp.workflow import (
    ToolContext,
    create_pr_confirmed as confirm_step,
    generate_pr_content as generate_step,
    get_current_branch as current_branch_step,
    route,
    select_base_branch as select_step,
    start_pr_workflow as start_step,
)

SERVER_NAME = "github-pr-mcp"

SERVER_INSTRUCTIONS = (
    "Interactive GitHub pull request creation. Analyses local git changes, "
    "drafts the PR title and body from the repository's PR template and opens "
    "the PR through the GitHub API. Always pass the current working directory "
    "as working_dir and carry base_branch, title and body forward between steps."
)

TOOL_NAMES = [
    "create_pr",
    "start_pr_workflow",
    "select_base_branch",
    "generate_pr_content",
    "create_pr_confirmed",
    "get_current_branch",
]


def _arguments(**values) -> Dict[str, Any]:
    return {key: value for key, value in values.items() if value is not None}


def _unwrap(artifact: Artifact) -> str:
    if artifact.is_error:
        raise ToolError(artifact.text)
    return artifact.text


def register_tools(mcp: FastMCP, context: ToolContext) -> None:
    """Register the PR workflow tools with the FastMCP server."""

    @mcp.tool(
        name="create_pr",
        description=(
            "Smart entry point for GitHub PR creation; routes by the information given.\n"
            "- no base_branch -> start_pr_workflow (choose a base branch)\n"
            "- base_branch only -> select_base_branch (change summary, asks for a ticket)\n"
            "- base_branch + jira_ticket -> generate_pr_content (draft, asks for confirmation)\n"
            "- base_branch + jira_ticket + confirmed=true -> generate_pr_content; then call "
            "create_pr_confirmed right away with the generated title and body, without asking.\n"
            "Pass values received from earlier calls again (they accumulate). "
            "Use jira_ticket='없음' when there is no ticket."
        ),
    )
    async def create_pr(
        working_dir: str,
        base_branch: Optional[str] = None,
        jira_ticket: Optional[str] = None,
        confirmed: bool = False,
        additional_context: Optional[str] = None,
    ) -> str:
        return _unwrap(await route(context, _arguments(
            working_dir=working_dir,
            base_branch=base_branch,
            jira_ticket=jira_ticket,
            confirmed=confirmed,
            additional_context=additional_context,
        )))

    @mcp.tool(
        name="start_pr_workflow",
        description=(
            "[STEP 1/4] Start the PR workflow: checks the current branch and lists "
            "base branch candidates. Ask the user to choose a base branch."
        ),
    )
    async def start_pr_workflow(working_dir: str) -> str:
        return _unwrap(await start_step(context, _arguments(working_dir=working_dir)))

    @mcp.tool(
        name="select_base_branch",
        description=(
            "[STEP 2/4] Set the chosen base branch and summarise the branch's changes. "
            "Afterwards ask the user for a ticket number ('없음' if none)."
        ),
    )
    async def select_base_branch(working_dir: str, base_branch: str) -> str:
        return _unwrap(await select_step(context, _arguments(
            working_dir=working_dir,
            base_branch=base_branch,
        )))

    @mcp.tool(
        name="generate_pr_content",
        description=(
            "[STEP 3/4] Draft the PR title and body from the changes, the ticket and the "
            "repository PR template. Show the draft; once the user confirms, call "
            "create_pr_confirmed with base_branch, title and body."
        ),
    )
    async def generate_pr_content(
        working_dir: str,
        base_branch: Optional[str] = None,
        jira_ticket: Optional[str] = None,
        additional_context: Optional[str] = None,
    ) -> str:
        return _unwrap(await generate_step(context, _arguments(
            working_dir=working_dir,
            base_branch=base_branch,
            jira_ticket=jira_ticket,
            additional_context=additional_context,
        )))

    @mcp.tool(
        name="create_pr_confirmed",
        description=(
            "[STEP 4/4] Create the GitHub PR after the user confirmed. Pushes the current "
            "branch when it is not on origin yet. Requires GITHUB_TOKEN. Pass the exact "
            "title, body and base_branch from the previous step."
        ),
    )
    async def create_pr_confirmed(
        title: str,
        body: str,
        base_branch: str,
        working_dir: str,
    ) -> str:
        return _unwrap(await confirm_step(context, _arguments(
            title=title,
            body=body,
            base_branch=base_branch,
            working_dir=working_dir,
        )))

    @mcp.tool(
        name="get_current_branch",
        description="[Utility] Return the current git branch of working_dir.",
    )
    async def get_current_branch(working_dir: str) -> str:
        return _unwrap(await current_branch_step(context, _arguments(working_dir=working_dir)))

    for name in TOOL_NAMES:
        logging.info(f"✓ Registered tool: {name}")


def create_server(context: ToolContext) -> FastMCP:
    mcp = FastMCP(name=SERVER_NAME, instructions=SERVER_INSTRUCTIONS)
    register_tools(mcp, context)
    return mcp
