"""
Smart entry point: pick the workflow step from the fields the caller supplied.

    base_branch + jira_ticket + confirmed -> generate_pr_content
    base_branch + jira_ticket             -> generate_pr_content
    base_branch                           -> select_base_branch
    anything else                         -> start_pr_workflow

With confirmed=true the router still stops at generate_pr_content. That step
always returns a confirmation request; the agent treats the flag as consent
and immediately calls create_pr_confirmed with the generated title and body.
"""
import logging
from typing import Any, Awaitable, Callable, Dict, Mapping, Tuple

from github_pr_mcp.models import Artifact, WorkflowInput
from github_pr_mcp.workflow.context import ToolContext
from github_pr_mcp.workflow.pr_steps import (
    generate_pr_content,
    select_base_branch,
    start_pr_workflow,
)

Step = Callable[[ToolContext, Mapping[str, Any]], Awaitable[Artifact]]


def _forward(**arguments) -> Dict[str, str]:
    """Argument map for the next step; blank optional values are dropped."""
    return {key: value for key, value in arguments.items() if value}


def plan_route(workflow: WorkflowInput) -> Tuple[Step, Dict[str, str]]:
    """
    Choose the step to run and the arguments to hand it.

    A missing base_branch always means starting over, whatever else was given.
    """
    if workflow.base_branch is not None and workflow.jira_ticket is not None:
        return generate_pr_content, _forward(
            working_dir=workflow.working_dir,
            base_branch=workflow.base_branch,
            jira_ticket=workflow.jira_ticket,
            additional_context=workflow.additional_context,
        )

    if workflow.base_branch is not None:
        return select_base_branch, _forward(
            working_dir=workflow.working_dir,
            base_branch=workflow.base_branch,
        )

    return start_pr_workflow, _forward(working_dir=workflow.working_dir)


async def route(context: ToolContext, arguments: Mapping[str, Any]) -> Artifact:
    workflow = WorkflowInput.from_arguments(arguments)
    if not workflow.working_dir:
        return Artifact.error("❌ working_dir 값이 필요합니다.")

    step, forwarded = plan_route(workflow)
    logging.info(f"create_pr routed to {step.__name__} (confirmed={workflow.confirmed})")
    return await step(context, forwarded)
