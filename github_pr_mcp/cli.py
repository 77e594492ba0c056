import asyncio
import logging
import sys
import click
from github_pr_mcp.config import ServerConfig
from github_pr_mcp.workflow import ToolContext, create_pr_confirmed, route

BANNER = "━" * 34


def configure_logging(level: str) -> None:
    # stdout carries the MCP stdio protocol, so logs go to stderr
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format='%(asctime)s - %(levelname)s - %(message)s',
        stream=sys.stderr,
    )


def _echo_artifact(artifact) -> None:
    click.echo(artifact.text, err=artifact.is_error)
    if artifact.is_error:
        sys.exit(1)


@click.group()
@click.pass_context
def cli(ctx):
    """github-pr-mcp - Interactive GitHub pull request workflow over MCP"""
    config = ServerConfig.from_env()
    configure_logging(config.log_level)
    ctx.obj = config


@cli.command()
@click.option('--transport', type=click.Choice(['stdio', 'http'], case_sensitive=False),
              default='stdio', help='MCP transport (default: stdio)')
@click.option('--host', default='127.0.0.1', help='Bind address for the http transport')
@click.option('--port', type=int, default=8000, help='Port for the http transport')
@click.pass_obj
def serve(config, transport, host, port):
    """Run the MCP server"""
    from github_pr_mcp.server import create_server

    logging.info(BANNER)
    logging.info("🚀 GitHub PR MCP Server")
    logging.info(BANNER)
    logging.info(f"Default working dir: {config.default_working_dir}")
    logging.info(f"GitHub token: {'✅ Configured' if config.has_github_token else '⚠️  Not configured'}")
    logging.info(f"Default base branch: {config.default_base_branch}")
    if config.template_path:
        logging.info(f"Custom PR template: {config.template_path}")
    logging.info(BANNER)

    server = create_server(ToolContext.from_config(config))
    logging.info("✅ Server started successfully")

    if transport.lower() == 'http':
        server.run(transport='http', host=host, port=port)
    else:
        server.run(transport='stdio')


@cli.command()
@click.option('--working-dir', '-w', type=click.Path(exists=True, file_okay=False),
              help='Git checkout to work in (default: WORKING_DIR or current directory)')
@click.option('--base-branch', '-b', help='Base branch for the PR')
@click.option('--jira-ticket', '-t', help="Ticket id, or '없음' for none")
@click.option('--confirmed', is_flag=True, help='Treat the draft as already confirmed')
@click.option('--context', 'additional_context', help='Additional context for the PR')
@click.pass_obj
def run(config, working_dir, base_branch, jira_ticket, confirmed, additional_context):
    """Run the next workflow step for the given inputs and print the result"""
    arguments = {
        'working_dir': working_dir or config.default_working_dir,
        'base_branch': base_branch,
        'jira_ticket': jira_ticket,
        'confirmed': confirmed,
        'additional_context': additional_context,
    }
    arguments = {key: value for key, value in arguments.items() if value is not None}

    artifact = asyncio.run(route(ToolContext.from_config(config), arguments))
    _echo_artifact(artifact)


@cli.command()
@click.option('--title', required=True, help='PR title')
@click.option('--body', required=True, help='PR body (markdown)')
@click.option('--base-branch', '-b', required=True, help='Base branch for the PR')
@click.option('--working-dir', '-w', type=click.Path(exists=True, file_okay=False),
              help='Git checkout to work in (default: WORKING_DIR or current directory)')
@click.pass_obj
def confirm(config, title, body, base_branch, working_dir):
    """Push the current branch if needed and create the PR"""
    arguments = {
        'title': title,
        'body': body,
        'base_branch': base_branch,
        'working_dir': working_dir or config.default_working_dir,
    }
    artifact = asyncio.run(create_pr_confirmed(ToolContext.from_config(config), arguments))
    _echo_artifact(artifact)


if __name__ == '__main__':
    cli()
