from github_pr_mcp.cli import cli

cli()
