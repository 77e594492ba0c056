"""
github-pr-mcp: an MCP server that walks an AI agent through creating a
GitHub pull request from a local git checkout.
"""
__version__ = "1.0.0"
