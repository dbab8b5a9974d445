"""
Rootstock MCP server package.

This package exposes LLM-friendly wallet, transfer, token and contract tools
backed by a Rootstock JSON-RPC node. See DESIGN.md for full details.
"""

__all__ = ["config"]
