"""
MCP tools for the Play Store server.
"""
from .handlers import register_tools, format_deploy_result, format_promote_result
from .diagnostics import register_diagnostic_tools

__all__ = [
    "register_tools",
    "register_diagnostic_tools",
    "format_deploy_result",
    "format_promote_result",
]
