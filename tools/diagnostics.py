"""
Connectivity and introspection tools: ping, echo, server_info.
"""
import logging
from datetime import datetime, timezone

from mcp.server.fastmcp import FastMCP

from playstore.service import PlayStoreService

logger = logging.getLogger(__name__)


def register_diagnostic_tools(mcp: FastMCP, service: PlayStoreService):
    logger.info("Registering diagnostic tools...")

    @mcp.tool()
    def ping() -> str:
        """Simple ping tool to test MCP server connectivity."""
        logger.info("Ping tool called")
        return f"Pong! MCP Server is running at {datetime.now(timezone.utc).isoformat(timespec='seconds')}"

    @mcp.tool()
    def echo(message: str) -> str:
        """
        Echo tool that repeats the input message.

        Args:
            message: Message to echo back
        """
        logger.info("Echo tool called with message: %s", message)
        return f"Echo: {message}"

    @mcp.tool()
    def server_info() -> str:
        """Get information about the MCP server: version, transport, mode and capabilities."""
        logger.info("Server info tool called")
        info = service.describe()
        server = info["serverInfo"]
        store = info["playStoreConfig"]
        capabilities = [name.title() for name, enabled in info["capabilities"].items() if enabled]
        lines = [
            "Play Store MCP Server Information:",
            f"- Name: {server['name']}",
            f"- Version: {server['version']}",
            f"- Protocol: {server['protocol']}",
            f"- Transport: {server['transport'].upper()}",
            f"- Capabilities: {', '.join(capabilities)}",
            f"- Mode: {'MOCK' if store['mockMode'] else 'LIVE'}",
            f"- Default Track: {store['defaultTrack']}",
            f"- Monitored Apps: {store['monitoredApps']}",
            "- Status: Running",
            f"- Timestamp: {info['timestamp']}",
        ]
        return "\n".join(lines)

    logger.info("Diagnostic tools registered successfully: ping, echo, server_info")
