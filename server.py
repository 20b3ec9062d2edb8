"""
Play Store MCP Server
Entry point for the MCP server (stdio transport).
"""
import logging
import os
import sys
from typing import Optional

try:
    from dotenv import load_dotenv
    from mcp.server.fastmcp import FastMCP
except ImportError as e:
    print(f"Error: Required package not found: {e}", file=sys.stderr)
    print("Please run: pip install -e .", file=sys.stderr)
    sys.exit(1)

from playstore.config import ENV_LOG_LEVEL, SERVER_NAME, load_config
from playstore.models import ServiceConfig
from playstore.service import PlayStoreService
from prompts import register_prompts
from resources import register_resources
from tools import register_diagnostic_tools, register_tools

logger = logging.getLogger(SERVER_NAME)


def configure_logging(level: Optional[str] = None):
    """Log to stderr; stdout carries the protocol."""
    name = (level or os.getenv(ENV_LOG_LEVEL, "INFO")).upper()
    logging.basicConfig(
        level=getattr(logging, name, logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stderr)],
    )


def create_server(config: ServiceConfig, service: Optional[PlayStoreService] = None) -> FastMCP:
    """Build the FastMCP server with every tool, resource and prompt wired to one service."""
    service = service or PlayStoreService(config)

    mcp = FastMCP(SERVER_NAME)
    register_tools(mcp, service)
    register_diagnostic_tools(mcp, service)
    register_resources(mcp, service)
    register_prompts(mcp)
    return mcp


def main():
    """Main entry point for script execution."""
    load_dotenv()
    configure_logging()
    logger.info("Starting Play Store MCP Server...")

    try:
        config = load_config()
        mcp = create_server(config)
    except Exception:
        logger.exception("Failed to start Play Store MCP Server")
        sys.exit(1)

    logger.info("Play Store MCP Server initialized successfully")
    mcp.run()


if __name__ == "__main__":
    main()
