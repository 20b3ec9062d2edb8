"""
Read-only MCP resources: JSON snapshots produced by the service.
"""
import json
import logging

from mcp.server.fastmcp import FastMCP

from playstore.service import PlayStoreService

logger = logging.getLogger(__name__)

RELEASES_URI = "playstore://releases"
APPS_URI = "playstore://apps"
STATS_URI = "playstore://stats"
CONFIG_URI = "playstore://config"

RESOURCE_URIS = (RELEASES_URI, APPS_URI, STATS_URI, CONFIG_URI)


def register_resources(mcp: FastMCP, service: PlayStoreService):
    logger.info("Registering Play Store MCP resources...")

    @mcp.resource(
        RELEASES_URI,
        name="Release Status",
        description="Current status of app releases and deployments",
        mime_type="application/json",
    )
    def release_status() -> str:
        logger.info("Release status resource requested")
        return service.get_releases()

    @mcp.resource(
        APPS_URI,
        name="Apps",
        description="Monitored apps and their current version",
        mime_type="application/json",
    )
    def apps() -> str:
        logger.info("Apps resource requested")
        return service.list_apps()

    @mcp.resource(
        STATS_URI,
        name="App Statistics",
        description="Downloads, ratings and crash figures (sample data)",
        mime_type="application/json",
    )
    def stats() -> str:
        logger.info("Stats resource requested")
        return service.get_stats()

    @mcp.resource(
        CONFIG_URI,
        name="Server Configuration",
        description="Server info, Play Store configuration and capabilities",
        mime_type="application/json",
    )
    def server_config() -> str:
        logger.info("Config resource requested")
        return json.dumps(service.describe(), indent=2)

    logger.info("Play Store resources registered successfully: %s", ", ".join(RESOURCE_URIS))
