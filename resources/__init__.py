"""
MCP resources for the Play Store server.
"""
from .handlers import register_resources, RESOURCE_URIS

__all__ = ["register_resources", "RESOURCE_URIS"]
