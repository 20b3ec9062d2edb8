"""
Utilities module for the Play Store MCP server.
"""
from .audit import log_event, read_events, clear_events

__all__ = ["log_event", "read_events", "clear_events"]
