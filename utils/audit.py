"""
Tool-call audit trail: one JSON line per tool invocation.

Location defaults to ~/.play-store-mcp/audit.jsonl and can be changed (or
disabled with an empty value) through PLAY_STORE_AUDIT_LOG.
"""
import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

from playstore.config import audit_log_path

logger = logging.getLogger(__name__)


def _audit_file() -> Optional[Path]:
    return audit_log_path()


def log_event(tool: str, ok: bool, mock: bool = False, **fields: Any):
    """
    Record a tool invocation.

    Args:
        tool: Tool name (e.g., "deploy_app")
        ok: Whether the tool reported success
        mock: Whether the call was served by mock mode
        fields: Extra JSON-serializable context (package, track, ...)
    """
    path = _audit_file()
    if path is None:
        return

    event = {
        "ts": datetime.now().isoformat(timespec="seconds"),
        "tool": tool,
        "ok": ok,
        "mock": mock,
    }
    event.update(fields)

    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "a") as f:
            f.write(json.dumps(event) + "\n")
    except (OSError, TypeError, ValueError) as e:
        # Never fail the tool call because of the audit trail
        logger.debug("Could not write audit event for %s: %s", tool, e)


def read_events(limit: Optional[int] = None) -> List[Dict[str, Any]]:
    """Return recorded events, oldest first (last `limit` if given)."""
    path = _audit_file()
    if path is None or not path.exists():
        return []

    events = []
    with open(path) as f:
        for line in f:
            if line.strip():
                events.append(json.loads(line))
    if limit is not None:
        events = events[-limit:]
    return events


def clear_events() -> str:
    """Delete the audit file."""
    path = _audit_file()
    if path is not None and path.exists():
        path.unlink()
    return "Audit log cleared."
