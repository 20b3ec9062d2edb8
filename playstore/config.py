"""
Configuration and constants for the Play Store MCP server.
"""
import os
from pathlib import Path
from typing import Mapping, Optional, Tuple

from .models import ReleaseTrack, ServiceConfig

SERVER_NAME = "play-store-mcp"
SERVER_VERSION = "1.0.0"
DEFAULT_APPLICATION_NAME = "Play Store MCP Server"

# Environment variables read once at startup
ENV_CREDENTIAL_PATH = "PLAY_STORE_SERVICE_ACCOUNT_KEY_PATH"
ENV_APPLICATION_NAME = "PLAY_STORE_APPLICATION_NAME"
ENV_PACKAGE_NAMES = "PLAY_STORE_PACKAGE_NAMES"
ENV_DEFAULT_TRACK = "PLAY_STORE_DEFAULT_TRACK"
ENV_MOCK_MODE = "PLAY_STORE_MOCK_MODE"
ENV_LOG_LEVEL = "PLAY_STORE_LOG_LEVEL"
ENV_AUDIT_LOG = "PLAY_STORE_AUDIT_LOG"

# Android Publisher API
API_SERVICE_NAME = "androidpublisher"
API_VERSION = "v3"
API_SCOPES = ["https://www.googleapis.com/auth/androidpublisher"]

# Upload content types, keyed by whether the binary is an app bundle
BUNDLE_EXTENSION = ".aab"
BUNDLE_MIME_TYPE = "application/octet-stream"
APK_MIME_TYPE = "application/vnd.android.package-archive"

# Resumable upload chunk size (bytes)
UPLOAD_CHUNK_SIZE = 16 * 1024 * 1024

# httplib2 only has a per-socket timeout: it bounds a stalled read, not a whole upload
HTTP_TIMEOUT_SECONDS = 300

DEFAULT_LANGUAGE = "en-US"

MOCK_DEPLOY_PREFIX = "mock-deploy-"
MOCK_PROMOTE_PREFIX = "mock-promote-"

DEFAULT_AUDIT_LOG = Path.home() / ".play-store-mcp" / "audit.jsonl"

_TRUE_VALUES = ("1", "true", "yes", "on")
_FALSE_VALUES = ("", "0", "false", "no", "off")


def _parse_bool(name: str, raw: str) -> bool:
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ValueError(f"{name} must be a boolean flag (true/false), got '{raw}'")


def _parse_packages(raw: str) -> Tuple[str, ...]:
    return tuple(p.strip() for p in raw.split(",") if p.strip())


def load_config(environ: Optional[Mapping[str, str]] = None) -> ServiceConfig:
    """
    Build the ServiceConfig from environment variables.

    Raises ValueError for malformed values (unknown track, bad boolean);
    the server treats that as fatal at startup.
    """
    env = os.environ if environ is None else environ

    default_track = ReleaseTrack.parse(env.get(ENV_DEFAULT_TRACK, ReleaseTrack.INTERNAL.value))

    return ServiceConfig(
        credential_path=env.get(ENV_CREDENTIAL_PATH, "").strip(),
        application_name=env.get(ENV_APPLICATION_NAME, "").strip() or DEFAULT_APPLICATION_NAME,
        monitored_packages=_parse_packages(env.get(ENV_PACKAGE_NAMES, "")),
        default_track=default_track,
        mock_mode_enabled=_parse_bool(ENV_MOCK_MODE, env.get(ENV_MOCK_MODE, "")),
    )


def audit_log_path(environ: Optional[Mapping[str, str]] = None) -> Optional[Path]:
    """Audit file location; None when explicitly disabled with an empty value."""
    env = os.environ if environ is None else environ
    if ENV_AUDIT_LOG not in env:
        return DEFAULT_AUDIT_LOG
    raw = env[ENV_AUDIT_LOG].strip()
    return Path(raw).expanduser() if raw else None
