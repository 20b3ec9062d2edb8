"""
PlayStoreService: the single entry point used by tools and resources.

Decides between the live publisher API and mock data, and never lets a
missing or failing API turn into an error for the caller: reads fall back
to canned data, writes come back as DeploymentResult(success=False).
"""
import json
import logging
import os
import platform
import threading
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional

from .client import PlayStoreClient
from .config import (
    API_VERSION, MOCK_DEPLOY_PREFIX, MOCK_PROMOTE_PREFIX,
    SERVER_NAME, SERVER_VERSION,
)
from .errors import ApiError
from .mock_data import (
    FALLBACK_PACKAGE, mock_apps_payload, mock_id, mock_releases_payload,
    mock_stats_payload, releases_payload,
)
from .models import DeploymentResult, Release, ServiceConfig

logger = logging.getLogger(__name__)

ClientFactory = Callable[[ServiceConfig], PlayStoreClient]


def _default_client_factory(config: ServiceConfig) -> PlayStoreClient:
    return PlayStoreClient(config.credential_path, config.application_name)


def _dump(payload: Dict[str, Any]) -> str:
    return json.dumps(payload, indent=2)


class PlayStoreService:
    """
    Facade over PlayStoreClient with a mock fallback.

    The client is built on first use, exactly once, under a lock.
    """

    def __init__(self, config: ServiceConfig, client_factory: Optional[ClientFactory] = None):
        self.config = config
        self._client_factory = client_factory or _default_client_factory
        self._client: Optional[PlayStoreClient] = None
        self._lock = threading.Lock()
        self._mock = self._resolve_mock_mode()

        logger.info("Initializing Play Store Service...")
        logger.info("Configured apps: %d", len(config.monitored_packages))
        logger.info("Default track: %s", config.default_track.value)
        logger.info("Mode: %s", "mock" if self._mock else "live")

    def _resolve_mock_mode(self) -> bool:
        if self.config.mock_mode_enabled:
            logger.info("Mock mode enabled by configuration")
            return True
        path = self.config.credential_path
        if not path or not os.path.isfile(path):
            logger.warning(
                "Service account key not found (%s); running in mock mode", path or "<unset>"
            )
            return True
        return False

    @property
    def is_mock(self) -> bool:
        return self._mock

    def _get_client(self) -> PlayStoreClient:
        if self._client is None:
            with self._lock:
                if self._client is None:
                    self._client = self._client_factory(self.config)
        return self._client

    def _fallback_package(self, package_name: Optional[str]) -> str:
        if package_name:
            return package_name
        if self.config.monitored_packages:
            return self.config.monitored_packages[0]
        return FALLBACK_PACKAGE

    # ==================== releases ====================

    def get_releases(self, package_name: Optional[str] = None) -> str:
        """
        JSON document of releases plus summary counts.

        Any failure, or an empty result, yields the canned two-release payload.
        """
        logger.debug("Fetching releases for %s", package_name or "all monitored apps")
        fallback = self._fallback_package(package_name)
        if self._mock:
            return _dump(mock_releases_payload(fallback))

        packages = [package_name] if package_name else list(self.config.monitored_packages)
        releases: List[Release] = []
        try:
            client = self._get_client()
            for name in packages:
                releases.extend(client.list_releases(name))
        except Exception as e:
            logger.warning("Falling back to mock releases: %s", e)
            return _dump(mock_releases_payload(fallback))

        if not releases:
            logger.info("No releases returned by the API; serving mock releases")
            return _dump(mock_releases_payload(fallback))

        return _dump(releases_payload(releases, mock=False))

    # ==================== deployments ====================

    def deploy_app(self, package_name: str, track: str, binary_path: str, version_code: int,
                   release_notes: Optional[str] = None, rollout_fraction: float = 1.0) -> DeploymentResult:
        logger.info("Deploying app: %s to %s", package_name, track)
        if self._mock:
            return DeploymentResult(
                success=True,
                deployment_id=mock_id(MOCK_DEPLOY_PREFIX),
                package_name=package_name,
                track=track,
                version_code=version_code,
                message=(
                    f"Mock deployment to {track} track recorded "
                    f"(no Play Console integration configured, nothing was uploaded)"
                ),
            )

        try:
            return self._get_client().deploy(
                package_name, track, binary_path, version_code, release_notes, rollout_fraction
            )
        except Exception as e:
            logger.exception("Deployment of %s could not run", package_name)
            return DeploymentResult.failure(
                package_name, track, version_code, f"Deployment failed: {e}", e
            )

    def promote_release(self, package_name: str, from_track: str, to_track: str,
                        version_code: int) -> DeploymentResult:
        logger.info("Promoting release: %s from %s to %s", package_name, from_track, to_track)
        if self._mock:
            return DeploymentResult(
                success=True,
                deployment_id=mock_id(MOCK_PROMOTE_PREFIX),
                package_name=package_name,
                track=to_track,
                version_code=version_code,
                message=(
                    f"Mock promotion from {from_track} to {to_track} recorded "
                    f"(no Play Console integration configured)"
                ),
            )

        try:
            return self._get_client().promote(package_name, from_track, to_track, version_code)
        except ApiError as e:
            logger.warning("Promotion of %s rejected: %s", package_name, e)
            return DeploymentResult.failure(
                package_name, to_track, version_code, f"Promotion failed: {e}", e
            )
        except Exception as e:
            logger.exception("Promotion of %s could not run", package_name)
            return DeploymentResult.failure(
                package_name, to_track, version_code, f"Promotion failed: {e}", e
            )

    # ==================== store listing ====================

    def update_metadata(self, package_name: str, title: Optional[str] = None,
                        short_description: Optional[str] = None,
                        full_description: Optional[str] = None) -> bool:
        logger.info("Updating metadata for %s", package_name)
        if self._mock:
            return True
        try:
            return self._get_client().update_metadata(
                package_name, title, short_description, full_description
            )
        except Exception:
            logger.exception("Metadata update of %s could not run", package_name)
            return False

    # ==================== read-only snapshots ====================

    def list_apps(self) -> str:
        return _dump(mock_apps_payload(self.config.monitored_packages))

    def get_stats(self, package_name: Optional[str] = None) -> str:
        return _dump(mock_stats_payload(self._fallback_package(package_name)))

    def describe(self) -> Dict[str, Any]:
        """Server configuration snapshot."""
        return {
            "serverInfo": {
                "name": SERVER_NAME,
                "version": SERVER_VERSION,
                "protocol": "MCP (Model Context Protocol)",
                "transport": "stdio",
            },
            "playStoreConfig": {
                "apiVersion": API_VERSION,
                "applicationName": self.config.application_name,
                "serviceAccountConfigured": not self._mock,
                "mockMode": self._mock,
                "defaultTrack": self.config.default_track.value,
                "supportedFormats": ["apk", "aab"],
                "monitoredApps": len(self.config.monitored_packages),
            },
            "capabilities": {
                "resources": True,
                "tools": True,
                "prompts": True,
                "logging": True,
            },
            "environment": {
                "pythonVersion": platform.python_version(),
                "platform": platform.platform(),
            },
            "timestamp": datetime.now(timezone.utc).isoformat(timespec="seconds"),
        }
