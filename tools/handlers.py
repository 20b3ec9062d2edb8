"""
MCP tool definitions for Play Store release management.

Tools: deploy_app, promote_release, get_releases, update_app_metadata

Each tool validates its arguments at the boundary (typed signature, enum
tracks, numeric bounds, non-blank strings) and only then calls the service.
"""
import logging
from datetime import datetime, timezone
from typing import Annotated, List, Literal, Optional

from mcp.server.fastmcp import FastMCP
from pydantic import Field

from playstore.models import DeploymentResult
from playstore.service import PlayStoreService
from utils import audit

logger = logging.getLogger(__name__)

TrackName = Literal["internal", "alpha", "beta", "production"]
SourceTrack = Literal["internal", "alpha", "beta"]
TargetTrack = Literal["alpha", "beta", "production"]

TOOL_NAMES = ("deploy_app", "promote_release", "get_releases", "update_app_metadata")

# Play Console store-listing limits
LISTING_LIMITS = {"title": 30, "shortDescription": 80, "fullDescription": 4000}


def _require(name: str, value: Optional[str]) -> str:
    """Reject blank strings the schema alone lets through."""
    if value is None or not value.strip():
        raise ValueError(f"{name} is required")
    return value.strip()


def _now() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="seconds")


def _format_result(result: DeploymentResult, action: str, id_label: str,
                   fields: List[str], time_label: str) -> str:
    """Render a DeploymentResult as a STATUS block."""
    if result.success:
        lines = [
            "STATUS: SUCCESS",
            f"{action} Successful",
            "=" * 32,
            *fields,
            f"{id_label}: {result.deployment_id}",
            "",
            f"Message: {result.message}",
            f"{time_label}: {_now()}",
        ]
    else:
        lines = [
            "STATUS: FAILED",
            f"{action} Failed",
            "=" * 32,
            *fields,
            "",
            f"Error: {result.message}",
        ]
        if result.error_detail:
            lines.append(f"Details: {result.error_detail}")
    return "\n".join(lines)


def format_deploy_result(result: DeploymentResult) -> str:
    fields = [
        f"Package Name: {result.package_name}",
        f"Track: {result.track}",
        f"Version Code: {result.version_code}",
    ]
    return _format_result(result, "App Deployment", "Deployment ID", fields, "Started at")


def format_promote_result(result: DeploymentResult, from_track: str) -> str:
    fields = [
        f"Package Name: {result.package_name}",
        f"Version Code: {result.version_code}",
        f"From Track: {from_track}",
        f"To Track: {result.track}",
    ]
    return _format_result(result, "Release Promotion", "Promotion ID", fields, "Completed at")


def register_tools(mcp: FastMCP, service: PlayStoreService):
    """Register the release-management tools against `service`."""
    logger.info("Registering Play Store deployment tools...")

    # ==================== TOOL 1: deploy_app ====================
    @mcp.tool()
    def deploy_app(
        packageName: Annotated[str, Field(description="Package name of the app (e.g., com.example.myapp)")],
        track: Annotated[TrackName, Field(description="Release track: internal, alpha, beta, production")],
        binaryPath: Annotated[str, Field(description="Path to the APK or AAB file")],
        versionCode: Annotated[int, Field(ge=1, description="Version code (must be higher than current)")],
        releaseNotes: Annotated[str, Field(description="Release notes for this version")] = "",
        rolloutFraction: Annotated[float, Field(
            gt=0.0, le=1.0,
            description="Fraction of users receiving the release (default: 1.0 for full rollout)",
        )] = 1.0,
    ) -> str:
        """
        Deploy a new version of an app to a Play Store track.

        Uploads the binary (.aab as app bundle, anything else as APK), creates a
        release on the track and commits it. rolloutFraction < 1.0 starts a
        staged rollout.

        Returns:
        - STATUS: SUCCESS with the deployment ID, or
        - STATUS: FAILED with the error message and details
        """
        package_name = _require("packageName", packageName)
        binary_path = _require("binaryPath", binaryPath)
        logger.info(
            "Deploy app tool called: %s to %s track with %.0f%% rollout",
            package_name, track, rolloutFraction * 100,
        )

        result = service.deploy_app(
            package_name, track, binary_path, versionCode, releaseNotes or None, rolloutFraction
        )
        audit.log_event(
            "deploy_app", ok=result.success, mock=service.is_mock,
            package=package_name, track=track, version_code=versionCode,
        )
        return format_deploy_result(result)

    # ==================== TOOL 2: promote_release ====================
    @mcp.tool()
    def promote_release(
        packageName: Annotated[str, Field(description="Package name of the app")],
        fromTrack: Annotated[SourceTrack, Field(description="Source track")],
        toTrack: Annotated[TargetTrack, Field(description="Target track")],
        versionCode: Annotated[int, Field(ge=1, description="Version code to promote")],
    ) -> str:
        """
        Promote a release from one track to another (e.g., alpha to beta).

        The release found on fromTrack is copied to toTrack as a completed
        release, keeping its name and release notes.
        """
        package_name = _require("packageName", packageName)
        if fromTrack == toTrack:
            raise ValueError("fromTrack and toTrack must differ")
        logger.info("Promote release tool called: %s from %s to %s", package_name, fromTrack, toTrack)

        result = service.promote_release(package_name, fromTrack, toTrack, versionCode)
        audit.log_event(
            "promote_release", ok=result.success, mock=service.is_mock,
            package=package_name, from_track=fromTrack, to_track=toTrack, version_code=versionCode,
        )
        return format_promote_result(result, fromTrack)

    # ==================== TOOL 3: get_releases ====================
    @mcp.tool()
    def get_releases(
        packageName: Annotated[str, Field(description="Package name of the app (e.g., com.example.myapp)")],
    ) -> str:
        """
        Get current status of app releases and deployments for a package.

        Returns a JSON document with every release (track, status, version
        code, rollout fraction) and summary counts.
        """
        package_name = _require("packageName", packageName)
        logger.info("Get releases tool called for package: %s", package_name)

        payload = service.get_releases(package_name)
        audit.log_event("get_releases", ok=True, mock=service.is_mock, package=package_name)
        return payload

    # ==================== TOOL 4: update_app_metadata ====================
    @mcp.tool()
    def update_app_metadata(
        packageName: Annotated[str, Field(description="Package name of the app")],
        title: Annotated[Optional[str], Field(description="New store title (max 30 chars)")] = None,
        shortDescription: Annotated[Optional[str], Field(
            description="New short description (max 80 chars)")] = None,
        fullDescription: Annotated[Optional[str], Field(
            description="New full description (max 4000 chars)")] = None,
    ) -> str:
        """
        Update the default-language store listing.

        Only the fields you pass are changed; omitted fields keep their
        current values. At least one field is required.
        """
        package_name = _require("packageName", packageName)
        supplied = {"title": title, "shortDescription": shortDescription, "fullDescription": fullDescription}
        if all(value is None for value in supplied.values()):
            raise ValueError("Provide at least one of title, shortDescription, fullDescription")
        for name, value in supplied.items():
            if value is not None and len(value) > LISTING_LIMITS[name]:
                raise ValueError(f"{name} exceeds {LISTING_LIMITS[name]} characters")
        logger.info("Update app metadata tool called for package: %s", package_name)

        ok = service.update_metadata(package_name, title, shortDescription, fullDescription)
        changed = [name for name, value in supplied.items() if value is not None]
        audit.log_event(
            "update_app_metadata", ok=ok, mock=service.is_mock, package=package_name, fields=changed,
        )

        if ok:
            return "\n".join([
                "STATUS: SUCCESS",
                f"Package Name: {package_name}",
                f"Updated Fields: {', '.join(changed)}",
                f"Updated at: {_now()}",
            ])
        return "\n".join([
            "STATUS: FAILED",
            f"Package Name: {package_name}",
            f"Fields: {', '.join(changed)}",
            "Reason: Store listing update was rejected or could not reach the Play Console. Check server logs.",
        ])

    logger.info("Play Store tools registered successfully: %s", ", ".join(TOOL_NAMES))
