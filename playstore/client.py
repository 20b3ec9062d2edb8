"""
PlayStoreClient: thin adapter over the Google Play Developer (Android Publisher v3) API.

Every mutating call follows the same edit-session protocol:
insert edit -> stage changes -> commit. Changes staged in an edit are
only applied on commit; deleting the edit throws them all away.
"""
import logging
import os
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional

import google_auth_httplib2
import httplib2
from google.oauth2 import service_account
from googleapiclient.discovery import build
from googleapiclient.http import MediaFileUpload, set_user_agent

from .config import (
    API_SCOPES, API_SERVICE_NAME, API_VERSION, APK_MIME_TYPE,
    BUNDLE_EXTENSION, BUNDLE_MIME_TYPE, DEFAULT_APPLICATION_NAME,
    DEFAULT_LANGUAGE, HTTP_TIMEOUT_SECONDS, UPLOAD_CHUNK_SIZE,
)
from .errors import ApiError
from .models import DeploymentResult, Release, ReleaseStatus, UNKNOWN

logger = logging.getLogger(__name__)


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="seconds")


def build_release_descriptor(version_code: int, release_notes: Optional[str] = None,
                             rollout_fraction: float = 1.0) -> Dict[str, Any]:
    """
    Build the TrackRelease body for a new version.

    A full rollout is expressed as status=completed with no userFraction;
    the API rejects an explicit userFraction of 1.0.
    """
    if not 0.0 <= rollout_fraction <= 1.0:
        raise ApiError(f"Rollout fraction must be within [0, 1], got {rollout_fraction}")

    release: Dict[str, Any] = {
        "name": f"Release {version_code}",
        "versionCodes": [str(version_code)],
    }
    if rollout_fraction < 1.0:
        release["status"] = ReleaseStatus.IN_PROGRESS.value
        release["userFraction"] = rollout_fraction
    else:
        release["status"] = ReleaseStatus.COMPLETED.value

    if release_notes and release_notes.strip():
        release["releaseNotes"] = [{"language": DEFAULT_LANGUAGE, "text": release_notes}]
    return release


def find_release(releases: Iterable[Dict[str, Any]], version_code: int) -> Optional[Dict[str, Any]]:
    """Return the release whose versionCodes contain version_code (the API sends them as strings)."""
    wanted = str(version_code)
    for release in releases:
        if wanted in [str(code) for code in release.get("versionCodes") or []]:
            return release
    return None


def release_from_api(package_name: str, track_name: str, payload: Dict[str, Any]) -> Optional[Release]:
    """Flatten one TrackRelease into a Release. Releases without version codes are skipped."""
    codes = payload.get("versionCodes") or []
    if not codes:
        return None
    status = payload.get("status") or UNKNOWN
    fraction = payload.get("userFraction")
    now = _now_iso()
    return Release(
        package_name=package_name,
        track=track_name or UNKNOWN,
        status=status,
        version_code=int(codes[0]),
        rollout_fraction=float(fraction) if fraction is not None else 1.0,
        start_time=now,
        completed_time=now if status == ReleaseStatus.COMPLETED.value else None,
    )


class PlayStoreClient:
    """
    Client for the Google Play Console publishing API.

    Pass `publisher` to reuse an already-built API resource; otherwise one
    is built from the service account key at `credential_path`.
    """

    def __init__(self, credential_path: str, application_name: str = DEFAULT_APPLICATION_NAME,
                 publisher: Any = None):
        self.credential_path = credential_path
        self.application_name = application_name
        self._publisher = publisher if publisher is not None else self._build_publisher()

    def _build_publisher(self):
        logger.info("Initializing Google Play Console API client...")
        if not os.path.isfile(self.credential_path):
            raise ApiError(f"Service account key file not found: {self.credential_path}")

        try:
            credentials = service_account.Credentials.from_service_account_file(
                self.credential_path, scopes=API_SCOPES
            )
            http = google_auth_httplib2.AuthorizedHttp(
                credentials, http=httplib2.Http(timeout=HTTP_TIMEOUT_SECONDS)
            )
            http = set_user_agent(http, self.application_name)
            publisher = build(API_SERVICE_NAME, API_VERSION, http=http, cache_discovery=False)
        except Exception as e:
            logger.error("Failed to initialize Google Play Console API client: %s", e)
            raise ApiError(f"Failed to initialize API client: {e}") from e

        logger.info("Google Play Console API client initialized successfully")
        return publisher

    # ==================== edit session helpers ====================

    def _edits(self):
        return self._publisher.edits()

    def _insert_edit(self, package_name: str) -> str:
        edit = self._edits().insert(packageName=package_name, body={}).execute()
        edit_id = edit["id"]
        logger.debug("Created edit %s for %s", edit_id, package_name)
        return edit_id

    def _commit_edit(self, package_name: str, edit_id: str):
        self._edits().commit(packageName=package_name, editId=edit_id).execute()
        logger.debug("Committed edit %s for %s", edit_id, package_name)

    def _discard_edit(self, package_name: str, edit_id: str):
        """Best-effort delete; a leftover edit expires server-side anyway."""
        try:
            self._edits().delete(packageName=package_name, editId=edit_id).execute()
            logger.debug("Discarded edit %s for %s", edit_id, package_name)
        except Exception as e:
            logger.warning("Could not discard edit %s for %s: %s", edit_id, package_name, e)

    def _update_track(self, package_name: str, edit_id: str, track: str, releases: List[Dict[str, Any]]):
        body = {"track": track, "releases": releases}
        self._edits().tracks().update(
            packageName=package_name, editId=edit_id, track=track, body=body
        ).execute()
        logger.debug("Updated track %s in edit %s", track, edit_id)

    def _upload_binary(self, package_name: str, edit_id: str, binary_path: str, version_code: int):
        if not os.path.isfile(binary_path):
            raise ApiError(f"Binary file not found: {binary_path}")

        is_bundle = binary_path.lower().endswith(BUNDLE_EXTENSION)
        media = MediaFileUpload(
            binary_path,
            mimetype=BUNDLE_MIME_TYPE if is_bundle else APK_MIME_TYPE,
            chunksize=UPLOAD_CHUNK_SIZE,
            resumable=True,
        )
        resource = self._edits().bundles() if is_bundle else self._edits().apks()
        response = resource.upload(packageName=package_name, editId=edit_id, media_body=media).execute()

        uploaded = (response or {}).get("versionCode")
        if uploaded is not None and int(uploaded) != version_code:
            logger.warning(
                "Uploaded binary reports version code %s, expected %s", uploaded, version_code
            )
        logger.debug("Upload completed for %s (%s)", package_name, "bundle" if is_bundle else "apk")

    # ==================== public operations ====================

    def list_releases(self, package_name: str) -> List[Release]:
        """Flatten the releases of every track. Raises ApiError on failure."""
        logger.debug("Fetching releases for %s", package_name)
        edit_id = None
        try:
            edit_id = self._insert_edit(package_name)
            response = self._edits().tracks().list(packageName=package_name, editId=edit_id).execute()

            releases: List[Release] = []
            for track in (response or {}).get("tracks", []):
                track_name = track.get("track") or UNKNOWN
                for payload in track.get("releases", []):
                    release = release_from_api(package_name, track_name, payload)
                    if release is not None:
                        releases.append(release)
            return releases
        except ApiError:
            raise
        except Exception as e:
            logger.error("Failed to fetch releases for %s: %s", package_name, e)
            raise ApiError(f"Failed to fetch releases: {e}") from e
        finally:
            if edit_id:
                self._discard_edit(package_name, edit_id)

    def deploy(self, package_name: str, track: str, binary_path: str, version_code: int,
               release_notes: Optional[str] = None, rollout_fraction: float = 1.0) -> DeploymentResult:
        """Upload a binary and release it on `track`. Failures come back as success=False."""
        logger.info(
            "Deploying %s to %s track, version %s (%.0f%% rollout)",
            package_name, track, version_code, rollout_fraction * 100,
        )
        edit_id = None
        try:
            edit_id = self._insert_edit(package_name)
            self._upload_binary(package_name, edit_id, binary_path, version_code)
            release = build_release_descriptor(version_code, release_notes, rollout_fraction)
            self._update_track(package_name, edit_id, track, [release])
            self._commit_edit(package_name, edit_id)
        except Exception as e:
            logger.error("Failed to deploy %s: %s", package_name, e)
            if edit_id:
                self._discard_edit(package_name, edit_id)
            return DeploymentResult.failure(
                package_name, track, version_code, f"Deployment failed: {e}", e
            )

        logger.info("Successfully deployed %s version %s to %s", package_name, version_code, track)
        message = f"Successfully deployed to {track} track"
        if rollout_fraction < 1.0:
            message += f" ({rollout_fraction:.0%} staged rollout)"
        return DeploymentResult(
            success=True,
            deployment_id=edit_id,
            package_name=package_name,
            track=track,
            version_code=version_code,
            message=message,
        )

    def promote(self, package_name: str, from_track: str, to_track: str, version_code: int) -> DeploymentResult:
        """
        Copy a release from one track to another as a completed release.

        Raises ApiError when the version is not on the source track; other
        failures come back as success=False.
        """
        logger.info("Promoting %s version %s from %s to %s", package_name, version_code, from_track, to_track)
        edit_id = None
        try:
            edit_id = self._insert_edit(package_name)
            source = self._edits().tracks().get(
                packageName=package_name, editId=edit_id, track=from_track
            ).execute()

            found = find_release((source or {}).get("releases", []), version_code)
            if found is None:
                raise ApiError(f"Version {version_code} not found in {from_track} track")

            promoted: Dict[str, Any] = {
                "versionCodes": found.get("versionCodes"),
                "status": ReleaseStatus.COMPLETED.value,
            }
            if found.get("name") is not None:
                promoted["name"] = found["name"]
            if found.get("releaseNotes") is not None:
                promoted["releaseNotes"] = found["releaseNotes"]

            self._update_track(package_name, edit_id, to_track, [promoted])
            self._commit_edit(package_name, edit_id)
        except ApiError:
            if edit_id:
                self._discard_edit(package_name, edit_id)
            raise
        except Exception as e:
            logger.error("Failed to promote %s: %s", package_name, e)
            if edit_id:
                self._discard_edit(package_name, edit_id)
            return DeploymentResult.failure(
                package_name, to_track, version_code, f"Promotion failed: {e}", e
            )

        logger.info("Successfully promoted %s version %s to %s", package_name, version_code, to_track)
        return DeploymentResult(
            success=True,
            deployment_id=edit_id,
            package_name=package_name,
            track=to_track,
            version_code=version_code,
            message=f"Successfully promoted from {from_track} to {to_track}",
        )

    def update_metadata(self, package_name: str, title: Optional[str] = None,
                        short_description: Optional[str] = None,
                        full_description: Optional[str] = None) -> bool:
        """Overwrite the supplied store-listing fields of the default language."""
        logger.info("Updating store listing for %s", package_name)
        edit_id = None
        try:
            edit_id = self._insert_edit(package_name)
            details = self._edits().details().get(packageName=package_name, editId=edit_id).execute()
            language = (details or {}).get("defaultLanguage") or DEFAULT_LANGUAGE

            response = self._edits().listings().list(packageName=package_name, editId=edit_id).execute()
            existing = next(
                (l for l in (response or {}).get("listings", []) if l.get("language") == language),
                None,
            )
            listing = dict(existing) if existing else {"language": language}

            if title is not None:
                listing["title"] = title
            if short_description is not None:
                listing["shortDescription"] = short_description
            if full_description is not None:
                listing["fullDescription"] = full_description

            self._edits().listings().update(
                packageName=package_name, editId=edit_id, language=language, body=listing
            ).execute()
            self._commit_edit(package_name, edit_id)
        except Exception as e:
            logger.error("Failed to update store listing for %s: %s", package_name, e)
            if edit_id:
                self._discard_edit(package_name, edit_id)
            return False

        logger.info("Store listing updated for %s (%s)", package_name, language)
        return True
