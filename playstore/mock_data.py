"""
Canned payloads returned when the publisher API is not available.
"""
import time
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional, Sequence

from .models import Release, ReleaseStatus, ReleaseTrack

FALLBACK_PACKAGE = "com.example.app"


def _iso(dt: datetime) -> str:
    return dt.isoformat(timespec="seconds")


def mock_id(prefix: str) -> str:
    """Synthetic deployment id: prefix plus wall-clock milliseconds."""
    return f"{prefix}{int(time.time() * 1000)}"


def summarize(releases: Sequence[Release]) -> Dict[str, int]:
    return {
        "total": len(releases),
        "inProgress": sum(1 for r in releases if r.status == ReleaseStatus.IN_PROGRESS.value),
        "completed": sum(1 for r in releases if r.status == ReleaseStatus.COMPLETED.value),
    }


def mock_releases(package_name: str) -> List[Release]:
    """Two example releases: a staged production rollout and a finished beta."""
    now = datetime.now(timezone.utc)
    return [
        Release(
            package_name=package_name,
            track=ReleaseTrack.PRODUCTION.value,
            status=ReleaseStatus.IN_PROGRESS.value,
            version_code=42,
            rollout_fraction=0.2,
            start_time=_iso(now - timedelta(days=1)),
        ),
        Release(
            package_name=package_name,
            track=ReleaseTrack.BETA.value,
            status=ReleaseStatus.COMPLETED.value,
            version_code=41,
            rollout_fraction=1.0,
            start_time=_iso(now - timedelta(days=7)),
            completed_time=_iso(now - timedelta(days=5)),
        ),
    ]


def releases_payload(releases: Sequence[Release], mock: bool) -> Dict[str, Any]:
    return {
        "releases": [r.to_dict() for r in releases],
        "summary": summarize(releases),
        "lastUpdate": _iso(datetime.now(timezone.utc)),
        "mock": mock,
    }


def mock_releases_payload(package_name: str) -> Dict[str, Any]:
    return releases_payload(mock_releases(package_name), mock=True)


def mock_apps_payload(packages: Sequence[str]) -> Dict[str, Any]:
    names = list(packages) or [FALLBACK_PACKAGE]
    now = datetime.now(timezone.utc)
    apps = []
    for i, package_name in enumerate(names):
        apps.append({
            "packageName": package_name,
            "name": package_name.rsplit(".", 1)[-1].replace("_", " ").title(),
            "status": "published",
            "currentVersionCode": 42 - i,
            "currentVersionName": f"2.{max(4 - i, 0)}.0",
            "lastUpdated": _iso(now - timedelta(days=1 + i)),
        })
    return {"apps": apps, "total": len(apps), "mock": True}


def mock_stats_payload(package_name: Optional[str] = None) -> Dict[str, Any]:
    """Fixed app statistics; nothing here is computed."""
    now = datetime.now(timezone.utc)
    return {
        "packageName": package_name or FALLBACK_PACKAGE,
        "downloads": {"total": 125000, "last30Days": 8400, "last7Days": 2100},
        "ratings": {
            "average": 4.3,
            "totalRatings": 3120,
            "distribution": {
                "fiveStars": 1980,
                "fourStars": 610,
                "threeStars": 240,
                "twoStars": 110,
                "oneStar": 180,
            },
        },
        "crashes": {"crashRate": 0.8, "last30Days": 67},
        "reportPeriod": {"start": _iso(now - timedelta(days=30)), "end": _iso(now)},
        "mock": True,
    }
