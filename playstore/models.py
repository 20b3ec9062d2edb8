"""
Data models and enums for the Play Store MCP server.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple, Dict, Any


class ReleaseTrack(Enum):
    INTERNAL = "internal"
    ALPHA = "alpha"
    BETA = "beta"
    PRODUCTION = "production"

    @classmethod
    def parse(cls, value: str) -> "ReleaseTrack":
        """Case-insensitive lookup by track name."""
        normalized = (value or "").strip().lower()
        for track in cls:
            if track.value == normalized:
                return track
        valid = ", ".join(t.value for t in cls)
        raise ValueError(f"Unknown release track '{value}'. Use one of: {valid}")


# Promotion moves releases "up" the ladder only
PROMOTION_SOURCES = (ReleaseTrack.INTERNAL, ReleaseTrack.ALPHA, ReleaseTrack.BETA)
PROMOTION_TARGETS = (ReleaseTrack.ALPHA, ReleaseTrack.BETA, ReleaseTrack.PRODUCTION)


class ReleaseStatus(Enum):
    DRAFT = "draft"
    IN_PROGRESS = "inProgress"
    COMPLETED = "completed"
    HALTED = "halted"


UNKNOWN = "unknown"


@dataclass
class Release:
    """A single release on a track, flattened from the publisher API."""
    package_name: str
    track: str
    status: str
    version_code: int
    rollout_fraction: float = 1.0
    start_time: Optional[str] = None
    completed_time: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "packageName": self.package_name,
            "track": self.track,
            "status": self.status,
            "versionCode": self.version_code,
            "rolloutFraction": self.rollout_fraction,
            "startTime": self.start_time,
            "completedTime": self.completed_time,
        }


@dataclass
class DeploymentResult:
    """Outcome of a deploy or promote call. Failures are values, not exceptions."""
    success: bool
    package_name: str
    track: str
    version_code: int
    message: str
    deployment_id: Optional[str] = None
    error_detail: Optional[str] = None

    def __post_init__(self):
        if self.success and not self.deployment_id:
            raise ValueError("A successful deployment must carry a deployment_id")
        if not self.success and self.deployment_id:
            raise ValueError("A failed deployment cannot carry a deployment_id")

    @classmethod
    def failure(cls, package_name: str, track: str, version_code: int,
                message: str, error: Optional[BaseException] = None) -> "DeploymentResult":
        detail = f"{type(error).__name__}: {error}" if error is not None else None
        return cls(
            success=False,
            package_name=package_name,
            track=track,
            version_code=version_code,
            message=message,
            error_detail=detail,
        )


@dataclass(frozen=True)
class ServiceConfig:
    """Process-wide settings, read once from the environment."""
    credential_path: str
    application_name: str = "Play Store MCP Server"
    monitored_packages: Tuple[str, ...] = field(default_factory=tuple)
    default_track: ReleaseTrack = ReleaseTrack.INTERNAL
    mock_mode_enabled: bool = False
