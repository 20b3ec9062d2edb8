"""
Play Store module: models, configuration, API client and service facade.
"""
from .models import (
    ReleaseTrack, ReleaseStatus, Release, DeploymentResult, ServiceConfig,
    PROMOTION_SOURCES, PROMOTION_TARGETS,
)
from .config import load_config, SERVER_NAME, SERVER_VERSION
from .errors import ApiError
from .client import PlayStoreClient
from .service import PlayStoreService

__all__ = [
    # Models
    "ReleaseTrack",
    "ReleaseStatus",
    "Release",
    "DeploymentResult",
    "ServiceConfig",
    "PROMOTION_SOURCES",
    "PROMOTION_TARGETS",
    # Config
    "load_config",
    "SERVER_NAME",
    "SERVER_VERSION",
    # Errors
    "ApiError",
    # Classes
    "PlayStoreClient",
    "PlayStoreService",
]
