"""
Shared fixtures: a fake Android Publisher resource and stub clients.
"""
import asyncio
from pathlib import Path
from typing import Any, Dict, List, Optional

import pytest

from playstore.models import DeploymentResult, Release, ServiceConfig
from playstore.service import PlayStoreService


# ============= FAKE PUBLISHER (googleapiclient resource chain) =============

class _Request:
    def __init__(self, publisher: "FakePublisher", path: str, kwargs: Dict[str, Any]):
        self._publisher = publisher
        self._path = path
        self._kwargs = kwargs

    def execute(self):
        self._publisher.calls.append((self._path, self._kwargs))
        response = self._publisher.responses.get(self._path, {})
        if isinstance(response, BaseException):
            raise response
        if callable(response):
            return response(**self._kwargs)
        return response


class _Node:
    """edits() / edits().tracks() ... ; a call with kwargs builds a request."""

    def __init__(self, publisher: "FakePublisher", path: str):
        self._publisher = publisher
        self._path = path

    def __getattr__(self, name: str):
        if name.startswith("__"):
            raise AttributeError(name)
        path = f"{self._path}.{name}"

        def call(**kwargs):
            if kwargs:
                return _Request(self._publisher, path, kwargs)
            return _Node(self._publisher, path)

        return call


class FakePublisher:
    """
    Records every executed request as (dotted path, kwargs).

    `responses` maps a dotted path ("edits.tracks.get") to a dict, an
    exception instance to raise, or a callable taking the request kwargs.
    """

    def __init__(self, responses: Optional[Dict[str, Any]] = None):
        self.responses: Dict[str, Any] = {"edits.insert": {"id": "edit-1"}}
        self.responses.update(responses or {})
        self.calls: List[tuple] = []

    def edits(self):
        return _Node(self, "edits")

    def calls_to(self, path: str) -> List[Dict[str, Any]]:
        return [kwargs for p, kwargs in self.calls if p == path]

    def called(self, path: str) -> bool:
        return bool(self.calls_to(path))


# ============= STUB CLIENT (stands in for PlayStoreClient) =============

class StubClient:
    """Records façade -> client calls and returns canned outcomes."""

    def __init__(self, releases: Optional[Dict[str, List[Release]]] = None,
                 fail_with: Optional[BaseException] = None,
                 deploy_result: Optional[DeploymentResult] = None,
                 promote_error: Optional[BaseException] = None,
                 metadata_ok: bool = True):
        self.releases = releases or {}
        self.fail_with = fail_with
        self.deploy_result = deploy_result
        self.promote_error = promote_error
        self.metadata_ok = metadata_ok
        self.calls: List[tuple] = []

    def list_releases(self, package_name):
        self.calls.append(("list_releases", package_name))
        if self.fail_with is not None:
            raise self.fail_with
        return list(self.releases.get(package_name, []))

    def deploy(self, package_name, track, binary_path, version_code, release_notes=None, rollout_fraction=1.0):
        self.calls.append(("deploy", package_name, track, binary_path, version_code, release_notes, rollout_fraction))
        if self.fail_with is not None:
            raise self.fail_with
        if self.deploy_result is not None:
            return self.deploy_result
        return DeploymentResult(
            success=True,
            deployment_id="edit-42",
            package_name=package_name,
            track=track,
            version_code=version_code,
            message=f"Successfully deployed to {track} track",
        )

    def promote(self, package_name, from_track, to_track, version_code):
        self.calls.append(("promote", package_name, from_track, to_track, version_code))
        if self.promote_error is not None:
            raise self.promote_error
        return DeploymentResult(
            success=True,
            deployment_id="edit-43",
            package_name=package_name,
            track=to_track,
            version_code=version_code,
            message=f"Successfully promoted from {from_track} to {to_track}",
        )

    def update_metadata(self, package_name, title=None, short_description=None, full_description=None):
        self.calls.append(("update_metadata", package_name, title, short_description, full_description))
        if self.fail_with is not None:
            raise self.fail_with
        return self.metadata_ok


class SpyService(PlayStoreService):
    """Mock-mode service that records which façade operations ran."""

    def __init__(self, config: ServiceConfig):
        super().__init__(config)
        self.operations: List[str] = []

    def get_releases(self, package_name=None):
        self.operations.append("get_releases")
        return super().get_releases(package_name)

    def deploy_app(self, *args, **kwargs):
        self.operations.append("deploy_app")
        return super().deploy_app(*args, **kwargs)

    def promote_release(self, *args, **kwargs):
        self.operations.append("promote_release")
        return super().promote_release(*args, **kwargs)

    def update_metadata(self, *args, **kwargs):
        self.operations.append("update_metadata")
        return super().update_metadata(*args, **kwargs)


def make_release(package_name: str, track: str, status: str, version_code: int,
                 fraction: float = 1.0) -> Release:
    return Release(
        package_name=package_name,
        track=track,
        status=status,
        version_code=version_code,
        rollout_fraction=fraction,
        start_time="2024-01-01T00:00:00+00:00",
        completed_time="2024-01-02T00:00:00+00:00" if status == "completed" else None,
    )


# ============= MCP HELPERS =============

def call_tool(mcp, name: str, arguments: Dict[str, Any]) -> str:
    """Invoke a FastMCP tool and return its text output."""
    result = asyncio.run(mcp.call_tool(name, arguments))
    if hasattr(result, "content"):
        result = result.content
    if isinstance(result, tuple):
        result = result[0]
    return "".join(getattr(block, "text", "") for block in result)


def read_resource(mcp, uri: str) -> str:
    contents = list(asyncio.run(mcp.read_resource(uri)))
    return contents[0].content


# ============= FIXTURES =============

@pytest.fixture(autouse=True)
def audit_log(tmp_path, monkeypatch) -> Path:
    path = tmp_path / "audit.jsonl"
    monkeypatch.setenv("PLAY_STORE_AUDIT_LOG", str(path))
    return path


@pytest.fixture
def key_file(tmp_path) -> Path:
    path = tmp_path / "service-account.json"
    path.write_text("{}")
    return path


@pytest.fixture
def live_config(key_file) -> ServiceConfig:
    return ServiceConfig(
        credential_path=str(key_file),
        monitored_packages=("com.example.app", "com.example.other"),
    )


@pytest.fixture
def mock_config(tmp_path) -> ServiceConfig:
    return ServiceConfig(credential_path=str(tmp_path / "missing.json"))


@pytest.fixture
def stub_client() -> StubClient:
    return StubClient()


@pytest.fixture
def live_service(live_config, stub_client) -> PlayStoreService:
    return PlayStoreService(live_config, client_factory=lambda cfg: stub_client)


