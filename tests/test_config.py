"""
Tests for environment configuration and the data models.
"""
from pathlib import Path

import pytest

from playstore.config import DEFAULT_APPLICATION_NAME, DEFAULT_AUDIT_LOG, audit_log_path, load_config
from playstore.models import DeploymentResult, Release, ReleaseTrack


# ============= load_config =============

def test_defaults_from_empty_environment():
    config = load_config({})

    assert config.credential_path == ""
    assert config.application_name == DEFAULT_APPLICATION_NAME
    assert config.monitored_packages == ()
    assert config.default_track is ReleaseTrack.INTERNAL
    assert config.mock_mode_enabled is False


def test_full_environment():
    config = load_config({
        "PLAY_STORE_SERVICE_ACCOUNT_KEY_PATH": " /keys/sa.json ",
        "PLAY_STORE_APPLICATION_NAME": "Release Bot",
        "PLAY_STORE_PACKAGE_NAMES": "com.example.app, ,com.example.other,",
        "PLAY_STORE_DEFAULT_TRACK": "Beta",
        "PLAY_STORE_MOCK_MODE": "yes",
    })

    assert config.credential_path == "/keys/sa.json"
    assert config.application_name == "Release Bot"
    assert config.monitored_packages == ("com.example.app", "com.example.other")
    assert config.default_track is ReleaseTrack.BETA
    assert config.mock_mode_enabled is True


def test_unknown_default_track_is_fatal():
    with pytest.raises(ValueError, match="Unknown release track"):
        load_config({"PLAY_STORE_DEFAULT_TRACK": "nightly"})


def test_malformed_mock_flag_is_fatal():
    with pytest.raises(ValueError, match="boolean"):
        load_config({"PLAY_STORE_MOCK_MODE": "maybe"})


def test_load_config_reads_process_environment(monkeypatch):
    monkeypatch.setenv("PLAY_STORE_PACKAGE_NAMES", "com.example.env")
    monkeypatch.delenv("PLAY_STORE_DEFAULT_TRACK", raising=False)

    assert load_config().monitored_packages == ("com.example.env",)


def test_audit_log_path():
    assert audit_log_path({}) == DEFAULT_AUDIT_LOG
    assert audit_log_path({"PLAY_STORE_AUDIT_LOG": "  "}) is None
    assert audit_log_path({"PLAY_STORE_AUDIT_LOG": "/var/log/ps.jsonl"}) == Path("/var/log/ps.jsonl")


# ============= models =============

def test_track_parse_is_case_insensitive():
    assert ReleaseTrack.parse("PRODUCTION") is ReleaseTrack.PRODUCTION
    with pytest.raises(ValueError):
        ReleaseTrack.parse("")


def test_successful_result_requires_id():
    with pytest.raises(ValueError):
        DeploymentResult(success=True, package_name="p", track="beta", version_code=1, message="ok")


def test_failed_result_cannot_carry_id():
    with pytest.raises(ValueError):
        DeploymentResult(
            success=False, package_name="p", track="beta", version_code=1,
            message="nope", deployment_id="edit-1",
        )


def test_failure_factory_records_error_type():
    result = DeploymentResult.failure("p", "beta", 1, "Deployment failed: boom", RuntimeError("boom"))

    assert not result.success
    assert result.deployment_id is None
    assert result.error_detail == "RuntimeError: boom"


def test_release_to_dict_uses_wire_names():
    release = Release("com.example.app", "beta", "completed", 41, 1.0, "t0", "t1")

    assert release.to_dict() == {
        "packageName": "com.example.app",
        "track": "beta",
        "status": "completed",
        "versionCode": 41,
        "rolloutFraction": 1.0,
        "startTime": "t0",
        "completedTime": "t1",
    }
