"""
Tests for the guidance prompts.
"""
import asyncio

import pytest

from prompts import guides
from prompts.guides import (
    aso_optimization,
    deployment_guide,
    rating_guidance,
    register_prompts,
    release_strategy,
    rollback_guide,
)
from server import create_server


def test_deployment_guide_interpolates_package_and_track():
    text = deployment_guide("com.example.app", "beta")

    assert "**com.example.app**" in text
    assert "**beta** track" in text
    assert "- packageName: com.example.app" in text
    assert "- toTrack: beta" in text


def test_deployment_guide_uses_placeholders_when_arguments_missing():
    text = deployment_guide()

    assert "[APP_PACKAGE]" in text
    assert "[TARGET_TRACK]" in text


def test_release_strategy_large_game():
    text = release_strategy("game", "large")

    assert "1000+ alpha testers" in text
    assert "rolloutFraction: 0.01" in text
    assert "Gaming Apps" in text


@pytest.mark.parametrize("app_type,user_base", [("Game", "LARGE"), (" game ", " large ")])
def test_release_strategy_lookup_is_case_insensitive(app_type, user_base):
    text = release_strategy(app_type, user_base)

    assert "Gaming Apps" in text
    assert "1000+ alpha testers" in text


def test_release_strategy_unknown_categories_fall_back_to_generic():
    text = release_strategy("spaceship", "galactic")

    assert "General Apps" in text
    assert "100-500 users" in text
    assert "rolloutFraction: 0.2" in text


def test_rollback_guide_critical_crash():
    text = rollback_guide("crash", "critical")

    assert "CRITICAL - Immediate Action Required" in text
    assert "Crash Issues" in text


def test_rollback_guide_unknown_severity_gets_standard_process():
    text = rollback_guide("weird", "meh")

    assert "Standard Response Process" in text
    assert "General Issues" in text


def test_rollback_guide_explains_version_code_must_increase():
    assert "higher version code" in rollback_guide("crash", "high")


@pytest.mark.parametrize("rating,heading", [
    ("4.8", "Excellent Rating"),
    ("4.5", "Excellent Rating"),
    ("4.2", "Good Rating"),
    ("3.5", "Average Rating"),
    ("2.9", "Low Rating"),
    ("not a number", "Unknown Rating"),
    (None, "Unknown Rating"),
])
def test_rating_bands(rating, heading):
    assert heading in rating_guidance(rating)


def test_aso_optimization_declining_trend():
    text = aso_optimization("3.2", "declining")

    assert "Low Rating" in text
    assert "Declining Downloads" in text
    assert "update_app_metadata" in text


def test_aso_optimization_unknown_trend():
    assert "Unknown Trend" in aso_optimization("4.1", "sideways")


# ============= MCP registration =============

def _prompt_text(mcp, name, arguments=None):
    result = asyncio.run(mcp.get_prompt(name, arguments))
    return result.messages[0].content.text


def test_prompts_are_registered(mock_config):
    mcp = create_server(mock_config)

    names = {p.name for p in asyncio.run(mcp.list_prompts())}

    assert names == set(guides.PROMPT_NAMES)


def test_prompt_arguments_use_camel_case(mock_config):
    mcp = create_server(mock_config)

    text = _prompt_text(mcp, "rollback_guide", {"issueType": "security", "severity": "critical"})

    assert "CRITICAL - Immediate Action Required" in text
    assert "Security Issues" in text


def test_prompt_without_arguments_still_renders():
    from mcp.server.fastmcp import FastMCP

    mcp = FastMCP("prompts-only")
    register_prompts(mcp)

    text = _prompt_text(mcp, "aso_optimization")

    assert "[CURRENT_RATING]" in text
    assert "Unknown Rating" in text
