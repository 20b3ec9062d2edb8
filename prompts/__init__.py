"""
MCP prompts for the Play Store server.
"""
from .guides import (
    register_prompts, deployment_guide, release_strategy,
    rollback_guide, aso_optimization,
)

__all__ = [
    "register_prompts",
    "deployment_guide",
    "release_strategy",
    "rollback_guide",
    "aso_optimization",
]
