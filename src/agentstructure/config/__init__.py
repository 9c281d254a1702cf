"""Config package for agentstructure.

Provides configuration loading, validation, and defaults.
"""
from __future__ import annotations

from agentstructure.config.defaults import DEFAULT_CONFIG
from agentstructure.config.loader import ConfigLoader
from agentstructure.config.schema import StructureConfig, validate_config

__all__ = [
    "StructureConfig",
    "validate_config",
    "ConfigLoader",
    "DEFAULT_CONFIG",
]
