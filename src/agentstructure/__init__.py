"""agentstructure — discover, load, unload and reload plugin targets by name.

Public API
----------
The stable public surface is everything exported from this module.
Anything inside submodules not re-exported here is considered private
and may change without notice.

Quick-start
-----------
>>> import agentstructure
>>> agentstructure.__version__
'0.1.0'

>>> from agentstructure import AgentStructure
>>> agent = AgentStructure("commands")
>>> agent.names()
[]
"""
from __future__ import annotations

__version__: str = "0.1.0"

# ---------------------------------------------------------------------------
# Schema
# ---------------------------------------------------------------------------
from agentstructure.schema.config import AgentOptions, StructureConfig, TargetOptions
from agentstructure.schema.errors import (
    AgentError,
    AgentStructureError,
    ConfigurationError,
    ErrorSeverity,
    InvalidExportError,
    TargetError,
    TargetLoadError,
    TargetNotFoundError,
)

# ---------------------------------------------------------------------------
# Config
# ---------------------------------------------------------------------------
from agentstructure.config.defaults import DEFAULT_CONFIG
from agentstructure.config.loader import ConfigLoader
from agentstructure.config.schema import validate_config

# ---------------------------------------------------------------------------
# Registry core
# ---------------------------------------------------------------------------
from agentstructure.structure.agent import AgentStructure
from agentstructure.structure.target import (
    LoadedHook,
    ReloadedHook,
    Target,
    UnloadedHook,
    maybe_await,
)
from agentstructure.structure.walker import walk_files

__all__ = [
    "__version__",
    # schema — config
    "AgentOptions",
    "StructureConfig",
    "TargetOptions",
    # schema — errors
    "ErrorSeverity",
    "AgentStructureError",
    "AgentError",
    "ConfigurationError",
    "TargetError",
    "TargetNotFoundError",
    "InvalidExportError",
    "TargetLoadError",
    # config
    "DEFAULT_CONFIG",
    "ConfigLoader",
    "validate_config",
    # registry core
    "AgentStructure",
    "Target",
    "LoadedHook",
    "ReloadedHook",
    "UnloadedHook",
    "maybe_await",
    "walk_files",
]
