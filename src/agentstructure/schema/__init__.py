"""Schema package for agentstructure: error taxonomy and configuration models."""
from __future__ import annotations

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

__all__ = [
    "AgentOptions",
    "StructureConfig",
    "TargetOptions",
    "AgentError",
    "AgentStructureError",
    "ConfigurationError",
    "ErrorSeverity",
    "InvalidExportError",
    "TargetError",
    "TargetLoadError",
    "TargetNotFoundError",
]
