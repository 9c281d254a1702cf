"""Default configuration constants for agentstructure.

``DEFAULT_CONFIG`` is the starting point used by ``ConfigLoader.load_auto()``
before file or environment overrides are applied.
"""
from __future__ import annotations

from agentstructure.schema.config import StructureConfig

DEFAULT_MANIFEST_FILE: str = "agentstructure.json"
DEFAULT_EXCLUDE: tuple[str, ...] = ("__pycache__",)

DEFAULT_CONFIG: StructureConfig = StructureConfig(
    manifest_file=DEFAULT_MANIFEST_FILE,
    exclude=list(DEFAULT_EXCLUDE),
    agents=[],
    log_level="WARNING",
)
"""Baseline ``StructureConfig`` used when no file or env config is present."""
