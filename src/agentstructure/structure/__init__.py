"""Registry core: the agent registry, the target contract and discovery helpers."""
from __future__ import annotations

from agentstructure.structure.agent import AgentStructure
from agentstructure.structure.manifest import read_manifest_main, resolve_main
from agentstructure.structure.target import (
    LoadedHook,
    ReloadedHook,
    Target,
    UnloadedHook,
    maybe_await,
)
from agentstructure.structure.walker import walk_files

__all__ = [
    "AgentStructure",
    "Target",
    "LoadedHook",
    "ReloadedHook",
    "UnloadedHook",
    "maybe_await",
    "read_manifest_main",
    "resolve_main",
    "walk_files",
]
