"""Configuration schema for agentstructure.

``StructureConfig`` is a Pydantic v2 model that acts as the validated,
strongly-typed boundary object between raw configuration sources (YAML
files, environment variables, in-memory dicts) and the registries.
``AgentOptions`` and ``TargetOptions`` are the smaller models handed to
``AgentStructure`` and ``Target`` constructors.

Shipped in this module
----------------------
- TargetOptions    — identity and enabled flag of a target
- AgentOptions     — name and path segment of an agent
- StructureConfig  — manifest, walker and agent settings with loaders
"""
from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, field_validator, model_validator


class TargetOptions(BaseModel):
    """Identity of a target.

    Parameters
    ----------
    name:
        Unique key of the target inside its agent.
    enabled:
        Advisory flag; the registry keeps disabled targets loaded.
    """

    name: str = Field(min_length=1)
    enabled: bool = Field(default=True)


class AgentOptions(BaseModel):
    """Identity of an agent and the directory segment it loads from.

    ``path`` defaults to ``name`` so that an agent called ``"commands"``
    loads from ``<main>/commands``.
    """

    name: str = Field(min_length=1)
    path: str | None = Field(default=None)

    @property
    def resolved_path(self) -> str:
        return self.path or self.name


class StructureConfig(BaseModel):
    """Validated runtime configuration shared by every agent of a host.

    Parameters
    ----------
    manifest_file:
        Name of the manifest read from the working directory to find the
        ``main`` entry point.
    exclude:
        Directory names the walker never descends into.
    agents:
        Agents declared by the host, used by the command line.
    log_level:
        Logging level applied by the command line.
    """

    model_config = {"extra": "allow", "validate_assignment": True}

    manifest_file: str = Field(default="agentstructure.json", min_length=1)
    exclude: list[str] = Field(default_factory=lambda: ["__pycache__"])
    agents: list[AgentOptions] = Field(default_factory=list)
    log_level: str = Field(default="WARNING")

    @model_validator(mode="before")
    @classmethod
    def _normalise_lists(cls, values: Any) -> Any:  # noqa: ANN401
        """Ensure ``exclude`` and ``agents`` are lists, not None."""
        if isinstance(values, dict):
            if "exclude" in values and values["exclude"] is None:
                values["exclude"] = []
            if values.get("agents") is None:
                values["agents"] = []
        return values

    @field_validator("log_level")
    @classmethod
    def _check_log_level(cls, value: str) -> str:
        level = value.upper()
        if level not in logging.getLevelNamesMapping():
            raise ValueError(f"Unknown log level {value!r}.")
        return level

    def get_agent(self, name: str) -> AgentOptions | None:
        """Return the declared agent called *name*, if any."""
        for agent in self.agents:
            if agent.name == name:
                return agent
        return None

    # ------------------------------------------------------------------
    # Class-method loaders
    # ------------------------------------------------------------------

    @classmethod
    def from_yaml(cls, path: str | Path) -> "StructureConfig":
        """Load and validate configuration from a YAML file.

        Raises
        ------
        FileNotFoundError
            If ``path`` does not exist.
        pydantic.ValidationError
            If the parsed data fails validation.
        """
        resolved = Path(path)
        if not resolved.exists():
            raise FileNotFoundError(f"Config file not found: {resolved}")
        with resolved.open(encoding="utf-8") as fh:
            raw: object = yaml.safe_load(fh)
        data: dict[str, object] = dict(raw) if isinstance(raw, dict) else {}
        return cls.model_validate(data)

    @classmethod
    def from_env(cls, prefix: str = "AGENTSTRUCTURE_") -> "StructureConfig":
        """Build configuration from environment variables.

        Variables are mapped by stripping ``prefix`` and lower-casing the
        remainder, so ``AGENTSTRUCTURE_MANIFEST_FILE=app.json`` maps to
        ``manifest_file="app.json"``.  ``EXCLUDE`` is comma-separated and
        ``AGENTS`` is a JSON list of ``{"name": ..., "path": ...}`` objects.
        """
        data: dict[str, object] = {}

        for raw_key, raw_value in os.environ.items():
            if not raw_key.startswith(prefix):
                continue
            key = raw_key[len(prefix):].lower()
            if key == "exclude":
                data[key] = [item.strip() for item in raw_value.split(",") if item.strip()]
            elif key == "agents":
                try:
                    parsed = json.loads(raw_value)
                    data[key] = parsed if isinstance(parsed, list) else []
                except json.JSONDecodeError:
                    data[key] = []
            else:
                data[key] = raw_value

        return cls.model_validate(data)

    def merge(self, overrides: "StructureConfig") -> "StructureConfig":
        """Produce a new config with non-default values from *overrides*.

        ``exclude`` is unioned preserving order; ``agents`` are merged by
        name with *overrides* winning.  Neither input is mutated.
        """
        merged = self.model_dump()
        override_data = overrides.model_dump()
        default_data = StructureConfig().model_dump()

        for key, override_value in override_data.items():
            if override_value == default_data.get(key):
                continue
            if key == "exclude":
                existing: list[str] = list(merged.get("exclude", []))
                seen = set(existing)
                for item in override_value:
                    if item not in seen:
                        existing.append(item)
                        seen.add(item)
                merged["exclude"] = existing
            elif key == "agents":
                by_name = {agent["name"]: agent for agent in merged.get("agents", [])}
                for agent in override_value:
                    by_name[agent["name"]] = agent
                merged["agents"] = list(by_name.values())
            else:
                merged[key] = override_value

        return StructureConfig.model_validate(merged)
