"""Configuration loader for agentstructure.

``ConfigLoader`` resolves a ``StructureConfig`` from YAML files, JSON files,
environment variables, or auto-discovers the first available file in a
directory and overlays the environment on top of it.
"""
from __future__ import annotations

import json
import logging
import os
from pathlib import Path

import yaml

from agentstructure.config.defaults import DEFAULT_CONFIG
from agentstructure.config.schema import validate_config
from agentstructure.schema.config import StructureConfig
from agentstructure.schema.errors import ConfigurationError

logger = logging.getLogger(__name__)

# Ordered list of paths searched by load_auto()
_AUTO_SEARCH_PATHS: tuple[str, ...] = (
    "agentstructure.yaml",
    "agentstructure.yml",
    ".agentstructure.yaml",
    ".agentstructure.yml",
)


class ConfigLoader:
    """Loads ``StructureConfig`` from multiple sources.

    Every loader method returns a validated ``StructureConfig``.  Results
    can be combined with :meth:`StructureConfig.merge`.

    Examples
    --------
    >>> loader = ConfigLoader()
    >>> config = loader.load_env(prefix="AGENTSTRUCTURE_DOCTEST_")
    >>> config.manifest_file
    'agentstructure.json'
    """

    def load_yaml(self, path: str | Path) -> StructureConfig:
        """Load configuration from a YAML file.

        Raises
        ------
        ConfigurationError
            If the file cannot be read or fails validation.
        """
        resolved = Path(path)
        if not resolved.exists():
            raise ConfigurationError(
                f"YAML config file not found: {resolved}",
                context={"path": str(resolved)},
            )
        try:
            with resolved.open(encoding="utf-8") as fh:
                raw: object = yaml.safe_load(fh)
        except yaml.YAMLError as exc:
            raise ConfigurationError(
                f"Failed to parse YAML config at {resolved}: {exc}",
                context={"path": str(resolved)},
            ) from exc

        data: dict[str, object] = dict(raw) if isinstance(raw, dict) else {}
        logger.debug("Loaded YAML config from %s", resolved)
        return validate_config(data)

    def load_json(self, path: str | Path) -> StructureConfig:
        """Load configuration from a JSON file.

        Raises
        ------
        ConfigurationError
            If the file cannot be read or fails validation.
        """
        resolved = Path(path)
        if not resolved.exists():
            raise ConfigurationError(
                f"JSON config file not found: {resolved}",
                context={"path": str(resolved)},
            )
        try:
            with resolved.open(encoding="utf-8") as fh:
                raw = json.load(fh)
        except json.JSONDecodeError as exc:
            raise ConfigurationError(
                f"Failed to parse JSON config at {resolved}: {exc}",
                context={"path": str(resolved)},
            ) from exc

        data = dict(raw) if isinstance(raw, dict) else {}
        logger.debug("Loaded JSON config from %s", resolved)
        return validate_config(data)

    def load_file(self, path: str | Path) -> StructureConfig:
        """Dispatch to :meth:`load_yaml` or :meth:`load_json` by suffix."""
        if Path(path).suffix in {".yaml", ".yml"}:
            return self.load_yaml(path)
        return self.load_json(path)

    def load_env(self, prefix: str = "AGENTSTRUCTURE_") -> StructureConfig:
        """Build configuration from environment variables.

        See :meth:`StructureConfig.from_env` for the mapping rules.

        Raises
        ------
        ConfigurationError
            If the variables fail validation.
        """
        try:
            config = StructureConfig.from_env(prefix=prefix)
        except ValueError as exc:
            raise ConfigurationError(
                f"Invalid configuration in environment (prefix {prefix!r}): {exc}",
                context={"prefix": prefix},
            ) from exc
        logger.debug("Loaded config from environment with prefix %r", prefix)
        return config

    def load_auto(
        self,
        search_dir: str | Path | None = None,
        env_prefix: str = "AGENTSTRUCTURE_",
    ) -> StructureConfig:
        """Auto-discover and load configuration.

        Discovery order:

        1. Search *search_dir* (defaults to ``cwd``) for
           ``agentstructure.yaml``, ``agentstructure.yml`` and their hidden
           variants.
        2. Overlay environment variables from *env_prefix* on top.
        3. Fall back to ``DEFAULT_CONFIG`` if nothing is found.
        """
        base_dir = Path(search_dir) if search_dir is not None else Path.cwd()
        base_config: StructureConfig | None = None

        for candidate_name in _AUTO_SEARCH_PATHS:
            candidate = base_dir / candidate_name
            if not candidate.exists():
                continue
            try:
                base_config = self.load_yaml(candidate)
                logger.info("Auto-loaded agentstructure config from %s", candidate)
                break
            except ConfigurationError:
                logger.warning("Could not load config from %s; trying next.", candidate)

        if base_config is None:
            base_config = DEFAULT_CONFIG
            logger.debug("No config file found; using DEFAULT_CONFIG.")

        if any(k.startswith(env_prefix) for k in os.environ):
            env_config = self.load_env(prefix=env_prefix)
            base_config = base_config.merge(env_config)
            logger.debug("Applied environment variable overlay.")

        return base_config
