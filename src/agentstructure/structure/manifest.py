"""Manifest lookup for agentstructure.

The manifest is a JSON (or YAML, by suffix) mapping in the host's working
directory whose ``main`` field names the directory agents load from.  Every
failure mode reads as "no entry point"; callers cannot tell them apart.
"""
from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path

import yaml

logger = logging.getLogger(__name__)


def read_manifest_main(directory: str | Path, filename: str) -> str | None:
    """Return the ``main`` field of ``directory / filename`` or ``None``."""
    manifest = Path(directory) / filename
    try:
        with manifest.open(encoding="utf-8") as fh:
            if manifest.suffix in {".yaml", ".yml"}:
                raw: object = yaml.safe_load(fh)
            else:
                raw = json.load(fh)
    except (OSError, ValueError, yaml.YAMLError) as exc:
        logger.debug("Manifest %s is unusable: %s", manifest, exc)
        return None

    if not isinstance(raw, dict):
        logger.debug("Manifest %s is not a mapping", manifest)
        return None
    main = raw.get("main")
    if not isinstance(main, str) or not main:
        logger.debug("Manifest %s declares no main entry point", manifest)
        return None
    return main


async def resolve_main(directory: str | Path, filename: str) -> str | None:
    """Asynchronous form of :func:`read_manifest_main`."""
    return await asyncio.to_thread(read_manifest_main, directory, filename)
