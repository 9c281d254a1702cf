"""Config schema re-export and validation helpers for agentstructure.

Shipped in this module
----------------------
- StructureConfig — re-export with full Pydantic v2 validation
- validate_config — standalone validation helper
"""
from __future__ import annotations

from pydantic import ValidationError

from agentstructure.schema.config import StructureConfig
from agentstructure.schema.errors import ConfigurationError

__all__ = ["StructureConfig", "validate_config"]


def validate_config(data: dict[str, object]) -> StructureConfig:
    """Validate a raw dict against the ``StructureConfig`` schema.

    Raises
    ------
    ConfigurationError
        If the data fails Pydantic validation.  The original
        ``ValidationError`` is attached as the ``__cause__``.

    Examples
    --------
    >>> validate_config({"manifest_file": "app.json"}).manifest_file
    'app.json'
    """
    try:
        return StructureConfig.model_validate(data)
    except ValidationError as exc:
        raise ConfigurationError(
            f"Configuration validation failed: {exc}",
            context={"errors": exc.errors()},
        ) from exc
