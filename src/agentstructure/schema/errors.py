"""Error taxonomy for agentstructure.

All exceptions raised by agentstructure derive from ``AgentStructureError``
so that host applications can catch the whole family with a single
``except AgentStructureError`` clause while still distinguishing the
individual failure modes of a registry.

Shipped in this module
----------------------
- ErrorSeverity        — ordered severity enum
- AgentStructureError  — root exception with severity and context payload
- AgentError           — the base path of an agent cannot be resolved
- TargetError          — root of per-target failures
- TargetNotFoundError  — unknown target name
- InvalidExportError   — a module exported something that is not a Target
- TargetLoadError      — importing or constructing a target raised
- ConfigurationError   — configuration loading or validation failed
"""
from __future__ import annotations

from enum import Enum
from pathlib import Path


class ErrorSeverity(str, Enum):
    """Ordered severity levels for ``AgentStructureError`` instances.

    Severity is advisory metadata only; it lets logging and alerting
    infrastructure filter by impact level.
    """

    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"
    INFO = "info"


class AgentStructureError(Exception):
    """Root exception for all agentstructure failures.

    Parameters
    ----------
    message:
        Human-readable description of what went wrong.
    severity:
        Advisory ``ErrorSeverity`` level.  Defaults to ``HIGH``.
    context:
        Optional dict of structured metadata (agent names, paths, causes)
        that helps diagnostics without requiring log scraping.

    Examples
    --------
    >>> try:
    ...     raise AgentStructureError("something broke", ErrorSeverity.MEDIUM)
    ... except AgentStructureError as exc:
    ...     print(exc.severity)
    ErrorSeverity.MEDIUM
    """

    def __init__(
        self,
        message: str,
        severity: ErrorSeverity = ErrorSeverity.HIGH,
        context: dict[str, object] | None = None,
    ) -> None:
        super().__init__(message)
        self.severity: ErrorSeverity = severity
        self.context: dict[str, object] = context or {}

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}("
            f"message={str(self)!r}, "
            f"severity={self.severity.value!r})"
        )


class ConfigurationError(AgentStructureError):
    """Raised when configuration loading or validation fails.

    Examples: missing config file, bad YAML, a field of the wrong type.
    """


class AgentError(AgentStructureError):
    """Raised when an agent cannot resolve the directory it loads from.

    Attributes
    ----------
    name:
        Name of the agent that failed.
    reason:
        Short reason, e.g. ``"main entry point missing"``.
    path:
        Location involved in the failure, when one is known.
    """

    def __init__(
        self,
        name: str,
        reason: str,
        path: Path | None = None,
        context: dict[str, object] | None = None,
    ) -> None:
        self.name = name
        self.reason = reason
        self.path = path
        payload: dict[str, object] = {"agent": name}
        if path is not None:
            payload["path"] = str(path)
        payload.update(context or {})
        super().__init__(
            f"Agent {name!r}: {reason}",
            severity=ErrorSeverity.CRITICAL,
            context=payload,
        )


class TargetError(AgentStructureError):
    """Root of every failure concerning a single target.

    Attributes
    ----------
    name:
        Name of the target (or of the offending export / file when no
        target name is known yet).
    agent:
        Name of the agent that manages the target.
    reason:
        Short reason for the failure.
    path:
        File the target was (or would have been) loaded from.
    """

    severity_default: ErrorSeverity = ErrorSeverity.HIGH

    def __init__(
        self,
        name: str,
        agent: str,
        reason: str,
        path: Path | None = None,
        context: dict[str, object] | None = None,
    ) -> None:
        self.name = name
        self.agent = agent
        self.reason = reason
        self.path = path
        payload: dict[str, object] = {"target": name, "agent": agent}
        if path is not None:
            payload["path"] = str(path)
        payload.update(context or {})
        location = f" ({path})" if path is not None else ""
        super().__init__(
            f"Target {name!r} in agent {agent!r}{location}: {reason}",
            severity=self.severity_default,
            context=payload,
        )


class TargetNotFoundError(TargetError):
    """Raised when ``unload`` / ``reload`` / ``get`` receive an unknown name."""

    severity_default = ErrorSeverity.MEDIUM

    def __init__(self, name: str, agent: str) -> None:
        super().__init__(name, agent, "target cannot be found")


class InvalidExportError(TargetError):
    """Raised when a module exports a value that is not a usable Target class."""


class TargetLoadError(TargetError):
    """Raised when importing a target module or constructing a target raises.

    The original exception is chained as ``__cause__`` and its text is kept
    under ``context["cause"]``.
    """
