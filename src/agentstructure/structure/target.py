"""Target contract for agentstructure.

A *target* is a unit of behavior discovered as a class inside a module file.
Every target subclasses :class:`Target` and implements :meth:`Target.run`.
Targets that want to react to their own lifecycle additionally subclass one
or more of the hook interfaces; the registry checks for those interfaces
with ``isinstance`` and never probes for attributes.

Example
-------
::

    from agentstructure import LoadedHook, Target

    class Ping(Target, LoadedHook):
        def __init__(self, agent):
            super().__init__(agent, name="ping")

        async def run(self):
            return "pong"

        def is_loaded(self):
            print("ping is ready")
"""
from __future__ import annotations

import inspect
import weakref
from abc import ABC, abstractmethod
from pathlib import Path
from typing import TYPE_CHECKING, TypeVar

from agentstructure.schema.config import TargetOptions

if TYPE_CHECKING:
    from agentstructure.structure.agent import AgentStructure

_T = TypeVar("_T", bound="Target")


class Target(ABC):
    """Base class of every loadable target.

    Parameters
    ----------
    agent:
        The registry managing this target.  Only a weak reference is kept;
        the registry alone owns target lifetimes.
    options:
        Identity of the target.  May be replaced by the ``name`` and
        ``enabled`` keywords.

    Attributes
    ----------
    name:
        Unique key of the target inside its agent.
    enabled:
        Advisory flag.  The registry keeps disabled targets loaded; callers
        of :meth:`run` decide whether to honour it.
    path:
        File the target was instantiated from, set by :meth:`create`.
    """

    def __init__(
        self,
        agent: AgentStructure,
        options: TargetOptions | None = None,
        *,
        name: str | None = None,
        enabled: bool = True,
    ) -> None:
        if options is None:
            if not name:
                raise ValueError(
                    f"{type(self).__name__} must be given a non-empty target name."
                )
            options = TargetOptions(name=name, enabled=enabled)

        self._agent_ref: weakref.ref[AgentStructure] = weakref.ref(agent)
        self.name: str = options.name
        self.enabled: bool = options.enabled
        self.path: Path | None = None

    @classmethod
    def create(cls: type[_T], agent: AgentStructure, path: Path) -> _T:
        """Construct a target for *agent* and record the file it came from."""
        target = cls(agent)
        target.path = path
        return target

    @property
    def agent(self) -> AgentStructure:
        """The registry managing this target."""
        agent = self._agent_ref()
        if agent is None:
            raise ReferenceError(
                f"The agent that loaded target {self.name!r} no longer exists."
            )
        return agent

    @abstractmethod
    def run(self) -> object:
        """Primary behavior of the target.  May return an awaitable."""

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(name={self.name!r}, "
            f"enabled={self.enabled!r}, path={str(self.path) if self.path else None!r})"
        )


# ---------------------------------------------------------------------------
# Optional lifecycle hooks
# ---------------------------------------------------------------------------


class LoadedHook(ABC):
    """Implemented by targets that want to know when they were registered."""

    @abstractmethod
    def is_loaded(self) -> object:
        """Called once the target has been added to its agent."""


class ReloadedHook(ABC):
    """Implemented by targets that want to know when they replaced an older copy."""

    @abstractmethod
    def is_reloaded(self) -> object:
        """Called on the fresh instance after a reload registered it."""


class UnloadedHook(ABC):
    """Implemented by targets that want to know when they were removed."""

    @abstractmethod
    def is_unloaded(self) -> object:
        """Called after the target has been removed from its agent."""


async def maybe_await(result: object) -> object:
    """Await *result* if it is awaitable, else return it unchanged."""
    if inspect.isawaitable(result):
        return await result
    return result
