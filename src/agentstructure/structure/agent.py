"""Agent registry for agentstructure.

An :class:`AgentStructure` discovers target modules under
``<manifest main>/<path>``, imports them, validates their exports against
the :class:`~agentstructure.structure.target.Target` contract and keeps the
resulting instances by name.

Lifecycle hooks
---------------
Hooks run after the registry state has changed and after the registry lock
has been released, so a hook may call back into its agent.

- ``is_loaded``:   a target was registered under a name that was free, or
  replaced a same-named target outside of :meth:`AgentStructure.reload`.
- ``is_reloaded``: a target replaced a same-named target during
  :meth:`AgentStructure.reload`.
- ``is_unloaded``: a target was removed by :meth:`AgentStructure.unload`
  or :meth:`AgentStructure.unload_all`, or was replaced by a newer copy.

Every queued hook is called even when an earlier one raises.  One failure
propagates unchanged; several propagate as an ``ExceptionGroup``.

Concurrency
-----------
Mutating coroutines are serialised by one ``asyncio.Lock`` per agent.  The
lock is not reentrant; hooks run outside it.
"""
from __future__ import annotations

import asyncio
import inspect
import logging
import os
from collections.abc import Iterable, Iterator
from pathlib import Path
from typing import Generic, TypeVar

from agentstructure.config.defaults import DEFAULT_EXCLUDE, DEFAULT_MANIFEST_FILE
from agentstructure.schema.config import AgentOptions, StructureConfig
from agentstructure.schema.errors import (
    AgentError,
    InvalidExportError,
    TargetLoadError,
    TargetNotFoundError,
)
from agentstructure.structure.importer import exported_values, import_file, module_name_for
from agentstructure.structure.manifest import resolve_main
from agentstructure.structure.target import (
    LoadedHook,
    ReloadedHook,
    Target,
    UnloadedHook,
    maybe_await,
)
from agentstructure.structure.walker import walk_files

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=Target)

# (hook interface, method name, target) triples queued while the lock is held
_PendingHook = tuple[type, str, Target]


class AgentStructure(Generic[T]):
    """Registry that loads, unloads and reloads the targets of one agent.

    Parameters
    ----------
    name:
        Name of the agent; used in errors and logs.
    path:
        Directory segment joined onto the manifest's ``main`` entry point.
        Defaults to *name*.
    cwd:
        Directory holding the manifest.  ``None`` means the process working
        directory at resolution time.
    manifest_file:
        Manifest file name.
    exclude:
        Directory names the walker never descends into.

    Examples
    --------
    >>> agent = AgentStructure("commands")
    >>> agent.path
    'commands'
    >>> len(agent)
    0
    """

    def __init__(
        self,
        name: str,
        path: str | None = None,
        *,
        cwd: str | Path | None = None,
        manifest_file: str = DEFAULT_MANIFEST_FILE,
        exclude: Iterable[str] = DEFAULT_EXCLUDE,
    ) -> None:
        self.name = name
        self.path = path or name
        self.cwd: Path | None = Path(cwd) if cwd is not None else None
        self.manifest_file = manifest_file
        self.exclude: frozenset[str] = frozenset(exclude)
        self.targets: dict[str, T] = {}
        self._lock = asyncio.Lock()

    @classmethod
    def from_options(
        cls,
        options: AgentOptions,
        config: StructureConfig | None = None,
        *,
        cwd: str | Path | None = None,
    ) -> "AgentStructure[T]":
        """Build an agent from validated option and configuration models."""
        if config is None:
            return cls(options.name, options.resolved_path, cwd=cwd)
        return cls(
            options.name,
            options.resolved_path,
            cwd=cwd,
            manifest_file=config.manifest_file,
            exclude=config.exclude,
        )

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def get(self, name: str) -> T:
        """Return the target registered under *name*.

        Raises
        ------
        TargetNotFoundError
            If *name* is not registered.
        """
        try:
            return self.targets[name]
        except KeyError:
            raise TargetNotFoundError(name, self.name) from None

    def names(self) -> list[str]:
        """Return a sorted list of registered target names."""
        return sorted(self.targets)

    def __contains__(self, name: object) -> bool:
        return name in self.targets

    def __len__(self) -> int:
        return len(self.targets)

    def __iter__(self) -> Iterator[T]:
        return iter(list(self.targets.values()))

    def __repr__(self) -> str:
        return f"AgentStructure(name={self.name!r}, path={self.path!r}, targets={self.names()})"

    # ------------------------------------------------------------------
    # Resolution
    # ------------------------------------------------------------------

    async def resolve_base_path(self) -> Path:
        """Return the absolute directory this agent loads targets from.

        Raises
        ------
        AgentError
            If the manifest is missing, unreadable, or declares no ``main``.
        """
        cwd = self.cwd if self.cwd is not None else Path.cwd()
        main = await resolve_main(cwd, self.manifest_file)
        if main is None:
            raise AgentError(
                self.name,
                "main entry point missing",
                path=cwd / self.manifest_file,
            )
        return Path(os.path.normpath(os.path.abspath(os.path.join(cwd, main, self.path))))

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    async def load_all(self) -> None:
        """Import every file below the base path, in walk order.

        The first failing file aborts the pass; files inserted before it
        stay registered.
        """
        base = await self.resolve_base_path()
        files = await walk_files(base, self.exclude)
        logger.info("Agent %r: loading %d file(s) from %s", self.name, len(files), base)
        for file_path in files:
            await self.insert(file_path)

    async def insert(self, path: str | Path) -> list[T]:
        """Import one file and register every target class it exports.

        Returns
        -------
        list[Target]
            The freshly registered targets.

        Raises
        ------
        TargetLoadError
            If importing the module or constructing a target raises.
        InvalidExportError
            If an export is not a concrete ``Target`` subclass.  Nothing
            from the file is registered in that case.
        """
        async with self._lock:
            created, pending = self._insert(Path(path), reloading=False)
        await self._run_hooks(pending)
        return created

    async def unload(self, name: str) -> None:
        """Remove the target *name* and notify it.

        Raises
        ------
        TargetNotFoundError
            If *name* is not registered.  The registry is left unchanged.
        """
        async with self._lock:
            target = self.targets.pop(name, None)
            if target is None:
                raise TargetNotFoundError(name, self.name)
            logger.info("Agent %r: unloaded target %r", self.name, name)
        await self._run_hooks([(UnloadedHook, "is_unloaded", target)])

    async def unload_all(self) -> None:
        """Remove every target and notify each of them.

        Calling this on an empty agent is a no-op.
        """
        async with self._lock:
            removed = list(self.targets.values())
            self.targets.clear()
            if removed:
                logger.info("Agent %r: unloaded %d target(s)", self.name, len(removed))
        await self._run_hooks([(UnloadedHook, "is_unloaded", t) for t in removed])

    async def reload(self, name: str) -> list[T]:
        """Re-import the file target *name* came from and swap in fresh instances.

        Raises
        ------
        TargetNotFoundError
            If *name* is not registered.
        TargetLoadError, InvalidExportError
            As for :meth:`insert`; the old instances stay registered.
        """
        async with self._lock:
            target = self.targets.get(name)
            if target is None:
                raise TargetNotFoundError(name, self.name)
            if target.path is None:
                raise TargetLoadError(
                    name, self.name, "target has no recorded source file"
                )
            created, pending = self._insert(target.path, reloading=True)
        await self._run_hooks(pending)
        return created

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _insert(self, path: Path, *, reloading: bool) -> tuple[list[T], list[_PendingHook]]:
        classes = self._import_target_classes(path)

        created: list[T] = []
        for cls in classes:
            try:
                created.append(cls.create(self, path))
            except Exception as exc:
                raise TargetLoadError(
                    path.stem,
                    self.name,
                    f"target {cls.__qualname__} cannot be constructed",
                    path=path,
                    context={"cause": repr(exc)},
                ) from exc

        # Same-named classes within one file: the later one wins.
        incoming: dict[str, T] = {}
        for target in created:
            incoming[target.name] = target

        pending: list[_PendingHook] = []
        for target_name, target in incoming.items():
            previous = self.targets.get(target_name)
            self.targets[target_name] = target
            if previous is None:
                pending.append((LoadedHook, "is_loaded", target))
            else:
                pending.append((UnloadedHook, "is_unloaded", previous))
                if reloading:
                    pending.append((ReloadedHook, "is_reloaded", target))
                else:
                    pending.append((LoadedHook, "is_loaded", target))
            logger.info("Agent %r: registered target %r from %s", self.name, target_name, path)
        return list(incoming.values()), pending

    def _import_target_classes(self, path: Path) -> list[type[T]]:
        try:
            module = import_file(path, module_name_for(self.name, path))
        except Exception as exc:
            raise TargetLoadError(
                path.stem,
                self.name,
                "target cannot be loaded",
                path=path,
                context={"cause": repr(exc)},
            ) from exc

        classes: list[type[T]] = []
        for export_name, value in exported_values(module):
            if not isinstance(value, type):
                raise InvalidExportError(
                    export_name, self.name, "did not export a class", path=path
                )
            if not issubclass(value, Target):
                raise InvalidExportError(
                    export_name,
                    self.name,
                    "does not extend the Target contract",
                    path=path,
                )
            if inspect.isabstract(value):
                raise InvalidExportError(
                    export_name,
                    self.name,
                    "does not implement the Target contract",
                    path=path,
                    context={"abstract": sorted(value.__abstractmethods__)},
                )
            classes.append(value)
        return classes

    async def _run_hooks(self, pending: list[_PendingHook]) -> None:
        """Call every queued hook, then raise whatever they raised.

        A single failure is re-raised as is; several are raised together as
        an ``ExceptionGroup`` in queue order.
        """
        errors: list[Exception] = []
        for interface, method, target in pending:
            if not isinstance(target, interface):
                continue
            logger.debug("Agent %r: calling %s on %r", self.name, method, target.name)
            try:
                await maybe_await(getattr(target, method)())
            except Exception as exc:
                logger.warning(
                    "Agent %r: %s hook of target %r raised %r",
                    self.name,
                    method,
                    target.name,
                    exc,
                )
                errors.append(exc)

        if len(errors) == 1:
            raise errors[0]
        if errors:
            raise ExceptionGroup(f"Lifecycle hooks of agent {self.name!r} failed", errors)
