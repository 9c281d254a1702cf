"""Shared fixtures for agentstructure tests."""
from __future__ import annotations

import json
import textwrap
from pathlib import Path

import pytest


def target_source(
    class_name: str,
    target_name: str,
    *,
    result: str = "ok",
    enabled: bool = True,
    hooks: tuple[str, ...] = (),
    async_hooks: bool = False,
) -> str:
    """Return the source of a module defining one Target subclass.

    Every hook the class implements appends its own name to ``self.calls``.
    """
    interfaces = {
        "is_loaded": "LoadedHook",
        "is_reloaded": "ReloadedHook",
        "is_unloaded": "UnloadedHook",
    }
    bases = ", ".join(["Target", *(interfaces[h] for h in hooks)])
    prefix = "async " if async_hooks else ""
    methods = "".join(
        f"\n    {prefix}def {hook}(self):\n        self.calls.append({hook!r})\n"
        for hook in hooks
    )
    return textwrap.dedent(
        f"""\
        from agentstructure import LoadedHook, ReloadedHook, Target, UnloadedHook


        class {class_name}({bases}):
            def __init__(self, agent):
                super().__init__(agent, name={target_name!r}, enabled={enabled!r})
                self.calls = []

            def run(self):
                return {result!r}
        """
    ) + methods


@pytest.fixture()
def project(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """A working directory with a manifest whose main is ``app``."""
    (tmp_path / "agentstructure.json").write_text(
        json.dumps({"main": "app"}), encoding="utf-8"
    )
    (tmp_path / "app" / "commands").mkdir(parents=True)
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture()
def commands_dir(project: Path) -> Path:
    """Directory the ``commands`` agent of :func:`project` loads from."""
    return project / "app" / "commands"


@pytest.fixture()
def write_target():  # noqa: ANN201
    """Return a helper writing a :func:`target_source` module to a path."""

    def _write(path: Path, class_name: str, target_name: str, **kwargs: object) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(target_source(class_name, target_name, **kwargs), encoding="utf-8")  # type: ignore[arg-type]
        return path

    return _write
