#!/usr/bin/env python3
"""Example: Lifecycle hooks and reload

Shows a target implementing the three hook interfaces, then edits its
source on disk and reloads it by name.  The old instance receives
``is_unloaded`` and the new instance receives ``is_reloaded``.

Usage:
    python examples/02_lifecycle_hooks.py

Requirements:
    pip install agentstructure
"""
from __future__ import annotations

import asyncio
import json
import tempfile
import textwrap
from pathlib import Path

from agentstructure import AgentStructure, TargetError


def greeter_source(greeting: str) -> str:
    return textwrap.dedent(
        f"""\
        from agentstructure import LoadedHook, ReloadedHook, Target, UnloadedHook


        class Greeter(Target, LoadedHook, ReloadedHook, UnloadedHook):
            def __init__(self, agent):
                super().__init__(agent, name="greet")

            def run(self):
                return {greeting!r}

            def is_loaded(self):
                print("  [hook] greet loaded")

            async def is_reloaded(self):
                print("  [hook] greet reloaded")

            def is_unloaded(self):
                print(f"  [hook] greet unloaded (said {{self.run()!r}})")
        """
    )


async def main_async(workdir: Path) -> None:
    (workdir / "agentstructure.json").write_text(json.dumps({"main": "."}))
    source = workdir / "events" / "greet.py"
    source.parent.mkdir()
    source.write_text(greeter_source("hello"))

    agent = AgentStructure("events", cwd=workdir)

    print("Loading:")
    await agent.load_all()
    print(f"  greet says {agent.get('greet').run()!r}")

    print("Reloading after editing the source:")
    source.write_text(greeter_source("good evening"))
    await agent.reload("greet")
    print(f"  greet says {agent.get('greet').run()!r}")

    print("Unloading:")
    await agent.unload("greet")

    try:
        await agent.reload("greet")
    except TargetError as exc:
        print(f"Reload after unload fails: {exc}")


def main() -> None:
    with tempfile.TemporaryDirectory() as workdir:
        asyncio.run(main_async(Path(workdir)))


if __name__ == "__main__":
    main()
