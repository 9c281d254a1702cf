#!/usr/bin/env python3
"""Example: Quickstart

Demonstrates the minimal setup for agentstructure: a manifest naming the
``main`` directory, one agent loading its targets from ``main/commands``,
and a lookup by name.

Usage:
    python examples/01_quickstart.py

Requirements:
    pip install agentstructure
"""
from __future__ import annotations

import asyncio
import json
import tempfile
import textwrap
from pathlib import Path

import agentstructure
from agentstructure import AgentStructure

PING_SOURCE = textwrap.dedent(
    """\
    from agentstructure import Target


    class Ping(Target):
        def __init__(self, agent):
            super().__init__(agent, name="ping")

        def run(self):
            return "pong"
    """
)

ECHO_SOURCE = textwrap.dedent(
    """\
    from agentstructure import Target


    class Echo(Target):
        def __init__(self, agent):
            super().__init__(agent, name="echo", enabled=False)

        async def run(self):
            return f"echo from {self.agent.name}"
    """
)


async def main_async(workdir: Path) -> None:
    print(f"agentstructure version: {agentstructure.__version__}")

    # Step 1: Lay out a host project with a manifest and two target files
    (workdir / "agentstructure.json").write_text(json.dumps({"main": "app"}))
    commands = workdir / "app" / "commands"
    (commands / "util").mkdir(parents=True)
    (commands / "ping.py").write_text(PING_SOURCE)
    (commands / "util" / "echo.py").write_text(ECHO_SOURCE)

    # Step 2: Create the agent and load everything below app/commands
    agent = AgentStructure("commands", cwd=workdir)
    print(f"Base path: {await agent.resolve_base_path()}")
    await agent.load_all()
    print(f"Loaded targets: {agent.names()}")

    # Step 3: Look targets up by name and run the enabled ones
    for target in agent:
        if not target.enabled:
            print(f"  {target.name}: disabled")
            continue
        print(f"  {target.name}: {await agentstructure.maybe_await(target.run())}")

    # Step 4: Unload one target and then the rest
    await agent.unload("ping")
    print(f"After unload: {agent.names()}")
    await agent.unload_all()
    print(f"After unload_all: {agent.names()}")


def main() -> None:
    with tempfile.TemporaryDirectory() as workdir:
        asyncio.run(main_async(Path(workdir)))


if __name__ == "__main__":
    main()
