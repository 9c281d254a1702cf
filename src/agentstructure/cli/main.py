"""CLI entry point for agentstructure.

Invoked as::

    agentstructure [OPTIONS] COMMAND [ARGS]...

or, during development::

    python -m agentstructure.cli.main
"""
from __future__ import annotations

import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

if TYPE_CHECKING:
    from agentstructure.schema.config import StructureConfig
    from agentstructure.structure.agent import AgentStructure

console = Console()
error_console = Console(stderr=True, style="bold red")


def _load_config(config: str | None) -> StructureConfig:
    from agentstructure.config.loader import ConfigLoader

    loader = ConfigLoader()
    try:
        cfg = loader.load_file(config) if config else loader.load_auto()
    except Exception as exc:  # noqa: BLE001
        error_console.print(f"Could not load config: {exc}")
        raise SystemExit(1) from exc

    package_logger = logging.getLogger("agentstructure")
    if package_logger.level == logging.NOTSET:
        package_logger.setLevel(cfg.log_level)
    return cfg


def _build_agent(agent_name: str, path: str | None, config: str | None) -> AgentStructure:
    from agentstructure.schema.config import AgentOptions
    from agentstructure.structure.agent import AgentStructure

    cfg = _load_config(config)
    options = cfg.get_agent(agent_name) or AgentOptions(name=agent_name)
    if path is not None:
        options = AgentOptions(name=agent_name, path=path)
    return AgentStructure.from_options(options, cfg)


# ---------------------------------------------------------------------------
# Root group
# ---------------------------------------------------------------------------


@click.group()
@click.version_option(package_name="agentstructure")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging.")
def cli(verbose: bool) -> None:
    """Discover, load, unload and reload plugin targets by name."""
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(message)s",
            handlers=[RichHandler(console=Console(stderr=True))],
        )
        logging.getLogger("agentstructure").setLevel(logging.DEBUG)


# ---------------------------------------------------------------------------
# version
# ---------------------------------------------------------------------------


@cli.command(name="version")
def version_command() -> None:
    """Show detailed version information."""
    from agentstructure import __version__

    console.print(f"[bold]agentstructure[/bold] v{__version__}")
    console.print(f"Python {sys.version}")


# ---------------------------------------------------------------------------
# init
# ---------------------------------------------------------------------------


@cli.command(name="init")
@click.option(
    "--directory",
    "-d",
    default=".",
    show_default=True,
    help="Directory in which to create the config file.",
)
def init_command(directory: str) -> None:
    """Initialise an agentstructure config file in DIRECTORY."""
    target_dir = Path(directory).resolve()
    config_path = target_dir / "agentstructure.yaml"

    if config_path.exists():
        console.print(
            f"[yellow]Config already exists at {config_path}. Skipping.[/yellow]"
        )
        return

    default_yaml = """\
# agentstructure configuration
manifest_file: agentstructure.json
exclude:
  - __pycache__
agents:
  - name: commands
    path: commands
log_level: WARNING
"""
    try:
        target_dir.mkdir(parents=True, exist_ok=True)
        config_path.write_text(default_yaml, encoding="utf-8")
        console.print(f"[green]Created agentstructure config at {config_path}[/green]")
    except OSError as exc:
        error_console.print(f"Failed to create config: {exc}")
        raise SystemExit(1) from exc


# ---------------------------------------------------------------------------
# config
# ---------------------------------------------------------------------------


@cli.command(name="config")
@click.option("--show", is_flag=True, help="Show the current configuration.")
@click.option("--validate", is_flag=True, help="Validate the config file.")
@click.option(
    "--config",
    "-c",
    default=None,
    help="Path to agentstructure config file.",
)
def config_command(show: bool, validate: bool, config: str | None) -> None:
    """Show or validate agentstructure configuration."""
    cfg = _load_config(config)

    if show or not validate:
        console.print_json(cfg.model_dump_json(indent=2))

    if validate:
        from agentstructure.config.schema import validate_config

        try:
            validate_config(cfg.model_dump())
            console.print("[green]Configuration is valid.[/green]")
        except Exception as exc:  # noqa: BLE001
            error_console.print(f"Validation failed: {exc}")
            raise SystemExit(1) from exc


# ---------------------------------------------------------------------------
# targets
# ---------------------------------------------------------------------------


@cli.command(name="targets")
@click.argument("agent_name")
@click.option("--path", "-p", default=None, help="Directory segment under the manifest main.")
@click.option("--config", "-c", default=None, help="Path to agentstructure config file.")
@click.option(
    "--format",
    "output_format",
    default="table",
    type=click.Choice(["table", "json"]),
    show_default=True,
    help="Output format.",
)
def targets_command(
    agent_name: str, path: str | None, config: str | None, output_format: str
) -> None:
    """Load every target of AGENT_NAME and list them."""
    from agentstructure.schema.errors import AgentStructureError

    agent = _build_agent(agent_name, path, config)
    try:
        asyncio.run(agent.load_all())
    except AgentStructureError as exc:
        error_console.print(f"Could not load targets: {exc}")
        raise SystemExit(1) from exc

    rows = [
        {"name": t.name, "enabled": t.enabled, "path": str(t.path)}
        for t in sorted(agent, key=lambda t: t.name)
    ]

    if output_format == "json":
        console.print_json(json.dumps(rows))
        return

    if not rows:
        console.print(f"[dim](No targets found for agent {agent_name!r})[/dim]")
        return

    table = Table(title=f"Targets of {agent_name}", header_style="bold cyan")
    table.add_column("Name")
    table.add_column("Enabled")
    table.add_column("Source")
    for row in rows:
        colour = "green" if row["enabled"] else "yellow"
        table.add_row(row["name"], f"[{colour}]{row['enabled']}[/{colour}]", row["path"])
    console.print(table)


# ---------------------------------------------------------------------------
# run
# ---------------------------------------------------------------------------


@cli.command(name="run")
@click.argument("agent_name")
@click.argument("target_name")
@click.option("--path", "-p", default=None, help="Directory segment under the manifest main.")
@click.option("--config", "-c", default=None, help="Path to agentstructure config file.")
def run_command(agent_name: str, target_name: str, path: str | None, config: str | None) -> None:
    """Load AGENT_NAME and run its target TARGET_NAME."""
    from agentstructure.schema.errors import AgentStructureError
    from agentstructure.structure.target import maybe_await

    agent = _build_agent(agent_name, path, config)

    async def _run() -> object:
        await agent.load_all()
        target = agent.get(target_name)
        if not target.enabled:
            raise click.ClickException(f"Target {target_name!r} is disabled.")
        return await maybe_await(target.run())

    try:
        result = asyncio.run(_run())
    except click.ClickException as exc:
        error_console.print(exc.format_message())
        raise SystemExit(1) from exc
    except AgentStructureError as exc:
        error_console.print(str(exc))
        raise SystemExit(1) from exc

    if result is not None:
        console.print(result)


if __name__ == "__main__":
    cli()
