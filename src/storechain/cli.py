"""storechain CLI for inspecting and exercising configured stores - Tyro implementation."""

import json
import logging
import sys
from builtins import print as builtin_print
from pathlib import Path
from typing import Annotated, Any

import attrs
import tyro
import yaml
from rich import print
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from storechain.config import StoreChainConfig, get_config, set_config_instance
from storechain.errors import StoreChainError


# Subcommand definitions using attrs
@attrs.define
class Chain:
    """Show the configured middleware chain, outermost first."""

    json: Annotated[bool, tyro.conf.arg(aliases=["-j"])] = False
    """Output the chain as JSON."""


@attrs.define
class Replay:
    """Dispatch a list of actions through the configured store and print the final state."""

    actions_file: Annotated[Path, tyro.conf.Positional]
    """YAML or JSON file containing a list of actions."""

    json: Annotated[bool, tyro.conf.arg(aliases=["-j"])] = False
    """Output the final state as JSON."""

    verbose: Annotated[bool, tyro.conf.arg(aliases=["-v"])] = False
    """Print the state after every action."""


# Type alias for all subcommands
Command = Annotated[Chain, tyro.conf.subcommand(name="chain")] | Annotated[Replay, tyro.conf.subcommand(name="replay")]


def setup_logging(debug: bool = False) -> None:
    """Configure logging with 100-character text width."""
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format="%(asctime)s - %(name)-20s - %(levelname)-8s - %(message).100s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def load_actions(actions_file: Path) -> list[Any]:
    """Load a list of actions from a YAML or JSON file.

    JSON is a subset of YAML, so both formats go through the YAML loader.

    Args:
        actions_file: Path to the actions file

    Returns:
        List of actions

    Raises:
        StoreChainError: If the file is missing or does not contain a list
    """
    if not actions_file.exists():
        raise StoreChainError(f"Actions file not found: {actions_file}")

    try:
        with actions_file.open() as f:
            actions = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise StoreChainError(f"Invalid actions file {actions_file}: {e}") from e

    if actions is None:
        return []
    if not isinstance(actions, list):
        raise StoreChainError(f"Expected a list of actions in {actions_file}, got {type(actions).__name__}")
    return actions


def show_chain(config: StoreChainConfig, json_output: bool = False) -> None:
    """Print the configured middleware chain.

    Args:
        config: Loaded configuration
        json_output: Output as JSON instead of a table
    """
    entries = config.middleware_entries

    if json_output:
        chain_data = {
            "config": str(config.config_path),
            "reducer": config.reducer,
            "middleware": [{"position": i + 1, "path": e.path, "params": e.params} for i, e in enumerate(entries)],
        }
        builtin_print(json.dumps(chain_data, indent=2))
        return

    console = Console()
    console.print(Panel(f"[bold cyan]Middleware Chain[/bold cyan] [dim]({config.config_path})[/dim]", expand=False))

    if not entries:
        console.print("[yellow]No middleware configured[/yellow] - dispatch goes straight to the reducer")
    else:
        table = Table(show_header=True, header_style="bold")
        table.add_column("#", style="dim", justify="right")
        table.add_column("Middleware", style="cyan")
        table.add_column("Params", style="green")

        for i, entry in enumerate(entries):
            params = ", ".join(f"{k}={v!r}" for k, v in entry.params.items()) or "-"
            table.add_row(str(i + 1), entry.path, params)

        console.print(table)

    order = [e.path.rsplit(".", 1)[-1].rsplit(":", 1)[-1] for e in entries]
    console.print("\n[bold]Dispatch Order:[/bold]")
    console.print(f"  {' → '.join([*order, config.reducer or '<no reducer>'])}")


def replay_actions(config: StoreChainConfig, cmd: Replay) -> Any:
    """Dispatch every action from a file through the configured store.

    Args:
        config: Loaded configuration
        cmd: Replay subcommand options

    Returns:
        Final store state
    """
    actions = load_actions(cmd.actions_file)
    store = config.build_store()
    console = Console()

    for i, action in enumerate(actions):
        store.dispatch(action)
        if cmd.verbose and not cmd.json:
            console.print(f"[dim]{i + 1:>4}[/dim] {action!r} [dim]→[/dim] {store.get_state()!r}")

    state = store.get_state()
    if cmd.json:
        builtin_print(json.dumps(state, indent=2, default=str))
    else:
        console.print(f"[bold]Dispatched {len(actions)} action(s)[/bold]")
        console.print("[bold]Final state:[/bold]", state)
    return state


def main(
    cmd: Annotated[Command, tyro.conf.arg(name="")],
    *,
    config: Annotated[Path | None, tyro.conf.arg(help="Path to storechain.yaml")] = None,
) -> None:
    """storechain - middleware chains for dispatch-based state stores."""
    try:
        if config is not None:
            set_config_instance(StoreChainConfig.from_yaml(config))
        loaded = get_config()

        setup_logging(loaded.debug)

        if isinstance(cmd, Chain):
            show_chain(loaded, json_output=cmd.json)
        elif isinstance(cmd, Replay):
            replay_actions(loaded, cmd)
    except StoreChainError as e:
        print(f"[red]Error:[/red] {e}")
        sys.exit(1)


def entry_point() -> None:
    """Entry point for the storechain command."""
    tyro.cli(main)


if __name__ == "__main__":
    entry_point()
