"""CLI interface for Smart Calculator.

Commands:
- interactive: Keypad session (default when no command is given)
- solve: Solve one problem and exit
- history: List, show or clear past calculations
- config: Show the effective configuration
"""

import asyncio
import logging
import sys
from typing import Optional

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from . import __version__
from .client import CalculationClient
from .config import CalculatorConfig, get_api_key, load_config, mask_secret
from .controller import CalculatorController
from .display import render_history, render_history_item, render_solution
from .history_store import HistoryStore, InMemoryHistoryStore, JsonHistoryStore
from .providers import GeminiProvider
from .repl import InteractiveSession


console = Console()
logger = logging.getLogger(__name__)


def setup_logging(verbose: bool):
    """Send log records to stderr through rich."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def build_controller(config: CalculatorConfig, no_history: bool = False) -> CalculatorController:
    """Wire client, provider and history store for a command."""
    api_key = get_api_key(config)
    provider = GeminiProvider(api_key=api_key, model=config.model) if api_key else None
    client = CalculationClient(provider=provider, api_key=api_key, api_key_env=config.api_key_env)

    store: HistoryStore
    if no_history:
        store = InMemoryHistoryStore()
    else:
        store = JsonHistoryStore(config.history_path)

    return CalculatorController(client=client, store=store)


def _history_controller(config: CalculatorConfig) -> CalculatorController:
    """Controller for history-only commands; no credential needed."""
    client = CalculationClient(provider=None, api_key=None)
    return CalculatorController(client=client, store=JsonHistoryStore(config.history_path))


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="smart-calculator")
@click.option(
    "--home",
    envvar="SMART_CALCULATOR_HOME",
    default=None,
    help="Data directory (default: ~/.smart-calculator)",
)
@click.option("--model", "-m", default=None, help="Gemini model to use")
@click.option("--verbose", "-v", is_flag=True, help="Show debug logging")
@click.pass_context
def main(ctx, home: Optional[str], model: Optional[str], verbose: bool):
    """Smart Calculator - math answers from Gemini in your terminal.

    Type a problem in plain words or symbols and get the result with a
    short explanation. Successful calculations are kept in a local
    history.
    """
    setup_logging(verbose)

    config = load_config(home)
    if model:
        config.model = model

    ctx.ensure_object(dict)
    ctx.obj["config"] = config

    if ctx.invoked_subcommand is None:
        ctx.invoke(interactive)


# --- Solving ---


@main.command()
@click.option("--no-history", is_flag=True, help="Do not read or write the history file")
@click.option("--yes", "-y", is_flag=True, help="Clear history without confirmation")
@click.pass_context
def interactive(ctx, no_history: bool, yes: bool):
    """Start the interactive keypad session."""
    config = ctx.obj["config"]
    controller = build_controller(config, no_history=no_history)

    if not controller.client.is_configured:
        console.print(
            f"[yellow]No API key found. Set {config.api_key_env} "
            "in your environment or .env file.[/yellow]"
        )

    session = InteractiveSession(
        controller,
        console=console,
        output=config.output,
        assume_yes=yes,
    )
    asyncio.run(session.run())


@main.command()
@click.argument("expression", nargs=-1, required=True)
@click.option("--no-history", is_flag=True, help="Do not save the result to history")
@click.pass_context
def solve(ctx, expression: tuple, no_history: bool):
    """Solve a math problem and exit.

    Examples:
        smart-calculator solve "5*24"
        smart-calculator solve integral of x^2 from 0 to 3
    """
    config = ctx.obj["config"]
    controller = build_controller(config, no_history=no_history)

    controller.set_input(" ".join(expression))
    response = asyncio.run(controller.solve())

    if response is None:
        console.print("[red]Error: Please enter a math problem.[/red]")
        sys.exit(1)

    console.print(
        render_solution(controller.result, controller.explanation, compact=config.output.compact_mode)
    )

    if response.is_error:
        sys.exit(1)


# --- History Commands ---


@main.group()
@click.pass_context
def history(ctx):
    """Manage calculation history."""
    pass


@history.command("list")
@click.option("--limit", "-n", type=int, default=None, help="Maximum entries to show")
@click.pass_context
def history_list(ctx, limit: Optional[int]):
    """List past calculations, newest first."""
    config = ctx.obj["config"]
    controller = _history_controller(config)

    output = config.output
    if limit is not None:
        output.max_history_shown = limit

    console.print(render_history(controller.history, output))


@history.command("show")
@click.argument("item_id")
@click.pass_context
def history_show(ctx, item_id: str):
    """Show one calculation in full (ID or unique ID prefix)."""
    config = ctx.obj["config"]
    controller = _history_controller(config)

    item = controller.find_history_item(item_id)
    if item is None:
        console.print(f"[red]History item not found: {item_id}[/red]")
        sys.exit(1)

    console.print(render_history_item(item))


@history.command("clear")
@click.option("--yes", "-y", is_flag=True, help="Skip confirmation")
@click.pass_context
def history_clear(ctx, yes: bool):
    """Delete all saved calculations."""
    config = ctx.obj["config"]
    controller = _history_controller(config)

    count = len(controller.history)
    if count and not yes:
        if not click.confirm(f"Clear {count} calculation(s)?", default=False):
            console.print("[yellow]Aborted.[/yellow]")
            return

    controller.clear_history()
    console.print("[green]History cleared.[/green]")


# --- Config Command ---


@main.command("config")
@click.pass_context
def show_config(ctx):
    """Show the effective configuration."""
    config = ctx.obj["config"]

    table = Table(title="Smart Calculator Configuration", show_header=False)
    table.add_column("Setting", style="bold")
    table.add_column("Value")

    table.add_row("Home", str(config.home))
    table.add_row("Config file", str(config.config_path))
    table.add_row("History file", str(config.history_path))
    table.add_row("Model", config.model)
    table.add_row("API key", f"{mask_secret(get_api_key(config))} ({config.api_key_env})")
    table.add_row("Compact mode", "yes" if config.output.compact_mode else "no")
    table.add_row("History shown", str(config.output.max_history_shown or "all"))

    console.print(table)


if __name__ == "__main__":
    main()
