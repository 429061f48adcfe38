"""Interactive keypad session.

Each line typed by the user is one intent:
- keypad labels (0-9 . ( ) + - × * ÷ / ^) append to the input
- AC clears, DEL deletes the last character
- = (or an empty line) solves; a line ending in = appends then solves
- :h picks a history item, :hc clears history, :k shows the keypad
- :q quits
Any other text is appended as typed, after a space when the input
does not already end in one.
"""

import asyncio
import logging
from typing import Callable, Optional

import questionary
from rich.console import Console

from .controller import CalculatorController
from .display import (
    KEY_FRAGMENTS,
    history_choice_label,
    render_display,
    render_history,
    render_keypad,
)
from .models import CalculatorState
from .output_helper import OutputConfig


logger = logging.getLogger(__name__)

HELP_TEXT = """[bold]Keys[/bold]
  0-9 . ( ) + - × ÷ ^   append to the problem
  AC                    clear problem and solution
  DEL                   delete last character
  =  or Enter           solve
  :h                    pick from history
  :hc                   clear history
  :k                    show keypad
  :q                    quit
Anything else is added to the problem as typed (lines are joined with a space)."""

QUIT_COMMANDS = {":q", ":quit", ":exit"}


class InteractiveSession:
    """Drives a CalculatorController from typed lines."""

    def __init__(
        self,
        controller: CalculatorController,
        console: Optional[Console] = None,
        output: Optional[OutputConfig] = None,
        reader: Optional[Callable[[str], str]] = None,
        assume_yes: bool = False,
    ):
        """Initialize the session.

        Args:
            controller: Controller receiving the intents.
            console: Console to render on.
            output: Output settings.
            reader: Reads one line given a prompt; defaults to console.input.
            assume_yes: Skip the confirmation before clearing history.
        """
        self.controller = controller
        self.console = console or Console()
        self.output = output or OutputConfig()
        self._reader = reader or (lambda prompt: self.console.input(prompt))
        self.assume_yes = assume_yes
        self.state: CalculatorState = controller.snapshot()
        self.running = False
        self._unsubscribe = controller.subscribe(self._on_state)

    def _on_state(self, state: CalculatorState):
        self.state = state

    def render(self):
        self.console.print(render_display(self.state, self.output))

    async def run(self):
        """Read and handle lines until quit or end of input."""
        self.running = True
        self.console.print("[bold blue]Smart Calculator[/bold blue] [dim]Powered by Gemini AI[/dim]")
        self.console.print("[dim]Type :help for keys, :q to quit.[/dim]\n")
        self.render()

        try:
            while self.running:
                try:
                    line = await asyncio.to_thread(self._reader, "[bold]> [/bold]")
                except (EOFError, KeyboardInterrupt):
                    break
                await self.handle_line(line)
        finally:
            self._unsubscribe()
            self.running = False

    async def handle_line(self, line: str):
        """Dispatch one typed line."""
        token = line.strip()
        command = token.lower()

        if command in QUIT_COMMANDS:
            self.running = False
            return

        if command in (":help", "?"):
            self.console.print(HELP_TEXT)
            return

        if command == ":k":
            self.console.print(render_keypad(self.state.is_loading))
            return

        if command == ":h":
            await self.pick_history()
            return

        if command == ":hc":
            await self.clear_history()
            return

        if command == "ac":
            self.controller.on_clear()
        elif command == "del":
            self.controller.on_delete()
        elif token in ("", "="):
            await self.solve()
            return
        elif token in KEY_FRAGMENTS:
            self.controller.on_input(KEY_FRAGMENTS[token])
        elif token.endswith("="):
            self._append_text(token[:-1].rstrip())
            await self.solve()
            return
        else:
            self._append_text(token)

        self.render()

    def _append_text(self, text: str):
        """Append a typed line, keeping a word break from the previous line."""
        current = self.controller.input
        if text and current and not current[-1].isspace():
            text = " " + text
        self.controller.on_input(text)

    async def solve(self):
        if not self.controller.input.strip():
            self.console.print("[yellow]Enter a math problem first.[/yellow]")
            return

        with self.console.status("Solving with Gemini..."):
            await self.controller.on_solve()
        self.render()

    async def pick_history(self):
        items = self.controller.history
        if not items:
            self.console.print(render_history(items, self.output))
            return

        choices = [
            questionary.Choice(title=history_choice_label(item, self.output), value=item.id)
            for item in items
        ]
        selected_id = await questionary.select("Load calculation:", choices=choices).ask_async()
        if not selected_id:
            return

        item = self.controller.find_history_item(selected_id)
        if item is not None:
            self.controller.on_select_history_item(item)
            self.render()

    async def clear_history(self):
        if not self.controller.history:
            self.console.print("[dim]History is already empty.[/dim]")
            return

        if not self.assume_yes:
            confirmed = await questionary.confirm("Clear all history?", default=False).ask_async()
            if not confirmed:
                self.console.print("[yellow]Aborted.[/yellow]")
                return

        self.controller.on_clear_history()
        self.console.print("[green]History cleared.[/green]")
