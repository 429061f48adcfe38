"""Rich rendering for Smart Calculator.

Builds the renderables for the calculator display, the history panel and
the on-screen keypad. Nothing here mutates state.
"""

from typing import List, Optional, Sequence, Tuple

from rich.console import Group, RenderableType
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .models import CalculatorState, HistoryItem
from .output_helper import OutputConfig, format_timestamp, format_value, truncate_list


# (label, fragment) rows; fragment None marks a command key
KEYPAD_LAYOUT: List[List[Tuple[str, Optional[str]]]] = [
    [("AC", None), ("DEL", None), ("(", "("), (")", ")")],
    [("7", "7"), ("8", "8"), ("9", "9"), ("÷", "/")],
    [("4", "4"), ("5", "5"), ("6", "6"), ("×", "*")],
    [("1", "1"), ("2", "2"), ("3", "3"), ("-", "-")],
    [("0", "0"), (".", "."), ("^", "^"), ("+", "+")],
]

# Every typed token that maps to an input fragment
KEY_FRAGMENTS = {
    label: fragment
    for row in KEYPAD_LAYOUT
    for label, fragment in row
    if fragment is not None
}
KEY_FRAGMENTS.update({"/": "/", "*": "*"})


def render_keypad(is_loading: bool = False) -> Panel:
    """Render the keypad grid with the solve key underneath."""
    table = Table.grid(padding=(0, 2))
    for _ in range(4):
        table.add_column(justify="center", min_width=5)

    for row in KEYPAD_LAYOUT:
        cells = []
        for label, fragment in row:
            if fragment is None:
                cells.append(f"[red]{label}[/red]")
            elif label.isdigit() or label == ".":
                cells.append(f"[bold]{label}[/bold]")
            else:
                cells.append(f"[blue]{label}[/blue]")
        table.add_row(*cells)

    if is_loading:
        solve_key = Text("Solving with Gemini...", style="dim")
    else:
        solve_key = Text("= Solve", style="bold white on blue")

    return Panel(
        Group(table, Text(""), solve_key),
        title="Keypad",
        border_style="blue",
        expand=False,
    )


def render_display(state: CalculatorState, config: Optional[OutputConfig] = None) -> RenderableType:
    """Render the problem input and, when present, the solution."""
    config = config or OutputConfig()

    problem = Text(state.input or "Type a math problem (e.g. 'Integration of x^2' or '5 * 24')")
    if not state.input:
        problem.stylize("dim")

    parts: List[RenderableType] = [
        Panel(problem, title="Problem / Question", title_align="left", border_style="white")
    ]

    if state.is_loading:
        parts.append(Text("Solving...", style="yellow"))
    elif state.has_solution:
        parts.append(render_solution(state.result, state.explanation, compact=config.compact_mode))

    return Group(*parts)


def render_solution(result: str, explanation: str, compact: bool = False) -> Panel:
    """Render a result with its explanation."""
    is_error = result == "Error" or result == "Config Error"
    color = "red" if is_error else "green"

    body: List[RenderableType] = []
    if result:
        body.append(Text(result, style=f"bold {color}", justify="right"))
    if explanation and not compact:
        if body:
            body.append(Text(""))
        body.append(Text("Explanation", style="bold blue"))
        body.append(Text(explanation))

    return Panel(Group(*body), title="Solution", title_align="left", border_style=color)


def render_history(items: Sequence[HistoryItem], config: Optional[OutputConfig] = None) -> RenderableType:
    """Render the history list, newest first."""
    config = config or OutputConfig()

    if not items:
        return Panel(
            Text("No calculations yet", style="dim"),
            title="History",
            border_style="blue",
            expand=False,
        )

    table = Table(title="History", show_header=True, header_style="bold")
    table.add_column("ID", style="dim")
    table.add_column("Expression")
    table.add_column("Result", style="green")
    table.add_column("Time", style="dim", justify="right")

    shown = items if config.max_history_shown <= 0 else items[: config.max_history_shown]
    for item in shown:
        table.add_row(
            item.id[:8],
            format_value(item.expression, config),
            f"= {format_value(item.result, config)}",
            format_timestamp(item.timestamp),
        )

    if len(shown) < len(items):
        summary = truncate_list(list(items), config.max_history_shown, summary_format="... and {count} older")
        table.caption = summary[-1]

    return table


def render_history_item(item: HistoryItem) -> Panel:
    """Render one history item in full."""
    body = Table.grid(padding=(0, 1))
    body.add_column(style="bold")
    body.add_column()
    body.add_row("ID:", item.id)
    body.add_row("Expression:", item.expression)
    body.add_row("Result:", Text(item.result, style="green"))
    body.add_row("When:", format_timestamp(item.timestamp, with_date=True))
    if item.explanation:
        body.add_row("Explanation:", item.explanation)
    return Panel(body, border_style="blue", expand=False)


def history_choice_label(item: HistoryItem, config: Optional[OutputConfig] = None) -> str:
    """One-line label used by the interactive history picker."""
    config = config or OutputConfig()
    return (
        f"{format_value(item.expression, config)} = {format_value(item.result, config)}"
        f"  ({format_timestamp(item.timestamp)})"
    )
