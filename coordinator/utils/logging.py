from __future__ import annotations

from rich.console import Console, JustifyMethod
from rich.panel import Panel
from rich.table import Table

from coordinator.models import CeremonyInputData, Circuit


def create_and_print_table(
    title: str,
    columns: list[tuple[str, JustifyMethod, str]],
    rows: list[list[str]],
    console: Console | None = None,
):
    """
    Create and print a table.

    Args:
        title (str): The title of the table.
        columns (list[tuple[str, JustifyMethod, str]]): A list of tuples containing column information.
            Each tuple should contain (column_name, justification, style).
        rows (list[list[str]]): A list of rows, where each row is a list of string values.
        console (Console | None): Where to print, a truecolor console by default.
    """
    table = Table(title=title)
    for col_name, justify, style in columns:
        table.add_column(col_name, justify=justify, style=style, no_wrap=True)
    for row in rows:
        table.add_row(*row)
    if console is None:
        console = Console(color_system="truecolor")
        console.width = 120
    console.print(table)


def log_ceremony_summary(
    ceremony: CeremonyInputData, circuits: list[Circuit], console: Console | None = None
):
    """
    Print the ceremony and its circuits before the coordinator confirms it.
    """
    if console is None:
        console = Console(color_system="truecolor")
        console.width = 120
    opens_on, closes_on = ceremony.utc_window()
    console.print(
        Panel(
            f"[bold]{ceremony.title}[/bold]\n[italic]{ceremony.description}[/italic]\n\n"
            f"Opens on [bold underline]{opens_on}[/bold underline]\n"
            f"Closes on [bold underline]{closes_on}[/bold underline]",
            title="[magenta]CEREMONY SUMMARY[/magenta]",
        )
    )
    rows = [
        [
            str(circuit.sequence_position),
            circuit.name,
            circuit.metadata.curve,
            str(circuit.metadata.wires),
            str(circuit.metadata.constraints),
            str(circuit.metadata.private_inputs),
            str(circuit.metadata.public_outputs),
            str(circuit.metadata.labels),
            str(circuit.metadata.outputs),
            str(circuit.metadata.pot),
        ]
        for circuit in circuits
    ]
    create_and_print_table(
        "circuits",
        [
            ("#", "right", "magenta"),
            ("name", "left", "bold"),
            ("curve", "left", "cyan"),
            ("wires", "right", "yellow"),
            ("constraints", "right", "yellow"),
            ("private inputs", "right", "yellow"),
            ("public inputs", "right", "yellow"),
            ("labels", "right", "yellow"),
            ("outputs", "right", "yellow"),
            ("PoT", "right", "green"),
        ],
        rows,
        console=console,
    )
