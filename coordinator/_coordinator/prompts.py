from __future__ import annotations
from datetime import datetime, timezone

from pydantic import ValidationError
from rich.console import Console
from rich.prompt import Confirm, IntPrompt, Prompt

from coordinator.models import CeremonyInputData, TimeoutMechanism

DATE_FORMAT = "%Y-%m-%d %H:%M"


def parse_utc_date(value: str) -> datetime:
    return datetime.strptime(value.strip(), DATE_FORMAT).replace(tzinfo=timezone.utc)


class InteractivePrompter:
    """
    Asks the coordinator for ceremony and circuit input on the terminal.
    """

    def __init__(self, console: Console | None = None):
        self.console = console or Console()

    def ceremony_input(self) -> CeremonyInputData:
        while True:
            title = Prompt.ask("Ceremony title", console=self.console)
            description = Prompt.ask(
                "Ceremony description", default="", console=self.console
            )
            start_date = self._ask_date("Opens on (UTC, YYYY-MM-DD HH:MM)")
            end_date = self._ask_date("Closes on (UTC, YYYY-MM-DD HH:MM)")
            try:
                return CeremonyInputData(
                    title=title,
                    description=description,
                    start_date=start_date,
                    end_date=end_date,
                )
            except ValidationError as e:
                self.console.print(f"[red]Invalid ceremony input:[/red] {e}")

    def _ask_date(self, question: str) -> datetime:
        while True:
            answer = Prompt.ask(question, console=self.console)
            try:
                return parse_utc_date(answer)
            except ValueError:
                self.console.print(f"[red]Please use the {DATE_FORMAT} format[/red]")

    def select_circuit(self, candidates: tuple[str, ...], position: int) -> str:
        self.console.print(f"\n[bold]Circuit # [magenta]{position}[/magenta][/bold]\n")
        return Prompt.ask(
            "Select the circuit file",
            choices=list(candidates),
            default=candidates[0],
            console=self.console,
        )

    def circuit_input(self, circuit_name: str, position: int) -> dict:
        answers = {
            "description": Prompt.ask(
                f"Description of {circuit_name}", default="", console=self.console
            )
        }
        mechanism = Prompt.ask(
            "Contribution timeout mechanism",
            choices=[m.value for m in TimeoutMechanism],
            default=TimeoutMechanism.DYNAMIC.value,
            console=self.console,
        )
        answers["timeout_mechanism"] = TimeoutMechanism(mechanism)
        if answers["timeout_mechanism"] == TimeoutMechanism.DYNAMIC:
            answers["dynamic_threshold"] = IntPrompt.ask(
                "Tolerated slowdown over the average contribution time (%)",
                default=10,
                console=self.console,
            )
        else:
            answers["fixed_time_window"] = IntPrompt.ask(
                "Time allowed per contribution (minutes)",
                default=10,
                console=self.console,
            )
        return answers

    def add_another_circuit(self) -> bool:
        return Confirm.ask(
            "Want to add another circuit for the ceremony?",
            default=True,
            console=self.console,
        )

    def confirm_ceremony(self) -> bool:
        return Confirm.ask(
            "Please, confirm to create the ceremony", default=True, console=self.console
        )
