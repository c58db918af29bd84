from __future__ import annotations
import json

import toml

from coordinator.exceptions import CollectionError
from coordinator.models import CeremonyInputData

# Circuit keys handled by the collector itself
RESERVED_CIRCUIT_KEYS = {"file", "name", "prefix", "sequence_position"}


class TemplatePrompter:
    """
    Answers the setup questions from a JSON or TOML template file instead of
    the terminal, for unattended runs.

    Template layout:

        [ceremony]
        title = "..."
        description = "..."
        start_date = "2026-11-01T00:00:00Z"
        end_date = "2026-11-15T00:00:00Z"

        [[circuits]]
        file = "multiplier.r1cs"
        description = "..."
        timeout_mechanism = "FIXED"
        fixed_time_window = 15
    """

    def __init__(self, template: dict):
        self.ceremony = template.get("ceremony") or {}
        self.circuits = list(template.get("circuits") or [])
        self._answered = 0

        if not self.circuits:
            raise CollectionError("The template lists no circuits")
        files = [circuit.get("file") for circuit in self.circuits]
        if any(not f for f in files):
            raise CollectionError("Every template circuit needs a 'file' entry")
        if len(set(files)) != len(files):
            raise CollectionError("The template lists the same circuit file twice")

    @classmethod
    def from_file(cls, template_path: str) -> TemplatePrompter:
        with open(template_path, "r", encoding="utf-8") as f:
            if template_path.endswith(".json"):
                template = json.load(f)
            elif template_path.endswith(".toml"):
                template = toml.load(f)
            else:
                raise ValueError(f"Unsupported template format: {template_path}")
        return cls(template)

    def check_pool(self, pool: tuple[str, ...]):
        missing = [c["file"] for c in self.circuits if c["file"] not in pool]
        if missing:
            raise CollectionError(
                f"Template circuits not found in the working directory: {', '.join(missing)}"
            )

    def ceremony_input(self) -> CeremonyInputData:
        return CeremonyInputData(**self.ceremony)

    def select_circuit(self, candidates: tuple[str, ...], position: int) -> str:
        return self.circuits[position - 1]["file"]

    def circuit_input(self, circuit_name: str, position: int) -> dict:
        self._answered = position
        return {
            key: value
            for key, value in self.circuits[position - 1].items()
            if key not in RESERVED_CIRCUIT_KEYS
        }

    def add_another_circuit(self) -> bool:
        return self._answered < len(self.circuits)
