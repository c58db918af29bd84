from __future__ import annotations
import os
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Optional, Protocol

import bittensor as bt

from coordinator.constants import R1CS_SUFFIX
from coordinator.exceptions import CollectionError
from coordinator.models import CircuitInputData, extract_prefix


def find_r1cs_files(working_dir: str) -> tuple[str, ...]:
    """
    List the circuit files of the working directory, sorted by name.

    Raises:
        CollectionError: If the directory holds no circuit file.
    """
    try:
        entries = sorted(os.listdir(working_dir))
    except OSError as e:
        raise CollectionError(f"Unable to read working directory {working_dir}") from e

    r1cs_files = tuple(
        entry
        for entry in entries
        if entry.endswith(R1CS_SUFFIX)
        and os.path.isfile(os.path.join(working_dir, entry))
    )
    if not r1cs_files:
        raise CollectionError(
            "Your working directory must contain the Rank-1 Constraint System (R1CS) "
            "file for each circuit"
        )
    return r1cs_files


def circuit_name_from_file(filename: str) -> str:
    return filename.removesuffix(R1CS_SUFFIX)


class CircuitPrompter(Protocol):
    """
    The interactive side of circuit collection.
    """

    def select_circuit(self, candidates: tuple[str, ...], position: int) -> str: ...

    def circuit_input(self, circuit_name: str, position: int) -> dict: ...

    def add_another_circuit(self) -> bool: ...


class CollectorStep(str, Enum):
    SELECTING_CIRCUIT = "selecting_circuit"
    COLLECTING_INPUT = "collecting_input"
    ASKING_CONTINUE = "asking_continue"
    DONE = "done"


@dataclass(frozen=True)
class CollectorState:
    """
    One state of the collection machine. Transitions build a new state,
    the pool only ever shrinks.
    """

    step: CollectorStep
    pool: tuple[str, ...]
    position: int = 1
    selected: Optional[str] = None
    collected: tuple[CircuitInputData, ...] = field(default_factory=tuple)


class CircuitCollector:
    """
    Collects one `CircuitInputData` per selected circuit file, in sequence order.
    """

    def __init__(self, prompter: CircuitPrompter):
        self.prompter = prompter

    def collect(self, pool: tuple[str, ...]) -> list[CircuitInputData]:
        if not pool:
            raise CollectionError("No circuit files available for the ceremony")
        state = CollectorState(step=CollectorStep.SELECTING_CIRCUIT, pool=tuple(pool))
        while state.step != CollectorStep.DONE:
            state = self.transition(state)
        return list(state.collected)

    def transition(self, state: CollectorState) -> CollectorState:
        if state.step == CollectorStep.SELECTING_CIRCUIT:
            return self._select(state)
        if state.step == CollectorStep.COLLECTING_INPUT:
            return self._collect_input(state)
        if state.step == CollectorStep.ASKING_CONTINUE:
            return self._ask_continue(state)
        return state

    def _select(self, state: CollectorState) -> CollectorState:
        bt.logging.info(f"Circuit #{state.position}")
        selected = self.prompter.select_circuit(state.pool, state.position)
        if selected not in state.pool:
            raise CollectionError(f"Circuit file {selected} is not available")
        prefix = extract_prefix(circuit_name_from_file(selected))
        if any(collected.prefix == prefix for collected in state.collected):
            raise CollectionError(
                f"Circuit file {selected} maps to the storage prefix {prefix!r} "
                "of an already selected circuit, rename one of them"
            )
        return replace(
            state,
            step=CollectorStep.COLLECTING_INPUT,
            pool=tuple(entry for entry in state.pool if entry != selected),
            selected=selected,
        )

    def _collect_input(self, state: CollectorState) -> CollectorState:
        name = circuit_name_from_file(state.selected)
        answers = self.prompter.circuit_input(name, state.position)
        input_data = CircuitInputData(
            **answers,
            name=name,
            prefix=extract_prefix(name),
            sequence_position=state.position,
        )
        return replace(
            state,
            step=CollectorStep.ASKING_CONTINUE,
            selected=None,
            collected=state.collected + (input_data,),
        )

    def _ask_continue(self, state: CollectorState) -> CollectorState:
        if not state.pool:
            bt.logging.info("No circuits left, assembling your ceremony...")
            return replace(state, step=CollectorStep.DONE)
        if not self.prompter.add_another_circuit():
            return replace(state, step=CollectorStep.DONE)
        return replace(
            state, step=CollectorStep.SELECTING_CIRCUIT, position=state.position + 1
        )
