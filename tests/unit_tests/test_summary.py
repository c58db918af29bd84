from rich.console import Console

from coordinator.models import Circuit, CircuitInputData, CircuitMetadata
from coordinator.utils.logging import log_ceremony_summary


def test_summary_lists_every_circuit(ceremony):
    metadata = CircuitMetadata(
        curve="bn-128",
        wires=600,
        constraints=500,
        private_inputs=2,
        public_outputs=1,
        labels=8,
        outputs=1,
        pot=9,
    )
    circuits = [
        Circuit.from_input(
            CircuitInputData(name=name, prefix=name, sequence_position=position),
            metadata,
        )
        for position, name in enumerate(["alpha", "beta"], start=1)
    ]
    console = Console(record=True, width=200)

    log_ceremony_summary(ceremony, circuits, console=console)

    output = console.export_text()
    assert "Test Ceremony" in output
    assert "Sun, 01 Nov 2026 00:00:00 UTC" in output
    assert "alpha" in output and "beta" in output
    assert "500" in output
