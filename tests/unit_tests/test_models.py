from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from coordinator.models import (
    CeremonyInputData,
    Circuit,
    CircuitInputData,
    CircuitMetadata,
    TimeoutMechanism,
    extract_prefix,
    to_backend_camel,
)


@pytest.mark.parametrize(
    "value, expected",
    [
        ("Test Ceremony", "test-ceremony"),
        ("Semaphore v2.0 (final)", "semaphore-v2-0--final-"),
        ("already-safe", "already-safe"),
        ("A/B\\C", "a-b-c"),
    ],
)
def test_extract_prefix(value, expected):
    assert extract_prefix(value) == expected


@pytest.mark.parametrize(
    "name, expected",
    [
        ("title", "title"),
        ("start_date", "startDate"),
        ("r1cs_storage_path", "r1csStoragePath"),
        ("initial_zkey_blake2b_hash", "initialZkeyBlake2bHash"),
    ],
)
def test_backend_camel_keeps_digit_words(name, expected):
    assert to_backend_camel(name) == expected


def test_ceremony_prefix(ceremony):
    assert ceremony.prefix == "test-ceremony"


def test_ceremony_must_open_before_closing():
    with pytest.raises(ValidationError):
        CeremonyInputData(
            title="Backwards",
            start_date=datetime(2026, 11, 15, tzinfo=timezone.utc),
            end_date=datetime(2026, 11, 1, tzinfo=timezone.utc),
        )


def test_ceremony_window_in_utc(ceremony):
    opens_on, closes_on = ceremony.utc_window()
    assert opens_on == "Sun, 01 Nov 2026 00:00:00 UTC"
    assert closes_on == "Sun, 15 Nov 2026 00:00:00 UTC"


def test_circuit_input_is_frozen():
    input_data = CircuitInputData(name="mul", prefix="mul", sequence_position=1)
    with pytest.raises(ValidationError):
        input_data.name = "other"


def test_sequence_position_starts_at_one():
    with pytest.raises(ValidationError):
        CircuitInputData(name="mul", prefix="mul", sequence_position=0)


def test_timeout_mechanism_is_case_insensitive():
    assert TimeoutMechanism("fixed") is TimeoutMechanism.FIXED


def test_circuit_serializes_with_camel_case_keys():
    input_data = CircuitInputData(
        name="mul",
        prefix="mul",
        sequence_position=1,
        timeout_mechanism=TimeoutMechanism.DYNAMIC,
        dynamic_threshold=10,
    )
    metadata = CircuitMetadata(
        curve="bn-128",
        wires=6,
        constraints=3,
        private_inputs=2,
        public_outputs=1,
        labels=8,
        outputs=1,
        pot=2,
    )
    circuit = Circuit.from_input(input_data, metadata)
    payload = circuit.model_dump(mode="json", by_alias=True)

    assert not circuit.is_staged
    assert payload["sequencePosition"] == 1
    assert payload["timeoutMechanism"] == "DYNAMIC"
    assert payload["metadata"]["privateInputs"] == 2
    assert payload["avgTimings"] == {
        "avgContributionTime": 0,
        "avgVerificationTime": 0,
    }
