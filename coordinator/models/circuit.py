from __future__ import annotations
from enum import Enum

from pydantic import BaseModel, Field

from coordinator.models.ceremony import to_backend_camel

FROZEN_CAMEL_CONFIG = {
    "frozen": True,
    "alias_generator": to_backend_camel,
    "populate_by_name": True,
}


class TimeoutMechanism(str, Enum):
    """
    How the contribution phase decides a participant has timed out.
    """

    DYNAMIC = "DYNAMIC"
    FIXED = "FIXED"

    def __str__(self):
        return self.value

    @classmethod
    def _missing_(cls, value):
        if isinstance(value, str) and value.upper() != value:
            return cls(value.upper())
        raise ValueError(f"Cannot convert {value} to {cls.__name__}")


class CircuitInputData(BaseModel):
    """
    Per-circuit input collected from the coordinator, one per selected circuit file.
    """

    name: str = Field(..., min_length=1)
    prefix: str = Field(..., min_length=1)
    description: str = ""
    sequence_position: int = Field(..., ge=1)
    timeout_mechanism: TimeoutMechanism | None = None
    dynamic_threshold: int | None = Field(
        None, ge=0, le=100, description="Tolerated slowdown over the average, in %"
    )
    fixed_time_window: int | None = Field(
        None, ge=1, description="Time allowed per contribution, in minutes"
    )

    model_config = FROZEN_CAMEL_CONFIG


class CircuitMetadata(BaseModel):
    """
    Statistics extracted from the circuit's R1CS report.
    """

    curve: str
    wires: int = Field(..., ge=0)
    constraints: int = Field(..., ge=0)
    private_inputs: int = Field(..., ge=0)
    public_outputs: int = Field(..., ge=0)
    labels: int = Field(..., ge=0)
    outputs: int = Field(..., ge=0)
    pot: int = Field(..., ge=1, description="Required Powers of Tau exponent")

    model_config = FROZEN_CAMEL_CONFIG


class CircuitFiles(BaseModel):
    """
    Names, storage paths and hashes of the three staged artifacts of a circuit.
    """

    r1cs_filename: str
    pot_filename: str
    initial_zkey_filename: str
    r1cs_storage_path: str = Field(..., min_length=1)
    pot_storage_path: str = Field(..., min_length=1)
    initial_zkey_storage_path: str = Field(..., min_length=1)
    r1cs_blake2b_hash: str = Field(..., min_length=1)
    pot_blake2b_hash: str = Field(..., min_length=1)
    initial_zkey_blake2b_hash: str = Field(..., min_length=1)

    model_config = FROZEN_CAMEL_CONFIG


class CircuitTimings(BaseModel):
    avg_contribution_time: float = 0
    avg_verification_time: float = 0

    model_config = FROZEN_CAMEL_CONFIG


class Circuit(CircuitInputData):
    """
    A circuit as registered with the ceremony.

    Built from the collected input, enriched with metadata after extraction
    and with files once every artifact has been staged.
    """

    metadata: CircuitMetadata
    files: CircuitFiles | None = None
    avg_timings: CircuitTimings = Field(default_factory=CircuitTimings)

    @classmethod
    def from_input(
        cls, input_data: CircuitInputData, metadata: CircuitMetadata
    ) -> Circuit:
        return cls(**input_data.model_dump(), metadata=metadata)

    @property
    def is_staged(self) -> bool:
        return self.files is not None

    def with_files(self, files: CircuitFiles) -> Circuit:
        return self.model_copy(
            update={"files": files, "avg_timings": CircuitTimings()}
        )
