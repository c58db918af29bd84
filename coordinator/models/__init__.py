from .ceremony import CeremonyInputData, extract_prefix, to_backend_camel
from .circuit import (
    Circuit,
    CircuitFiles,
    CircuitInputData,
    CircuitMetadata,
    CircuitTimings,
    TimeoutMechanism,
)

__all__ = [
    "CeremonyInputData",
    "extract_prefix",
    "to_backend_camel",
    "Circuit",
    "CircuitFiles",
    "CircuitInputData",
    "CircuitMetadata",
    "CircuitTimings",
    "TimeoutMechanism",
]
