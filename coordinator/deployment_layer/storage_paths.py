from __future__ import annotations
from dataclasses import dataclass

from coordinator.constants import (
    CIRCUITS_COLLECTION,
    CONTRIBUTIONS_COLLECTION,
    POT_STORAGE_NAME,
)


def _join(*parts: str) -> str:
    for part in parts:
        if not part or "/" in part:
            raise ValueError(f"Invalid storage path component: {part!r}")
    return "/".join(parts)


@dataclass(frozen=True)
class StoragePaths:
    """
    Canonical object keys inside a ceremony's storage namespace.

    <ceremony>/pot/<ptau>
    <ceremony>/circuits/<circuit>/<r1cs>
    <ceremony>/circuits/<circuit>/contributions/<zkey>
    """

    ceremony_prefix: str

    def __post_init__(self):
        _join(self.ceremony_prefix)

    def pot(self, pot_filename: str) -> str:
        return _join(self.ceremony_prefix, POT_STORAGE_NAME, pot_filename)

    def r1cs(self, circuit_prefix: str, r1cs_filename: str) -> str:
        return _join(
            self.ceremony_prefix, CIRCUITS_COLLECTION, circuit_prefix, r1cs_filename
        )

    def zkey(self, circuit_prefix: str, zkey_filename: str) -> str:
        return _join(
            self.ceremony_prefix,
            CIRCUITS_COLLECTION,
            circuit_prefix,
            CONTRIBUTIONS_COLLECTION,
            zkey_filename,
        )
