from __future__ import annotations
import hashlib
from typing import Iterable

import bittensor as bt

from coordinator._coordinator.setup_paths import SetupPaths
from coordinator.constants import INITIAL_ZKEY_INDEX, R1CS_SUFFIX, ZKEY_SUFFIX
from coordinator.deployment_layer.pot_cache import PotCache, pot_filename
from coordinator.deployment_layer.storage import CeremonyStorage
from coordinator.deployment_layer.storage_paths import StoragePaths
from coordinator.execution_layer.zkey_handler import ZkeyHandler
from coordinator.models import Circuit, CircuitFiles

STAGE_LOG_PREFIX = " STAGE | "


def blake2b_hex(value: str) -> str:
    """
    Hex blake2b-512 digest of a string, matching `blake2bHex` of blakejs.
    """
    return hashlib.blake2b(value.encode("utf-8")).hexdigest()


class ArtifactStager:
    """
    Stages the artifacts of each circuit into durable storage.

    For every circuit, in sequence order: resolve its Powers of Tau file,
    compute the initial zkey and upload zkey, Powers of Tau and R1CS files.
    A circuit is returned with its files only once all three are stored.
    """

    def __init__(
        self,
        paths: SetupPaths,
        storage_paths: StoragePaths,
        storage: CeremonyStorage,
        pot_cache: PotCache,
        zkey_handler: ZkeyHandler,
    ):
        self.paths = paths
        self.storage_paths = storage_paths
        self.storage = storage
        self.pot_cache = pot_cache
        self.zkey_handler = zkey_handler

    def stage_all(self, circuits: Iterable[Circuit]) -> list[Circuit]:
        ordered = sorted(circuits, key=lambda c: c.sequence_position)
        return [self.stage(circuit) for circuit in ordered]

    def stage(self, circuit: Circuit) -> Circuit:
        bt.logging.info(
            f"{STAGE_LOG_PREFIX}Setup for circuit #{circuit.sequence_position} ({circuit.name})"
        )

        # Powers of Tau, local cache first
        exponent = circuit.metadata.pot
        local_pot_path = self.pot_cache.resolve(exponent)
        pot_name = pot_filename(exponent)
        pot_storage_path = self.storage_paths.pot(pot_name)

        # Storage is checked independently of the local cache
        pot_already_stored = self.storage.exists(pot_storage_path)

        r1cs_filename = f"{circuit.prefix}{R1CS_SUFFIX}"
        zkey_filename = f"{circuit.prefix}_{INITIAL_ZKEY_INDEX}{ZKEY_SUFFIX}"
        local_r1cs_path = self.paths.r1cs_path(f"{circuit.name}{R1CS_SUFFIX}")
        local_zkey_path = self.paths.zkey_path(zkey_filename)

        r1cs_storage_path = self.storage_paths.r1cs(circuit.prefix, r1cs_filename)
        zkey_storage_path = self.storage_paths.zkey(circuit.prefix, zkey_filename)

        self.zkey_handler.new_zkey(local_r1cs_path, local_pot_path, local_zkey_path)
        bt.logging.success(
            f"{STAGE_LOG_PREFIX}zKey {zkey_filename} successfully computed"
        )

        self.storage.upload(local_zkey_path, zkey_storage_path)
        bt.logging.success(
            f"{STAGE_LOG_PREFIX}zKey {zkey_filename} successfully saved on storage"
        )

        if not pot_already_stored:
            self.storage.upload(local_pot_path, pot_storage_path)
            bt.logging.success(
                f"{STAGE_LOG_PREFIX}Powers of Tau {pot_name} successfully saved on storage"
            )
        else:
            bt.logging.info(
                f"{STAGE_LOG_PREFIX}Powers of Tau {pot_name} already stored"
            )

        self.storage.upload(local_r1cs_path, r1cs_storage_path)
        bt.logging.success(
            f"{STAGE_LOG_PREFIX}R1CS {r1cs_filename} successfully saved on storage"
        )

        files = CircuitFiles(
            r1cs_filename=r1cs_filename,
            pot_filename=pot_name,
            initial_zkey_filename=zkey_filename,
            r1cs_storage_path=r1cs_storage_path,
            pot_storage_path=pot_storage_path,
            initial_zkey_storage_path=zkey_storage_path,
            r1cs_blake2b_hash=blake2b_hex(r1cs_storage_path),
            pot_blake2b_hash=blake2b_hex(pot_storage_path),
            initial_zkey_blake2b_hash=blake2b_hex(zkey_storage_path),
        )
        return circuit.with_files(files)
