"""
Entry point for assembling a phase 2 ceremony:
 - Collect ceremony input and one input per circuit file
 - Extract each circuit's metadata and its required Powers of Tau
 - Stage zkey, Powers of Tau and R1CS files of every circuit to storage
 - Register the ceremony with the backend
"""

from __future__ import annotations
import sys
import traceback
from typing import Callable, Optional

# isort: off
from coordinator import cli_parser  # <- this need to stay before bittensor import

import bittensor as bt

# isort: on

from coordinator._coordinator.ceremony_assembler import CeremonyAssembler
from coordinator._coordinator.circuit_collector import CircuitCollector, find_r1cs_files
from coordinator._coordinator.prompts import InteractivePrompter
from coordinator._coordinator.setup_paths import SetupPaths
from coordinator._coordinator.template import TemplatePrompter
from coordinator.constants import R1CS_SUFFIX
from coordinator.deployment_layer.artifact_stager import ArtifactStager
from coordinator.deployment_layer.pot_cache import PotCache
from coordinator.deployment_layer.storage import CeremonyStorage
from coordinator.deployment_layer.storage_paths import StoragePaths
from coordinator.exceptions import CeremonySetupError
from coordinator.execution_layer.r1cs_info import extract_circuit_metadata
from coordinator.execution_layer.zkey_handler import ZkeyHandler
from coordinator.models import CeremonyInputData, Circuit, CircuitMetadata
from coordinator.utils import run_preflight_checks
from coordinator.utils.logging import log_ceremony_summary

SETUP_LOG_PREFIX = " SETUP | "


class CeremonySetup:
    """
    Drives one ceremony setup, from circuit collection to registration.

    Nothing is written to storage before the coordinator confirms the
    ceremony, and nothing is registered before every circuit is staged.
    """

    def __init__(
        self,
        paths: SetupPaths,
        prompter,
        storage: CeremonyStorage,
        pot_cache: PotCache,
        zkey_handler: ZkeyHandler,
        assembler: CeremonyAssembler,
        confirm: Callable[[], bool],
        metadata_extractor: Callable[
            [str, str, str], CircuitMetadata
        ] = extract_circuit_metadata,
    ):
        self.paths = paths
        self.prompter = prompter
        self.storage = storage
        self.pot_cache = pot_cache
        self.zkey_handler = zkey_handler
        self.assembler = assembler
        self.confirm = confirm
        self.metadata_extractor = metadata_extractor

    def collect_circuits(self, pool: Optional[tuple[str, ...]] = None) -> list[Circuit]:
        if pool is None:
            pool = find_r1cs_files(self.paths.working_dir)
        bt.logging.debug(f"{SETUP_LOG_PREFIX}Circuit files found: {', '.join(pool)}")
        if hasattr(self.prompter, "check_pool"):
            self.prompter.check_pool(pool)

        inputs = CircuitCollector(self.prompter).collect(pool)

        circuits = []
        for input_data in inputs:
            metadata = self.metadata_extractor(
                self.paths.r1cs_path(f"{input_data.name}{R1CS_SUFFIX}"),
                self.paths.metadata_dir,
                input_data.prefix,
            )
            circuits.append(Circuit.from_input(input_data, metadata))
        return circuits

    def run(self) -> Optional[dict]:
        """
        Returns:
            dict | None: The registration acknowledgement, or None when the
                coordinator did not confirm the ceremony.
        """
        # Fail early on an empty working directory, before any question
        pool = find_r1cs_files(self.paths.working_dir)

        ceremony: CeremonyInputData = self.prompter.ceremony_input()
        bt.logging.info(
            f"{SETUP_LOG_PREFIX}Ceremony {ceremony.title!r} (prefix {ceremony.prefix})"
        )
        self.paths.prepare()

        circuits = self.collect_circuits(pool)
        log_ceremony_summary(ceremony, circuits)

        if not self.confirm():
            bt.logging.info(f"{SETUP_LOG_PREFIX}Ceremony setup cancelled")
            return None

        stager = ArtifactStager(
            paths=self.paths,
            storage_paths=StoragePaths(ceremony.prefix),
            storage=self.storage,
            pot_cache=self.pot_cache,
            zkey_handler=self.zkey_handler,
        )
        staged = stager.stage_all(circuits)

        acknowledgement = self.assembler.register(ceremony, staged)
        bt.logging.success(
            f"{SETUP_LOG_PREFIX}You have successfully completed your {ceremony.title} ceremony setup!"
        )
        return acknowledgement


def _load_hotkey(config) -> Optional[bt.Keypair]:
    if config.no_wallet:
        return None
    wallet = bt.wallet(config=config)
    return wallet.hotkey


def main():
    cli_parser.init_config()
    config = cli_parser.config

    try:
        if not config.skip_preflight:
            run_preflight_checks(config.working_dir)

        interactive = InteractivePrompter()
        prompter = (
            TemplatePrompter.from_file(config.template)
            if config.template
            else interactive
        )

        paths = SetupPaths(
            working_dir=config.working_dir,
            output_dir=config.output_dir,
            pot_cache_dir=config.pot_cache_dir,
        )
        setup = CeremonySetup(
            paths=paths,
            prompter=prompter,
            storage=CeremonyStorage(cli_parser.storage_config(config)),
            pot_cache=PotCache(paths.pot_cache_dir, config.pot_download_url),
            zkey_handler=ZkeyHandler(),
            assembler=CeremonyAssembler(
                config.registration_url, hotkey=_load_hotkey(config)
            ),
            confirm=(lambda: True) if config.yes else interactive.confirm_ceremony,
        )
        setup.run()
    except CeremonySetupError as e:
        bt.logging.error(f"Something went wrong: {e}")
        bt.logging.debug(traceback.format_exc())
        sys.exit(1)
    except Exception as e:
        bt.logging.error(f"CRITICAL: Failed to set up the ceremony: {e}")
        bt.logging.debug(traceback.format_exc())
        sys.exit(1)


if __name__ == "__main__":
    main()
