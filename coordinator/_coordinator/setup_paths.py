from __future__ import annotations
import os
from dataclasses import dataclass, field
from typing import Optional

import bittensor as bt

from coordinator.constants import (
    METADATA_DIR_NAME,
    OUTPUT_DIR_NAME,
    POT_DIR_NAME,
    SETUP_DIR_NAME,
    ZKEYS_DIR_NAME,
)
from coordinator.utils.system import clean_dir, ensure_dir


@dataclass
class SetupPaths:
    """
    Local directories used by one setup run.

    working_dir holds the circuit files. The metadata and zkeys directories
    are cleared by `prepare`; the Powers of Tau cache survives across runs.
    """

    working_dir: str
    output_dir: Optional[str] = None
    pot_cache_dir: Optional[str] = None
    setup_dir: str = field(init=False)
    metadata_dir: str = field(init=False)
    zkeys_dir: str = field(init=False)

    def __post_init__(self):
        self.working_dir = os.path.abspath(self.working_dir)
        if self.output_dir is None:
            self.output_dir = os.path.join(self.working_dir, OUTPUT_DIR_NAME)
        self.setup_dir = os.path.join(self.output_dir, SETUP_DIR_NAME)
        self.metadata_dir = os.path.join(self.setup_dir, METADATA_DIR_NAME)
        self.zkeys_dir = os.path.join(self.setup_dir, ZKEYS_DIR_NAME)
        if self.pot_cache_dir is None:
            self.pot_cache_dir = os.path.join(self.setup_dir, POT_DIR_NAME)

    def prepare(self):
        """
        Clear the per-run directories and make sure the cache exists.
        """
        if not os.path.isdir(self.working_dir):
            raise NotADirectoryError(f"{self.working_dir} is not a directory")
        clean_dir(self.metadata_dir)
        clean_dir(self.zkeys_dir)
        ensure_dir(self.pot_cache_dir)
        bt.logging.debug(f"Metadata directory: {self.metadata_dir}")
        bt.logging.debug(f"zKeys directory: {self.zkeys_dir}")
        bt.logging.debug(f"Powers of Tau cache: {self.pot_cache_dir}")

    def r1cs_path(self, filename: str) -> str:
        return os.path.join(self.working_dir, filename)

    def zkey_path(self, filename: str) -> str:
        return os.path.join(self.zkeys_dir, filename)
