import os

# trunk-ignore(bandit/B404)
import subprocess

import bittensor as bt

from coordinator.constants import LOCAL_SNARKJS_PATH
from coordinator.exceptions import ComputeError


class ZkeyHandler:
    """
    Computes the initial zkey of a circuit, before any contribution,
    by running `snarkjs zkey new`.
    """

    def __init__(self, snarkjs_path: str = LOCAL_SNARKJS_PATH):
        self.snarkjs_path = snarkjs_path

    def new_zkey(self, r1cs_path: str, pot_path: str, zkey_path: str) -> str:
        """
        Compute the initial zkey.

        Args:
            r1cs_path (str): Local path of the circuit file.
            pot_path (str): Local path of the Powers of Tau file.
            zkey_path (str): Where the zkey is written.

        Returns:
            str: The zkey path.

        Raises:
            ComputeError: If snarkjs fails or produces no output file.
        """
        bt.logging.debug(
            f"Computing zkey with paths: {r1cs_path}, {pot_path}, {zkey_path}"
        )
        os.makedirs(os.path.dirname(zkey_path) or ".", exist_ok=True)
        try:
            # trunk-ignore(bandit/B603)
            result = subprocess.run(
                [self.snarkjs_path, "zkey", "new", r1cs_path, pot_path, zkey_path],
                check=True,
                capture_output=True,
                text=True,
            )
        except subprocess.CalledProcessError as e:
            bt.logging.error(f"Error computing zkey: {e}")
            bt.logging.error(f"zkey computation stdout: {e.stdout}")
            bt.logging.error(f"zkey computation stderr: {e.stderr}")
            raise ComputeError(f"zkey computation failed for {r1cs_path}") from e
        except FileNotFoundError as e:
            raise ComputeError(f"snarkjs not found at {self.snarkjs_path}") from e

        bt.logging.trace(f"zkey computation stdout: {result.stdout}")
        bt.logging.trace(f"zkey computation stderr: {result.stderr}")

        if not os.path.isfile(zkey_path):
            raise ComputeError(f"zkey computation produced no file at {zkey_path}")
        return zkey_path
