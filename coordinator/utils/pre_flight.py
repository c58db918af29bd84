import os

# trunk-ignore(bandit/B404)
import subprocess
import traceback
from collections import OrderedDict
from functools import partial
from typing import Optional

# trunk-ignore(pylint/E0611)
import bittensor as bt

from coordinator.constants import (
    LOCAL_SNARKJS_INSTALL_DIR,
    LOCAL_SNARKJS_PATH,
    MIN_NODEJS_MAJOR_VERSION,
    SNARKJS_VERSION,
)

NODE_LOG_PREFIX = "  NODE  | "


def run_preflight_checks(working_dir: Optional[str] = None):
    """
    This function executes a series of checks to ensure the environment is properly
    set up for a ceremony setup.
    Checks:
    - The working directory is readable
    - Node.js >= 20 is installed
    - SnarkJS is installed

    Raises:
        Exception: If any of the pre-flight checks fail.
    """

    preflight_checks = OrderedDict(
        {
            "Checking working directory": (
                partial(ensure_working_dir_readable, working_dir)
                if working_dir
                else None
            ),
            "Ensuring Node.js version": ensure_nodejs_version,
            "Checking SnarkJS installation": ensure_snarkjs_installed,
        }
    )

    bt.logging.info(" PreFlight | Running pre-flight checks")

    for check_name, check_function in preflight_checks.items():
        if check_function is None:
            bt.logging.info(f" PreFlight | Skipping {check_name} check")
            continue
        bt.logging.info(f" PreFlight | {check_name}")
        try:
            check_function()
            bt.logging.success(f" PreFlight | {check_name} completed successfully")
        except Exception as e:
            bt.logging.error(f"Failed {check_name.lower()}: {e}")
            bt.logging.debug(f" PreFlight | {check_name} error details: {str(e)}")
            bt.logging.trace(traceback.format_exc())
            raise e

    bt.logging.info(" PreFlight | Pre-flight checks completed.")


def ensure_working_dir_readable(working_dir: str):
    if not os.path.isdir(working_dir):
        raise RuntimeError(f"Working directory {working_dir} does not exist.")
    if not os.access(working_dir, os.R_OK):
        raise RuntimeError(f"Cannot read {working_dir}. Please check permissions.")


def ensure_snarkjs_installed():
    """
    Ensure snarkjs is installed and available for use in a local .snarkjs directory.
    """

    try:
        # trunk-ignore(bandit/B603)
        subprocess.run(
            [LOCAL_SNARKJS_PATH, "r1cs", "info", "--help"],
            check=True,
            capture_output=True,
            text=True,
        )
        bt.logging.info(
            "snarkjs is already installed and available in the local directory."
        )
    except (subprocess.CalledProcessError, FileNotFoundError):
        bt.logging.warning(
            "snarkjs not found in local directory. Attempting to install..."
        )
        try:
            os.makedirs(LOCAL_SNARKJS_INSTALL_DIR, exist_ok=True)

            # trunk-ignore(bandit/B603)
            # trunk-ignore(bandit/B607)
            subprocess.run(
                [
                    "npm",
                    "install",
                    "--prefix",
                    LOCAL_SNARKJS_INSTALL_DIR,
                    f"snarkjs@{SNARKJS_VERSION}",
                ],
                check=True,
            )
            bt.logging.info(
                "snarkjs has been successfully installed in the local directory."
            )
        except (subprocess.CalledProcessError, FileNotFoundError) as e:
            bt.logging.error(f"Failed to install snarkjs: {e}")
            raise RuntimeError(
                "snarkjs installation failed. Please install it manually."
            ) from e


def parse_node_major_version(node_version: str) -> int:
    return int(node_version.strip().lstrip("v").split(".")[0])


def ensure_nodejs_version():
    """
    Ensure that Node.js version 20 or newer is installed.
    """
    try:
        node_version = subprocess.check_output(["node", "--version"]).decode().strip()
        npm_version = subprocess.check_output(["npm", "--version"]).decode().strip()
    except (subprocess.CalledProcessError, FileNotFoundError) as e:
        bt.logging.error(f"{NODE_LOG_PREFIX}Node.js is not installed.")
        raise RuntimeError(
            f"Node.js >= {MIN_NODEJS_MAJOR_VERSION} is required but not installed. "
            "Please install it manually and restart the process."
        ) from e

    if parse_node_major_version(node_version) < MIN_NODEJS_MAJOR_VERSION:
        bt.logging.error(
            f"{NODE_LOG_PREFIX}Node.js {node_version} is not the correct version."
        )
        raise RuntimeError(
            f"Node.js >= {MIN_NODEJS_MAJOR_VERSION} is required, found {node_version}."
        )

    bt.logging.info(
        NODE_LOG_PREFIX
        + f"Node.js version {node_version} and npm version {npm_version} are installed."
    )
