import os
import re

# trunk-ignore(bandit/B404)
import subprocess

import bittensor as bt

from coordinator.constants import LOCAL_SNARKJS_PATH, METADATA_FILENAME_SUFFIX
from coordinator.exceptions import MetadataParseError
from coordinator.execution_layer.powers import estimate_pot
from coordinator.models import CircuitMetadata

# Report label for each metadata field, as printed by `snarkjs r1cs info`
REPORT_LABELS = {
    "curve": "Curve",
    "wires": "# of Wires",
    "constraints": "# of Constraints",
    "private_inputs": "# of Private Inputs",
    "public_outputs": "# of Public Inputs",
    "labels": "# of Labels",
    "outputs": "# of Outputs",
}


def _find_label_value(report: str, label: str) -> str:
    match = re.search(
        rf"(?:^|\s){re.escape(label)}: (.+?)[ \t]*\r?$", report, flags=re.MULTILINE
    )
    if match is None:
        raise MetadataParseError(f"Field '{label}' missing from circuit report")
    return match.group(1)


def parse_circuit_metadata(report: str) -> CircuitMetadata:
    """
    Parse the textual statistics report of a circuit.

    Args:
        report (str): Output of the R1CS info routine.

    Returns:
        CircuitMetadata: The extracted fields plus the required Powers of Tau exponent.

    Raises:
        MetadataParseError: If a label is absent or a count is not an integer.
    """
    values = {}
    for field_name, label in REPORT_LABELS.items():
        raw = _find_label_value(report, label)
        if field_name == "curve":
            values[field_name] = raw
            continue
        try:
            values[field_name] = int(raw)
        except ValueError as e:
            raise MetadataParseError(
                f"Field '{label}' is not an integer: {raw!r}"
            ) from e
        if values[field_name] < 0:
            raise MetadataParseError(f"Field '{label}' is negative: {raw!r}")

    values["pot"] = estimate_pot(values["constraints"])
    return CircuitMetadata(**values)


def metadata_report_path(metadata_dir: str, circuit_prefix: str) -> str:
    return os.path.join(metadata_dir, f"{circuit_prefix}{METADATA_FILENAME_SUFFIX}")


def run_r1cs_info(r1cs_path: str, snarkjs_path: str = LOCAL_SNARKJS_PATH) -> str:
    """
    Run `snarkjs r1cs info` and return its report once the process has exited.
    """
    try:
        # trunk-ignore(bandit/B603)
        result = subprocess.run(
            [snarkjs_path, "r1cs", "info", r1cs_path],
            check=True,
            capture_output=True,
            text=True,
        )
    except subprocess.CalledProcessError as e:
        bt.logging.error(f"R1CS info failed for {r1cs_path}: {e}")
        bt.logging.error(f"R1CS info stderr: {e.stderr}")
        raise MetadataParseError(f"Unable to read circuit report for {r1cs_path}") from e
    except FileNotFoundError as e:
        raise MetadataParseError(f"snarkjs not found at {snarkjs_path}") from e

    bt.logging.trace(f"R1CS info stdout: {result.stdout}")
    return result.stdout


def extract_circuit_metadata(
    r1cs_path: str,
    metadata_dir: str,
    circuit_prefix: str,
    snarkjs_path: str = LOCAL_SNARKJS_PATH,
) -> CircuitMetadata:
    """
    Produce the statistics report for a circuit, keep a copy of it in the
    metadata directory and parse it.
    """
    report = run_r1cs_info(r1cs_path, snarkjs_path)

    os.makedirs(metadata_dir, exist_ok=True)
    report_path = metadata_report_path(metadata_dir, circuit_prefix)
    with open(report_path, "w", encoding="utf-8") as f:
        f.write(report)
    bt.logging.debug(f"Circuit metadata stored at {report_path}")

    return parse_circuit_metadata(report)
