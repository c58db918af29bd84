from __future__ import annotations
import time
from typing import Optional

import bittensor as bt
import requests

from coordinator.constants import REGISTRATION_TIMEOUT_SECONDS
from coordinator.exceptions import RegistrationError
from coordinator.models import CeremonyInputData, Circuit


def build_registration_payload(
    ceremony: CeremonyInputData, circuits: list[Circuit]
) -> dict:
    """
    Serialize the ceremony in the shape expected by the registration service.

    Raises:
        RegistrationError: If a circuit is not fully staged or the sequence
            positions are not exactly 1..k in order.
    """
    if not circuits:
        raise RegistrationError("A ceremony needs at least one circuit")

    positions = [circuit.sequence_position for circuit in circuits]
    if positions != list(range(1, len(circuits) + 1)):
        raise RegistrationError(f"Circuit sequence positions out of order: {positions}")

    not_staged = [circuit.name for circuit in circuits if not circuit.is_staged]
    if not_staged:
        raise RegistrationError(
            f"Circuits not staged to storage: {', '.join(not_staged)}"
        )

    return {
        "ceremonyInputData": ceremony.model_dump(mode="json", by_alias=True),
        "ceremonyPrefix": ceremony.prefix,
        "circuits": [
            circuit.model_dump(mode="json", by_alias=True) for circuit in circuits
        ],
    }


class CeremonyAssembler:
    """
    Registers a fully staged ceremony with the backend in a single request.
    """

    def __init__(self, url: str, hotkey: Optional[bt.Keypair] = None):
        if not url:
            raise ValueError("A registration URL is required.")
        self.url = url
        self.hotkey = hotkey

    def _headers(self) -> dict:
        headers = {"Content-Type": "application/json"}
        if self.hotkey is not None:
            timestamp = str(int(time.time()))
            signature = self.hotkey.sign(timestamp.encode("utf-8"))
            headers.update(
                {
                    "x-timestamp": timestamp,
                    "x-origin-ss58": self.hotkey.ss58_address,
                    "x-signature": signature.hex(),
                }
            )
        return headers

    def register(self, ceremony: CeremonyInputData, circuits: list[Circuit]) -> dict:
        """
        Submit the ceremony and wait for the acknowledgement.

        Returns:
            dict: The decoded acknowledgement, empty when the body is not JSON.

        Raises:
            RegistrationError: On transport failure or a non-success response.
        """
        payload = build_registration_payload(ceremony, circuits)
        bt.logging.info(f"Storing ceremony {ceremony.prefix} on {self.url}")
        try:
            response = requests.post(
                self.url,
                json=payload,
                headers=self._headers(),
                timeout=REGISTRATION_TIMEOUT_SECONDS,
            )
        except requests.RequestException as e:
            bt.logging.error(f"Error registering the ceremony: {e}")
            raise RegistrationError(f"Unable to reach {self.url}: {e}") from e

        if not response.ok:
            bt.logging.error(
                f"Ceremony registration rejected. Status code: {response.status_code}"
            )
            raise RegistrationError(
                f"Ceremony registration rejected ({response.status_code}): {response.text}"
            )

        try:
            acknowledgement = response.json()
        except ValueError:
            acknowledgement = {}
        bt.logging.debug(f"Registration response: {acknowledgement}")
        return acknowledgement
