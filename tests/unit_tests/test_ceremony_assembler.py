from unittest import mock

import pytest
import requests
from bittensor import Keypair

from coordinator._coordinator import ceremony_assembler
from coordinator._coordinator.ceremony_assembler import (
    CeremonyAssembler,
    build_registration_payload,
)
from coordinator.deployment_layer.artifact_stager import blake2b_hex
from coordinator.exceptions import RegistrationError
from coordinator.models import Circuit, CircuitFiles, CircuitInputData, CircuitMetadata

URL = "https://backend.example/setupCeremony"


def staged_circuit(position, staged=True):
    name = f"c{position}"
    metadata = CircuitMetadata(
        curve="bn-128",
        wires=10,
        constraints=9,
        private_inputs=1,
        public_outputs=1,
        labels=12,
        outputs=1,
        pot=4,
    )
    circuit = Circuit.from_input(
        CircuitInputData(name=name, prefix=name, sequence_position=position), metadata
    )
    if not staged:
        return circuit
    r1cs = f"test-ceremony/circuits/{name}/{name}.r1cs"
    pot = "test-ceremony/pot/powersOfTau28_hez_final_04.ptau"
    zkey = f"test-ceremony/circuits/{name}/contributions/{name}_00000.zkey"
    return circuit.with_files(
        CircuitFiles(
            r1cs_filename=f"{name}.r1cs",
            pot_filename="powersOfTau28_hez_final_04.ptau",
            initial_zkey_filename=f"{name}_00000.zkey",
            r1cs_storage_path=r1cs,
            pot_storage_path=pot,
            initial_zkey_storage_path=zkey,
            r1cs_blake2b_hash=blake2b_hex(r1cs),
            pot_blake2b_hash=blake2b_hex(pot),
            initial_zkey_blake2b_hash=blake2b_hex(zkey),
        )
    )


def ok_response(body=None):
    response = mock.Mock(ok=True, status_code=200)
    response.json.return_value = body if body is not None else {"result": "ok"}
    return response


def test_payload_shape(ceremony):
    payload = build_registration_payload(ceremony, [staged_circuit(1), staged_circuit(2)])

    assert payload["ceremonyPrefix"] == "test-ceremony"
    assert payload["ceremonyInputData"]["title"] == "Test Ceremony"
    assert "startDate" in payload["ceremonyInputData"]
    assert [c["sequencePosition"] for c in payload["circuits"]] == [1, 2]
    assert payload["circuits"][0]["files"]["r1csStoragePath"] == (
        "test-ceremony/circuits/c1/c1.r1cs"
    )


def test_payload_file_keys(ceremony):
    payload = build_registration_payload(ceremony, [staged_circuit(1)])

    assert set(payload["circuits"][0]["files"]) == {
        "r1csFilename",
        "potFilename",
        "initialZkeyFilename",
        "r1csStoragePath",
        "potStoragePath",
        "initialZkeyStoragePath",
        "r1csBlake2bHash",
        "potBlake2bHash",
        "initialZkeyBlake2bHash",
    }
    assert set(payload["circuits"][0]["avgTimings"]) == {
        "avgContributionTime",
        "avgVerificationTime",
    }


def test_payload_refuses_unstaged_circuit(ceremony):
    with pytest.raises(RegistrationError, match="c2"):
        build_registration_payload(
            ceremony, [staged_circuit(1), staged_circuit(2, staged=False)]
        )


def test_payload_refuses_gaps(ceremony):
    with pytest.raises(RegistrationError):
        build_registration_payload(ceremony, [staged_circuit(1), staged_circuit(3)])


def test_payload_refuses_empty_ceremony(ceremony):
    with pytest.raises(RegistrationError):
        build_registration_payload(ceremony, [])


def test_requires_url():
    with pytest.raises(ValueError):
        CeremonyAssembler("")


def test_register_posts_once(ceremony):
    with mock.patch.object(
        ceremony_assembler.requests, "post", return_value=ok_response()
    ) as post:
        acknowledgement = CeremonyAssembler(URL).register(ceremony, [staged_circuit(1)])

    assert acknowledgement == {"result": "ok"}
    post.assert_called_once()
    assert post.call_args.args[0] == URL
    assert post.call_args.kwargs["json"]["ceremonyPrefix"] == "test-ceremony"
    assert "x-signature" not in post.call_args.kwargs["headers"]


def test_register_signs_with_hotkey(ceremony):
    hotkey = Keypair.create_from_uri("//Alice")
    with mock.patch.object(
        ceremony_assembler.requests, "post", return_value=ok_response()
    ) as post:
        CeremonyAssembler(URL, hotkey=hotkey).register(ceremony, [staged_circuit(1)])

    headers = post.call_args.kwargs["headers"]
    assert headers["x-origin-ss58"] == hotkey.ss58_address
    assert hotkey.verify(
        headers["x-timestamp"].encode("utf-8"), bytes.fromhex(headers["x-signature"])
    )


def test_register_rejected(ceremony):
    response = mock.Mock(ok=False, status_code=403, text="not a coordinator")
    with mock.patch.object(ceremony_assembler.requests, "post", return_value=response):
        with pytest.raises(RegistrationError, match="403"):
            CeremonyAssembler(URL).register(ceremony, [staged_circuit(1)])


def test_register_transport_failure(ceremony):
    with mock.patch.object(
        ceremony_assembler.requests,
        "post",
        side_effect=requests.ConnectionError("unreachable"),
    ):
        with pytest.raises(RegistrationError):
            CeremonyAssembler(URL).register(ceremony, [staged_circuit(1)])


def test_unstaged_circuit_never_reaches_the_network(ceremony):
    with mock.patch.object(ceremony_assembler.requests, "post") as post:
        with pytest.raises(RegistrationError):
            CeremonyAssembler(URL).register(ceremony, [staged_circuit(1, staged=False)])
    post.assert_not_called()
