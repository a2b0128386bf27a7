import asyncio
import base64
import itertools

import pytest
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric.ed25519 import Ed25519PrivateKey

from hyperunit.core.attestation import AddressProposal, GuardianNode, VerificationVerdict
from hyperunit.core.enums import Environment, KeyScheme, NodeFailure
from hyperunit.core.guardians import GuardianRegistry
from hyperunit.engine.verifier import GuardianVerifier, verify_deposit_address_signatures
from hyperunit.helper.canonical import canonicalize
from hyperunit.helper.crypto import Ed25519Verifier, SignatureVerifierRegistry


def flip_byte(signature: str, index: int = 5) -> str:
    raw = bytearray(base64.b64decode(signature))
    raw[index] ^= 0x01
    return base64.b64encode(bytes(raw)).decode()


@pytest.fixture
def verifier(guardians):
    return GuardianVerifier(guardians.registry)


def test_bitcoin_scenario_three_valid_mainnet_signatures(verifier, guardians, btc_proposal):
    signatures = guardians.sign(btc_proposal)

    verdict = verifier.verify(signatures, btc_proposal, Environment.MAINNET)

    assert verdict == VerificationVerdict(
        success=True,
        verified_count=3,
        errors=(),
        verification_details={"field-node": True, "hl-node": True, "unit-node": True},
    )
    assert verdict.model_dump(by_alias=True) == {
        "success": True,
        "verifiedCount": 3,
        "errors": (),
        "verificationDetails": {"field-node": True, "hl-node": True, "unit-node": True},
    }


def test_testnet_guardians_verify_on_testnet(verifier, guardians, btc_proposal):
    signatures = guardians.sign(btc_proposal, Environment.TESTNET)
    verdict = verifier.verify(signatures, btc_proposal, Environment.TESTNET)
    assert verdict.success
    assert verdict.verified_count == len(signatures)


def test_missing_field_node_fails_regardless_of_others(verifier, guardians, btc_proposal):
    signatures = guardians.sign(btc_proposal, node_ids=["hl-node", "unit-node"])

    verdict = verifier.verify(signatures, btc_proposal)

    assert verdict.success is False
    assert verdict.verified_count == 2
    assert verdict.verification_details == {"hl-node": True, "unit-node": True}
    assert any("field-node" in e and "missing" in e for e in verdict.errors)


def test_failed_field_node_fails_quorum(verifier, guardians, btc_proposal):
    signatures = guardians.sign(btc_proposal)
    signatures["field-node"] = flip_byte(signatures["field-node"])

    verdict = verifier.verify(signatures, btc_proposal)

    assert verdict.success is False
    assert verdict.verified_count == 2
    assert verdict.verification_details["field-node"] is False


def test_field_node_alone_is_below_threshold(verifier, guardians, btc_proposal):
    signatures = guardians.sign(btc_proposal, node_ids=["field-node"])
    verdict = verifier.verify(signatures, btc_proposal)
    assert verdict.success is False
    assert verdict.verified_count == 1
    assert verdict.errors == ()


def test_absent_optional_node_is_not_a_failure(verifier, guardians, btc_proposal):
    signatures = guardians.sign(btc_proposal, node_ids=["field-node", "hl-node"])
    verdict = verifier.verify(signatures, btc_proposal)
    assert verdict.success is True
    assert verdict.errors == ()
    assert "unit-node" not in verdict.verification_details


def test_one_unknown_node_is_reported_and_isolated(verifier, guardians, btc_proposal):
    signatures = guardians.sign(btc_proposal)
    signatures["rogue-node"] = signatures["hl-node"]

    verdict = verifier.verify(signatures, btc_proposal)

    assert verdict.verification_details["rogue-node"] is False
    assert verdict.errors == ("rogue-node: unknown guardian node on mainnet",)
    assert verdict.success is True
    assert verdict.verified_count == 3
    assert all(verdict.verification_details[n] for n in ("field-node", "hl-node", "unit-node"))


def test_malformed_signature_is_distinguished(verifier, guardians, btc_proposal):
    signatures = guardians.sign(btc_proposal)
    signatures["unit-node"] = "%%%not-a-signature%%%"

    check = verifier.verify_one(
        "unit-node", signatures["unit-node"], canonicalize(btc_proposal), Environment.MAINNET
    )
    assert check.failure is NodeFailure.MALFORMED_SIGNATURE

    verdict = verifier.verify(signatures, btc_proposal)
    assert verdict.success is True
    assert verdict.verification_details["unit-node"] is False
    assert verdict.errors[0].startswith("unit-node: malformed signature")


def test_non_string_signature_does_not_raise(verifier, guardians, btc_proposal):
    signatures = guardians.sign(btc_proposal)
    signatures["hl-node"] = None
    verdict = verifier.verify(signatures, btc_proposal)
    assert verdict.verification_details["hl-node"] is False


@pytest.mark.parametrize("node_id", ["field-node", "hl-node", "unit-node"])
def test_flipping_a_signature_byte_flips_that_node(verifier, guardians, btc_proposal, node_id):
    message = canonicalize(btc_proposal)
    signature = guardians.sign(btc_proposal, node_ids=[node_id])[node_id]

    assert verifier.verify_one(node_id, signature, message, Environment.MAINNET).ok
    check = verifier.verify_one(node_id, flip_byte(signature), message, Environment.MAINNET)
    assert not check.ok
    assert check.failure is NodeFailure.INVALID_SIGNATURE


def test_altered_base64_padding_bits_are_rejected(verifier, guardians, btc_proposal):
    message = canonicalize(btc_proposal)
    signature = guardians.sign(btc_proposal, node_ids=["hl-node"])["hl-node"]
    alphabet = "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789+/"
    altered = signature[:-3] + alphabet[alphabet.index(signature[-3]) ^ 1] + "=="

    check = verifier.verify_one("hl-node", altered, message, Environment.MAINNET)
    assert not check.ok
    assert check.failure is NodeFailure.MALFORMED_SIGNATURE


@pytest.mark.parametrize(
    "field, value",
    [
        ("source_chain", "ethereum"),
        ("destination_chain", "solana"),
        ("asset", "eth"),
        ("destination_address", "0xdef0000000000000000000000000000000000002"),
        ("address", "bc1qattackercontrolledaddress000000000000"),
        ("coin_type", "ethereum"),
    ],
)
def test_changing_any_proposal_field_fails_every_node(verifier, guardians, btc_proposal, field, value):
    signatures = guardians.sign(btc_proposal)
    tampered = btc_proposal.model_copy(update={field: value})

    verdict = verifier.verify(signatures, tampered)

    assert verdict.success is False
    assert verdict.verified_count == 0
    assert set(verdict.verification_details.values()) == {False}
    assert all("signature verification failed" in e for e in verdict.errors)


def test_verdict_is_independent_of_input_order(verifier, guardians, btc_proposal):
    signatures = guardians.sign(btc_proposal)
    signatures["rogue-node"] = signatures["unit-node"]
    signatures["unit-node"] = flip_byte(signatures["unit-node"])
    items = list(signatures.items())

    verdicts = [
        verifier.verify(dict(perm), btc_proposal) for perm in itertools.permutations(items)
    ]

    first = verdicts[0]
    for verdict in verdicts[1:]:
        assert verdict == first
        assert verdict.errors == first.errors
        assert list(verdict.verification_details) == list(first.verification_details)


def test_mainnet_response_against_testnet_registry_fails_loudly(verifier, guardians, btc_proposal):
    signatures = guardians.sign(btc_proposal, Environment.MAINNET)

    verdict = verifier.verify(signatures, btc_proposal, Environment.TESTNET)

    assert verdict.success is False
    assert verdict.verified_count == 0
    assert "hl-node: unknown guardian node on testnet" in verdict.errors
    assert "unit-node: unknown guardian node on testnet" in verdict.errors
    assert "field-node: signature verification failed" in verdict.errors


def test_empty_signature_set(verifier, btc_proposal):
    verdict = verifier.verify({}, btc_proposal)
    assert verdict.success is False
    assert verdict.verified_count == 0
    assert verdict.verification_details == {}
    assert verdict.errors == ("field-node: required guardian signature missing",)


def test_unsupported_scheme_is_reported(guardians, btc_proposal):
    verifier = GuardianVerifier(
        guardians.registry, SignatureVerifierRegistry([Ed25519Verifier()])
    )
    signatures = guardians.sign(btc_proposal)

    verdict = verifier.verify(signatures, btc_proposal)

    assert verdict.success is False
    assert all("unsupported signature scheme ecdsa_p256" in e for e in verdict.errors)


def test_mixed_schemes_in_one_registry(guardians, btc_proposal):
    ed_sk = Ed25519PrivateKey.generate()
    ed_node = GuardianNode(
        node_id="sol-node",
        public_key=ed_sk.public_key()
        .public_bytes(serialization.Encoding.Raw, serialization.PublicFormat.Raw)
        .hex(),
        scheme=KeyScheme.ED25519,
        network=Environment.MAINNET,
    )
    field = guardians.registry.resolve(Environment.MAINNET, "field-node")
    registry = GuardianRegistry([field, ed_node])
    verifier = GuardianVerifier(registry)

    signatures = guardians.sign(btc_proposal, node_ids=["field-node"])
    signatures["sol-node"] = base64.b64encode(ed_sk.sign(canonicalize(btc_proposal))).decode()

    verdict = verifier.verify(signatures, btc_proposal)
    assert verdict.success is True
    assert verdict.verification_details == {"field-node": True, "sol-node": True}


def test_min_signatures_is_configurable(guardians, btc_proposal):
    signatures = guardians.sign(btc_proposal, node_ids=["field-node", "hl-node"])

    strict = GuardianVerifier(guardians.registry, min_signatures=3)
    lenient = GuardianVerifier(guardians.registry, min_signatures={Environment.MAINNET: 1})

    assert strict.verify(signatures, btc_proposal).success is False
    assert lenient.verify(signatures, btc_proposal).success is True
    assert lenient.min_signatures[Environment.TESTNET] == 2


def test_min_signatures_must_be_positive(guardians):
    with pytest.raises(ValueError):
        GuardianVerifier(guardians.registry, min_signatures=0)


def test_module_level_entry_point(guardians, btc_proposal):
    signatures = guardians.sign(btc_proposal)
    verdict = verify_deposit_address_signatures(
        signatures, btc_proposal, Environment.MAINNET, registry=guardians.registry
    )
    assert verdict.success and verdict.verified_count == 3


def test_default_registry_rejects_foreign_keys(guardians, btc_proposal):
    signatures = guardians.sign(btc_proposal)
    verdict = verify_deposit_address_signatures(signatures, btc_proposal)
    assert verdict.success is False
    assert verdict.verified_count == 0


@pytest.mark.asyncio
async def test_async_verifier_matches_sync(verifier, guardians, btc_proposal):
    signatures = guardians.sign(btc_proposal)
    signatures["unit-node"] = flip_byte(signatures["unit-node"])
    signatures["rogue-node"] = "AAAA"

    expected = verifier.verify(signatures, btc_proposal)
    actual = await verifier.verify_async(signatures, btc_proposal)

    assert actual == expected


def test_verify_does_not_mutate_input(verifier, guardians, btc_proposal):
    signatures = guardians.sign(btc_proposal)
    snapshot = dict(signatures)
    verifier.verify(signatures, btc_proposal)
    assert signatures == snapshot
