"""Shared pytest fixtures: throwaway guardian keys and a signer for them."""

import base64
from dataclasses import dataclass
from typing import Dict, Iterable

import pytest
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.hazmat.primitives.asymmetric.utils import decode_dss_signature

from hyperunit.core.attestation import AddressProposal, GuardianNode
from hyperunit.core.enums import Environment, KeyScheme
from hyperunit.core.guardians import GuardianRegistry
from hyperunit.helper.canonical import canonicalize

MAINNET_IDS = ("field-node", "hl-node", "unit-node")
TESTNET_IDS = ("field-node", "hl-node-testnet", "node-1")


def p256_public_hex(sk: ec.EllipticCurvePrivateKey) -> str:
    return sk.public_key().public_bytes(
        serialization.Encoding.X962,
        serialization.PublicFormat.UncompressedPoint,
    ).hex()


def sign_raw_b64(sk: ec.EllipticCurvePrivateKey, message: bytes) -> str:
    """Sign like the guardians do: ECDSA/SHA-256, raw r||s, base64."""
    r, s = decode_dss_signature(sk.sign(message, ec.ECDSA(hashes.SHA256())))
    size = (sk.curve.key_size + 7) // 8
    return base64.b64encode(r.to_bytes(size, "big") + s.to_bytes(size, "big")).decode()


@dataclass
class Guardians:
    """Private keys for a test registry, keyed by (network, node_id)."""

    keys: Dict[tuple, ec.EllipticCurvePrivateKey]
    registry: GuardianRegistry

    def sign(
        self,
        proposal: AddressProposal,
        network: Environment = Environment.MAINNET,
        node_ids: Iterable[str] = None,
    ) -> Dict[str, str]:
        message = canonicalize(proposal)
        if node_ids is None:
            node_ids = [nid for (net, nid) in self.keys if net == network]
        return {nid: sign_raw_b64(self.keys[(network, nid)], message) for nid in node_ids}


@pytest.fixture(scope="session")
def guardians() -> Guardians:
    keys = {}
    nodes = []
    for network, ids in ((Environment.MAINNET, MAINNET_IDS), (Environment.TESTNET, TESTNET_IDS)):
        for node_id in ids:
            sk = ec.generate_private_key(ec.SECP256R1())
            keys[(network, node_id)] = sk
            nodes.append(
                GuardianNode(
                    node_id=node_id,
                    public_key=p256_public_hex(sk),
                    scheme=KeyScheme.ECDSA_P256,
                    network=network,
                )
            )
    return Guardians(keys=keys, registry=GuardianRegistry(nodes))


@pytest.fixture
def btc_proposal() -> AddressProposal:
    return AddressProposal.from_request(
        source_chain="bitcoin",
        destination_chain="hyperliquid",
        asset="btc",
        destination_address="0xabc0000000000000000000000000000000000001",
        address="bc1qtestdepositaddress0000000000000000000",
    )
