# src/hyperunit/core/guardians.py
from __future__ import annotations

import logging
from types import MappingProxyType
from typing import Dict, Iterable, Mapping, Optional

from hyperunit.core.attestation import GuardianNode
from hyperunit.core.enums import Environment, KeyScheme

logger = logging.getLogger(__name__)

# The signer whose attestation is mandatory on every network.
REQUIRED_SIGNER = "field-node"


class GuardianRegistry:
    """
    Read-only lookup of guardian identities, keyed by network then node id.

    Testnet and mainnet are disjoint tables: a node id only resolves
    against the table of the network it was declared for. There is no
    mutation API. Rotating a key means shipping a new node list, and a
    caller that needs a different key set builds its own registry:

        registry = GuardianRegistry([GuardianNode(...), ...])
        node = registry.resolve(Environment.MAINNET, "field-node")
    """

    def __init__(self, nodes: Iterable[GuardianNode]) -> None:
        tables: Dict[Environment, Dict[str, GuardianNode]] = {env: {} for env in Environment}
        for node in nodes:
            table = tables[node.network]
            if node.node_id in table:
                raise ValueError(
                    f"Duplicate guardian node {node.node_id!r} on {node.network.value}."
                )
            table[node.node_id] = node
        self._tables: Mapping[Environment, Mapping[str, GuardianNode]] = MappingProxyType(
            {env: MappingProxyType(table) for env, table in tables.items()}
        )

    def table(self, network: Environment) -> Mapping[str, GuardianNode]:
        """Return the read-only node table of one network."""
        return self._tables[Environment(network)]

    def resolve(self, network: Environment, node_id: str) -> Optional[GuardianNode]:
        """
        Look up `node_id` on `network`.

        Returns None for an id this registry does not know. That is not an
        error here; the verifier turns it into an "unknown guardian node"
        failure for that node.
        """
        node = self.table(network).get(node_id)
        if node is None:
            logger.debug("guardian %r not found on %s", node_id, Environment(network).value)
        return node


# ======================================================================
# Compiled-in guardian sets
#
# Keys are uncompressed SEC1 P-256 points. Guardians sign with ECDSA
# P-256 / SHA-256 and return base64 raw r||s signatures.
# ======================================================================

_MAINNET_NODES = (
    GuardianNode(
        node_id="unit-node",
        public_key=(
            "04dc6f89f921dc816aa69b687be1fcc3cc1d48912629abc2c9964e807422e104"
            "7e0435cb5ba0fa53cb9a57a9c610b4e872a0a2caedda78c4f85ebafcca93524061"
        ),
        scheme=KeyScheme.ECDSA_P256,
        network=Environment.MAINNET,
    ),
    GuardianNode(
        node_id="hl-node",
        public_key=(
            "048633ea6ab7e40cdacf37d1340057e84bb9810de0687af78d031e9b07b65ad4"
            "ab379180ab55075f5c2ebb96dab30d2c2fab49d5635845327b6a3c27d20ba4755b"
        ),
        scheme=KeyScheme.ECDSA_P256,
        network=Environment.MAINNET,
    ),
    GuardianNode(
        node_id="field-node",
        public_key=(
            "04ae2ab20787f816ea5d13f36c4c4f7e196e29e867086f3ce818abb73077a237"
            "f841b33ada5be71b83f4af29f333dedc5411ca4016bd52ab657db2896ef374ce99"
        ),
        scheme=KeyScheme.ECDSA_P256,
        network=Environment.MAINNET,
    ),
)

# Testnet "node-1" has no published key; its signatures report as unknown.
_TESTNET_NODES = (
    GuardianNode(
        node_id="field-node",
        public_key=(
            "04bab844e8620c4a1ec304df6284cd6fdffcde79b3330a7bffb1e4cecfee72d0"
            "2a7c1f3a4415b253dc8d6ca2146db170e1617605cc8a4160f539890b8a24712152"
        ),
        scheme=KeyScheme.ECDSA_P256,
        network=Environment.TESTNET,
    ),
    GuardianNode(
        node_id="hl-node-testnet",
        public_key=(
            "04502d20a0d8d8aaea9395eb46d50ad2d8278c1b3a3bcdc200d531253612be23"
            "f5f2e9709bf3a3a50d1447281fa81aca0bf2ac2a6a3cb8a12978381d73c24bb2d9"
        ),
        scheme=KeyScheme.ECDSA_P256,
        network=Environment.TESTNET,
    ),
)

DEFAULT_GUARDIAN_REGISTRY = GuardianRegistry(_MAINNET_NODES + _TESTNET_NODES)

MAINNET_GUARDIAN_NODES: Mapping[str, GuardianNode] = DEFAULT_GUARDIAN_REGISTRY.table(
    Environment.MAINNET
)
TESTNET_GUARDIAN_NODES: Mapping[str, GuardianNode] = DEFAULT_GUARDIAN_REGISTRY.table(
    Environment.TESTNET
)
