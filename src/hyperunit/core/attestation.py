# src/hyperunit/core/attestation.py
from __future__ import annotations

from enum import Enum
from typing import Any, Dict, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator

from hyperunit.core.enums import Environment, KeyScheme, NodeFailure

# Assets whose coin type differs from the asset ticker. Every other asset
# uses its ticker as the coin type.
COIN_TYPES: Dict[str, str] = {
    "btc": "bitcoin",
    "eth": "ethereum",
    "sol": "solana",
}


def coin_type_for_asset(asset: str) -> str:
    """
    Normalize an asset ticker to the coin type guardians attest to
    ("btc" -> "bitcoin"). Unknown tickers map to themselves.
    """
    if isinstance(asset, Enum):
        asset = asset.value
    return COIN_TYPES.get(asset, asset)


# ======================================================================
# 1. GuardianNode — a known signer identity
# ======================================================================

class GuardianNode(BaseModel):
    """
    A guardian node participating in deposit address attestation.

    A node is identified by `node_id` within one network only: the same id
    (e.g. "field-node") carries a different key on testnet and mainnet, so
    a node is always looked up by (network, node_id).

    `scheme` is the tag used to pick a signature verifier; the key material
    in `public_key` is interpreted by that verifier and nowhere else.
    """

    model_config = ConfigDict(frozen=True)

    node_id: str = Field(..., description="Stable node identifier, e.g. 'field-node'.")
    public_key: str = Field(..., description="Hex-encoded public key material.")
    scheme: KeyScheme = Field(..., description="Signature scheme of this node.")
    network: Environment = Field(..., description="Network this key is valid on.")


# ======================================================================
# 2. AddressProposal — what the guardians were asked to attest
# ======================================================================

class AddressProposal(BaseModel):
    """
    The (source chain, destination chain, asset, destination address)
    request together with the address the bridge generated for it.

    Every field is bound into the canonical message. The proposal is
    always rebuilt from the caller's own request parameters; only
    `address` comes from the (untrusted) response, and it is exactly the
    value whose attestation is being checked.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    source_chain: str = Field(..., alias="sourceChain")
    destination_chain: str = Field(..., alias="destinationChain")
    asset: str
    destination_address: str = Field(..., alias="destinationAddress")
    address: str
    coin_type: str = Field(..., alias="coinType")

    @field_validator("*", mode="before")
    @classmethod
    def _enum_to_value(cls, v: Any) -> Any:
        # Chain / Asset enums are accepted, but the canonical message
        # carries their plain string value.
        if isinstance(v, Enum):
            return v.value
        return v

    @classmethod
    def from_request(
        cls,
        *,
        source_chain: str,
        destination_chain: str,
        asset: str,
        destination_address: str,
        address: str,
    ) -> "AddressProposal":
        """
        Build a proposal from request parameters, deriving `coin_type`
        from `asset`.
        """
        return cls(
            source_chain=source_chain,
            destination_chain=destination_chain,
            asset=asset,
            destination_address=destination_address,
            address=address,
            coin_type=coin_type_for_asset(asset),
        )

    def to_wire(self) -> Dict[str, str]:
        """
        Field values under the names the bridge uses when it signs.
        """
        return self.model_dump(mode="json", by_alias=True)


# ======================================================================
# 3. NodeCheck — outcome for a single guardian signature
# ======================================================================

class NodeCheck(BaseModel):
    """
    Result of checking one guardian's signature.

      * ok=True  → the signature verifies; `failure` and `reason` are None.
      * ok=False → `failure` says which kind of failure, `reason` carries
                   the human-readable explanation reported in the verdict.
    """

    model_config = ConfigDict(frozen=True)

    node_id: str
    ok: bool
    failure: Optional[NodeFailure] = None
    reason: Optional[str] = None

    @classmethod
    def passed(cls, node_id: str) -> "NodeCheck":
        return cls(node_id=node_id, ok=True)

    @classmethod
    def failed(cls, node_id: str, failure: NodeFailure, reason: str) -> "NodeCheck":
        return cls(node_id=node_id, ok=False, failure=failure, reason=reason)

    def error_message(self) -> Optional[str]:
        if self.ok:
            return None
        return f"{self.node_id}: {self.reason}"


# ======================================================================
# 4. VerificationVerdict — the engine's output
# ======================================================================

class VerificationVerdict(BaseModel):
    """
    Quorum verdict over a guardian signature set.

    Fields
    ------
    success : bool
        True iff the mandatory signer passed and the number of passing
        signatures reaches the network's minimum.

    verified_count : int
        Number of signatures that passed verification.

    errors : tuple of str
        One entry per failing or unresolvable node, prefixed by its node
        id, plus an entry when the mandatory signer is absent. Ordered by
        node id, so the verdict does not depend on input order.

    verification_details : dict
        node_id -> pass/fail for every node present in the input,
        including nodes that failed while the overall quorum succeeded.

    The verdict is a value: it is recomputed on every call and never
    mutated after construction.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    success: bool
    verified_count: int = Field(..., alias="verifiedCount", ge=0)
    errors: Tuple[str, ...] = ()
    verification_details: Dict[str, bool] = Field(
        default_factory=dict, alias="verificationDetails"
    )
