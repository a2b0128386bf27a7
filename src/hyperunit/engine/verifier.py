# src/hyperunit/engine/verifier.py
from __future__ import annotations

import asyncio
import logging
from typing import Dict, Iterable, List, Mapping, Optional, Union

from hyperunit.core.attestation import AddressProposal, NodeCheck, VerificationVerdict
from hyperunit.core.enums import Environment, NodeFailure
from hyperunit.core.guardians import DEFAULT_GUARDIAN_REGISTRY, REQUIRED_SIGNER, GuardianRegistry
from hyperunit.helper.canonical import canonicalize
from hyperunit.helper.crypto import (
    MalformedKey,
    MalformedSignature,
    SignatureVerifierRegistry,
    default_signature_verifiers,
)

logger = logging.getLogger(__name__)

# Minimum number of passing signatures, the required signer included.
DEFAULT_MIN_SIGNATURES: Mapping[Environment, int] = {
    Environment.TESTNET: 2,
    Environment.MAINNET: 2,
}


class GuardianVerifier:
    """
    Checks a guardian signature set against an address proposal.

    -------------------------------------------------------------------------
    1. What is checked
    -------------------------------------------------------------------------

    The bridge answers an address request with the generated address and a
    mapping node_id -> signature. Neither is trusted. The verifier:

      (1) rebuilds the canonical message from the caller's own request
          parameters plus the returned address (helper.canonical);
      (2) resolves every node id in the signature set against the guardian
          registry of the active network, selected once per call;
      (3) verifies each signature with the verifier registered for the
          node's declared key scheme;
      (4) aggregates the per-node outcomes into a VerificationVerdict.

    -------------------------------------------------------------------------
    2. Quorum rule
    -------------------------------------------------------------------------

        success  :=  Pass(field-node)  ∧  |{n : Pass(n)}| >= min_signatures

    Nodes absent from the signature set are "not provided": they are not
    failures and are not listed in verification_details. The one exception
    is the required signer, whose absence is reported as an explicit error.

    -------------------------------------------------------------------------
    3. Error handling
    -------------------------------------------------------------------------

    Unknown node, malformed signature, cryptographic mismatch and
    unsupported scheme are per-node outcomes: each becomes one entry in
    `errors` and a False in `verification_details`, and processing of the
    other nodes continues. A failed quorum is a normal verdict with
    success=False. None of these raise.
    """

    def __init__(
        self,
        registry: Optional[GuardianRegistry] = None,
        verifiers: Optional[SignatureVerifierRegistry] = None,
        *,
        min_signatures: Union[int, Mapping[Environment, int], None] = None,
        required_signer: str = REQUIRED_SIGNER,
    ) -> None:
        self.registry = registry or DEFAULT_GUARDIAN_REGISTRY
        self.verifiers = verifiers or default_signature_verifiers()
        self.required_signer = required_signer

        if min_signatures is None:
            thresholds = dict(DEFAULT_MIN_SIGNATURES)
        elif isinstance(min_signatures, int):
            thresholds = {env: min_signatures for env in Environment}
        else:
            thresholds = {**DEFAULT_MIN_SIGNATURES, **{Environment(k): v for k, v in min_signatures.items()}}
        for env, value in thresholds.items():
            if value < 1:
                raise ValueError(f"min_signatures for {env.value} must be >= 1, got {value}")
        self.min_signatures: Dict[Environment, int] = thresholds

    # ------------------------------------------------------------------
    # Per-node verification
    # ------------------------------------------------------------------

    def verify_one(
        self,
        node_id: str,
        signature: Optional[str],
        message: bytes,
        network: Environment,
    ) -> NodeCheck:
        """
        Verify a single guardian signature over `message`.

        Always returns a NodeCheck; a bad signature never aborts the
        verification of the remaining nodes.
        """
        network = Environment(network)
        node = self.registry.resolve(network, node_id)
        if node is None:
            return NodeCheck.failed(
                node_id,
                NodeFailure.UNKNOWN_NODE,
                f"unknown guardian node on {network.value}",
            )

        verifier = self.verifiers.get(node.scheme)
        if verifier is None:
            return NodeCheck.failed(
                node_id,
                NodeFailure.UNSUPPORTED_SCHEME,
                f"unsupported signature scheme {node.scheme.value}",
            )

        try:
            ok = verifier.verify(node.public_key, signature, message)
        except MalformedSignature as exc:
            return NodeCheck.failed(
                node_id, NodeFailure.MALFORMED_SIGNATURE, f"malformed signature: {exc}"
            )
        except MalformedKey as exc:
            logger.error("guardian key for %s on %s cannot be loaded: %s", node_id, network.value, exc)
            return NodeCheck.failed(
                node_id,
                NodeFailure.INVALID_SIGNATURE,
                f"guardian public key cannot be loaded: {exc}",
            )

        if not ok:
            return NodeCheck.failed(
                node_id, NodeFailure.INVALID_SIGNATURE, "signature verification failed"
            )
        return NodeCheck.passed(node_id)

    # ------------------------------------------------------------------
    # Aggregation
    # ------------------------------------------------------------------

    def aggregate(self, checks: Iterable[NodeCheck], network: Environment) -> VerificationVerdict:
        """
        Combine per-node outcomes into a verdict.

        Outcomes are ordered by node id before anything is derived from
        them, so the verdict is the same for every input order.
        """
        network = Environment(network)
        ordered: List[NodeCheck] = sorted(checks, key=lambda c: c.node_id)

        details = {c.node_id: c.ok for c in ordered}
        errors = [c.error_message() for c in ordered if not c.ok]
        verified_count = sum(1 for c in ordered if c.ok)

        required_ok = details.get(self.required_signer, False)
        if self.required_signer not in details:
            errors.append(f"{self.required_signer}: required guardian signature missing")

        threshold = self.min_signatures[network]
        success = required_ok and verified_count >= threshold

        if not success:
            logger.warning(
                "guardian quorum not reached on %s: %d/%d valid, %s %s",
                network.value,
                verified_count,
                threshold,
                self.required_signer,
                "passed" if required_ok else "did not pass",
            )

        return VerificationVerdict(
            success=success,
            verified_count=verified_count,
            errors=tuple(errors),
            verification_details=details,
        )

    # ------------------------------------------------------------------
    # Entry points
    # ------------------------------------------------------------------

    def verify(
        self,
        signatures: Mapping[str, Optional[str]],
        proposal: AddressProposal,
        environment: Environment = Environment.MAINNET,
    ) -> VerificationVerdict:
        """
        Verify a signature set for `proposal` on `environment` and return
        the quorum verdict.
        """
        network = Environment(environment)
        message = canonicalize(proposal)

        checks = []
        for node_id, signature in (signatures or {}).items():
            check = self.verify_one(node_id, signature, message, network)
            logger.debug("guardian %s: %s", node_id, "ok" if check.ok else check.reason)
            checks.append(check)

        return self.aggregate(checks, network)

    async def verify_async(
        self,
        signatures: Mapping[str, Optional[str]],
        proposal: AddressProposal,
        environment: Environment = Environment.MAINNET,
    ) -> VerificationVerdict:
        """
        Same verdict as `verify`, with each node checked in a worker thread.
        """
        network = Environment(environment)
        message = canonicalize(proposal)

        checks = await asyncio.gather(
            *(
                asyncio.to_thread(self.verify_one, node_id, signature, message, network)
                for node_id, signature in (signatures or {}).items()
            )
        )
        return self.aggregate(checks, network)


def verify_deposit_address_signatures(
    signatures: Mapping[str, Optional[str]],
    proposal: AddressProposal,
    environment: Environment = Environment.MAINNET,
    *,
    registry: Optional[GuardianRegistry] = None,
    min_signatures: Union[int, Mapping[Environment, int], None] = None,
) -> VerificationVerdict:
    """
    Verify the guardian signatures of a generated deposit address.

    `proposal` must be built from the parameters the caller sent, not from
    anything echoed back by the API, apart from the generated address.
    """
    verifier = GuardianVerifier(registry, min_signatures=min_signatures)
    return verifier.verify(signatures, proposal, environment)
