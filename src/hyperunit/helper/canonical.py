# src/hyperunit/helper/canonical.py
from __future__ import annotations

import json
from typing import Any

from hyperunit.core.attestation import AddressProposal


def canonical_json(obj: Any) -> str:
    """
    Serialize an object (including pydantic models) into canonical JSON:
    sorted keys, no whitespace, non-ASCII characters kept as-is.

    Key order therefore never depends on how the object was constructed.
    """
    data = obj
    if hasattr(obj, "model_dump"):
        data = obj.model_dump(mode="json", by_alias=True)
    return json.dumps(data, sort_keys=True, separators=(",", ":"), ensure_ascii=False)


def canonicalize(proposal: AddressProposal) -> bytes:
    """
    Produce the exact bytes a guardian signs for `proposal`.

    The message is the UTF-8 canonical JSON of the six proposal fields
    under their wire names:

        {"address":...,"asset":...,"coinType":...,
         "destinationAddress":...,"destinationChain":...,"sourceChain":...}

    `coinType` is always present. Values are taken verbatim, with no case
    folding or trimming: "BTC" and "btc" are different messages.

    No hashing happens here. The same bytes are handed to every verifier,
    and each scheme applies its own digest.
    """
    return canonical_json(proposal.to_wire()).encode("utf-8")
