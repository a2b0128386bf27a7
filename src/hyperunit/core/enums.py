# src/hyperunit/core/enums.py
from __future__ import annotations

from enum import Enum


class Chain(str, Enum):
    """
    Chains the bridge can move assets between.
    """
    BITCOIN = "bitcoin"
    SOLANA = "solana"
    ETHEREUM = "ethereum"
    HYPERLIQUID = "hyperliquid"


class Asset(str, Enum):
    """
    Assets the bridge issues deposit addresses for.
    """
    BTC = "btc"
    ETH = "eth"
    SOL = "sol"
    FART = "fart"
    PUMP = "pump"
    BONK = "bonk"
    SPX = "spx"


class Environment(str, Enum):
    """
    Deployment the client talks to.

    The environment selects both the base URL of the API and the guardian
    registry signatures are checked against. The two are always threaded
    together: a mainnet response is never verified against testnet keys.
    """
    TESTNET = "testnet"
    MAINNET = "mainnet"


class KeyScheme(str, Enum):
    """
    Signature scheme a guardian node signs with.

    Declared per node in the guardian registry and used to dispatch to the
    matching signature verifier, instead of guessing from the shape of the
    key material.
    """
    ECDSA_SECP256K1 = "ecdsa_secp256k1"
    ECDSA_P256 = "ecdsa_p256"
    ED25519 = "ed25519"


class NodeFailure(str, Enum):
    """
    Why a single guardian signature did not count toward the quorum.

      * UNKNOWN_NODE:
          the node id is not in the registry of the active network.
      * MALFORMED_SIGNATURE:
          the signature string cannot be decoded into signature material
          for the node's scheme.
      * INVALID_SIGNATURE:
          the signature decodes, but does not verify against the canonical
          message under the node's public key.
      * UNSUPPORTED_SCHEME:
          no verifier is available for the scheme the node declares.
    """
    UNKNOWN_NODE = "unknown_node"
    MALFORMED_SIGNATURE = "malformed_signature"
    INVALID_SIGNATURE = "invalid_signature"
    UNSUPPORTED_SCHEME = "unsupported_scheme"


class OperationState(str, Enum):
    """
    Lifecycle state of a bridge operation, as reported by the API.

    Read-only: the client never computes or advances these states.
    """
    SRC_TX_DISCOVERED = "sourceTxDiscovered"
    WAIT_FOR_SRC_TX_FINALIZATION = "waitForSrcTxFinalization"
    BUILDING_DST_TX = "buildingDstTx"
    SIGN_TX = "signTx"
    BROADCAST_TX = "broadcastTx"
    WAIT_FOR_DST_TX_FINALIZATION = "waitForDstTxFinalization"
    READY_FOR_WITHDRAW_QUEUE = "readyForWithdrawQueue"
    QUEUED_FOR_WITHDRAW = "queuedForWithdraw"
    DONE = "done"
    FAILURE = "failure"
