# src/hyperunit/__init__.py
"""HyperUnit bridge client with guardian signature verification."""

from hyperunit.client.http import HyperUnitClient
from hyperunit.client.sdk import HyperUnitSDK, create_sdk
from hyperunit.config import HyperUnitConfig, Settings
from hyperunit.core.attestation import (
    AddressProposal,
    GuardianNode,
    NodeCheck,
    VerificationVerdict,
    coin_type_for_asset,
)
from hyperunit.core.enums import Asset, Chain, Environment, KeyScheme, NodeFailure, OperationState
from hyperunit.core.guardians import (
    DEFAULT_GUARDIAN_REGISTRY,
    MAINNET_GUARDIAN_NODES,
    REQUIRED_SIGNER,
    TESTNET_GUARDIAN_NODES,
    GuardianRegistry,
)
from hyperunit.core.models import (
    Address,
    ApiResponse,
    BitcoinFeeEstimate,
    EstimateFeesResponse,
    EthereumFeeEstimate,
    GenerateAddressParams,
    GenerateAddressResponse,
    GetOperationsResponse,
    Operation,
    SolanaFeeEstimate,
    SPLFeeEstimate,
    VerifiedAddressResponse,
    WithdrawalQueueInfo,
    WithdrawalQueueResponse,
)
from hyperunit.engine.verifier import GuardianVerifier, verify_deposit_address_signatures
from hyperunit.exceptions import (
    ApiError,
    HyperUnitError,
    NetworkError,
    RequestTimeout,
    ResponseFormatError,
)
from hyperunit.helper.canonical import canonicalize

__all__ = [
    "Address",
    "AddressProposal",
    "ApiError",
    "ApiResponse",
    "Asset",
    "BitcoinFeeEstimate",
    "Chain",
    "DEFAULT_GUARDIAN_REGISTRY",
    "Environment",
    "EstimateFeesResponse",
    "EthereumFeeEstimate",
    "GenerateAddressParams",
    "GenerateAddressResponse",
    "GetOperationsResponse",
    "GuardianNode",
    "GuardianRegistry",
    "GuardianVerifier",
    "HyperUnitClient",
    "HyperUnitConfig",
    "HyperUnitError",
    "HyperUnitSDK",
    "KeyScheme",
    "MAINNET_GUARDIAN_NODES",
    "NetworkError",
    "NodeCheck",
    "NodeFailure",
    "Operation",
    "OperationState",
    "REQUIRED_SIGNER",
    "RequestTimeout",
    "ResponseFormatError",
    "SPLFeeEstimate",
    "Settings",
    "SolanaFeeEstimate",
    "TESTNET_GUARDIAN_NODES",
    "VerificationVerdict",
    "VerifiedAddressResponse",
    "WithdrawalQueueInfo",
    "WithdrawalQueueResponse",
    "canonicalize",
    "coin_type_for_asset",
    "create_sdk",
    "verify_deposit_address_signatures",
]
