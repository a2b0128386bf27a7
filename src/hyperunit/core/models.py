# src/hyperunit/core/models.py
from __future__ import annotations

from typing import Dict, Generic, List, Literal, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field

from hyperunit.core.attestation import VerificationVerdict
from hyperunit.core.enums import Asset, Chain, OperationState

T = TypeVar("T")


class WireModel(BaseModel):
    """
    Base for every model decoded from the HyperUnit API.

    The API mixes camelCase and hyphenated keys. Fields are declared in
    snake_case with the wire name as alias; both spellings are accepted on
    input, and `model_dump(by_alias=True)` reproduces the wire shape.
    Unknown keys are kept so that additions on the server side do not break
    decoding.
    """

    model_config = ConfigDict(populate_by_name=True, extra="allow")


# ======================================================================
# 1. Address generation
# ======================================================================

class GenerateAddressParams(BaseModel):
    """
    Parameters of GET /gen/:src_chain/:dst_chain/:asset/:dst_addr.
    """

    src_chain: Chain
    dst_chain: Chain
    asset: Asset
    dst_addr: str = Field(..., min_length=1)


class GenerateAddressResponse(WireModel):
    """
    Raw result of address generation.

    `signatures` maps guardian node id -> signature string (null when a node
    returned nothing). Nothing in this object is trusted
    until it has been run through the guardian verifier.
    """

    address: str
    signatures: Dict[str, Optional[str]] = Field(default_factory=dict)
    status: Literal["OK"] = "OK"


class VerifiedAddressResponse(GenerateAddressResponse):
    """
    Address generation result extended with the guardian verdict.
    """

    verification: VerificationVerdict


# ======================================================================
# 2. Operations
# ======================================================================

class Address(WireModel):
    """
    A deposit address known to the bridge, as listed by /operations.
    """

    source_coin_type: str = Field(..., alias="sourceCoinType")
    destination_chain: str = Field(..., alias="destinationChain")
    address: str
    signatures: Dict[str, Optional[str]] = Field(default_factory=dict)


class Operation(WireModel):
    """
    One bridge operation (deposit or withdrawal) and its current state.
    """

    op_created_at: str = Field(..., alias="opCreatedAt")
    operation_id: str = Field(..., alias="operationId")
    protocol_address: str = Field(..., alias="protocolAddress")
    source_address: str = Field(..., alias="sourceAddress")
    destination_address: str = Field(..., alias="destinationAddress")
    source_chain: Chain = Field(..., alias="sourceChain")
    destination_chain: Chain = Field(..., alias="destinationChain")
    source_amount: str = Field(..., alias="sourceAmount")
    destination_fee_amount: str = Field(..., alias="destinationFeeAmount")
    sweep_fee_amount: str = Field(..., alias="sweepFeeAmount")
    state_started_at: str = Field(..., alias="stateStartedAt")
    state_updated_at: str = Field(..., alias="stateUpdatedAt")
    state_next_attempt_at: str = Field(..., alias="stateNextAttemptAt")
    source_tx_hash: str = Field(..., alias="sourceTxHash")
    source_tx_confirmations: Optional[int] = Field(default=None, alias="sourceTxConfirmations")
    destination_tx_hash: str = Field(..., alias="destinationTxHash")
    destination_tx_confirmations: Optional[int] = Field(
        default=None, alias="destinationTxConfirmations"
    )
    broadcast_at: Optional[str] = Field(default=None, alias="broadcastAt")
    asset: Asset
    state: OperationState
    position_in_withdraw_queue: Optional[int] = Field(
        default=None, alias="positionInWithdrawQueue"
    )


class GetOperationsResponse(WireModel):
    addresses: List[Address] = Field(default_factory=list)
    operations: List[Operation] = Field(default_factory=list)


# ======================================================================
# 3. Fee estimates
# ======================================================================

class BitcoinFeeEstimate(WireModel):
    deposit_fee_rate_sats_per_vb: float = Field(..., alias="deposit-fee-rate-sats-per-vb")
    deposit_size_v_bytes: float = Field(..., alias="deposit-size-v-bytes")
    deposit_eta: str = Field(..., alias="depositEta")
    deposit_fee: float = Field(..., alias="depositFee")
    withdrawal_fee_rate_sats_per_vb: float = Field(..., alias="withdrawal-fee-rate-sats-per-vb")
    withdrawal_size_v_bytes: float = Field(..., alias="withdrawal-size-v-bytes")
    withdrawal_eta: str = Field(..., alias="withdrawalEta")
    withdrawal_fee: float = Field(..., alias="withdrawalFee")


class EthereumFeeEstimate(WireModel):
    base_fee: float = Field(..., alias="base-fee")
    deposit_eta: str = Field(..., alias="depositEta")
    deposit_fee: float = Field(..., alias="depositFee")
    eth_deposit_gas: float = Field(..., alias="eth-deposit-gas")
    eth_withdrawal_gas: float = Field(..., alias="eth-withdrawal-gas")
    priority_fee: float = Field(..., alias="priority-fee")
    withdrawal_eta: str = Field(..., alias="withdrawalEta")
    withdrawal_fee: float = Field(..., alias="withdrawalFee")


class SolanaFeeEstimate(WireModel):
    deposit_eta: str = Field(..., alias="depositEta")
    deposit_fee: float = Field(..., alias="depositFee")
    withdrawal_eta: str = Field(..., alias="withdrawalEta")
    withdrawal_fee: float = Field(..., alias="withdrawalFee")


class SPLFeeEstimate(SolanaFeeEstimate):
    pass


class EstimateFeesResponse(WireModel):
    """
    Current fee rates and processing time estimates, per network.
    """

    bitcoin: BitcoinFeeEstimate
    ethereum: EthereumFeeEstimate
    solana: SolanaFeeEstimate
    spl: SPLFeeEstimate


# ======================================================================
# 4. Withdrawal queue
# ======================================================================

class WithdrawalQueueInfo(WireModel):
    last_withdraw_queue_operation_tx_id: str = Field(
        ..., alias="lastWithdrawQueueOperationTxID"
    )
    withdrawal_queue_length: int = Field(..., alias="withdrawalQueueLength")


class WithdrawalQueueResponse(WireModel):
    bitcoin: WithdrawalQueueInfo
    ethereum: WithdrawalQueueInfo


# ======================================================================
# 5. Transport envelope
# ======================================================================

class ApiResponse(BaseModel, Generic[T]):
    """
    Decoded body plus the HTTP metadata it arrived with.
    """

    data: T
    status: int
    status_text: str = ""
    headers: Dict[str, str] = Field(default_factory=dict)
